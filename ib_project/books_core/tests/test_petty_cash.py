from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..models import Customer, Employee, PettyCashAdvance, Transaction
from ..services import (create_project, issue_advance, record_advance_return,
                        settle_advance)
from ..services.petty_cash import RETURN_REASON


class PettyCashTests(TestCase):
    def setUp(self):
        customer = Customer.objects.create(name="Rajesh Kumar")
        self.project = create_project(
            customer,
            name="Living Room Furnishing",
            estimated_total="150000.00",
            status="active",
        )
        self.employee = Employee.objects.create(name="Suresh Kumar", department="Procurement")

    def remaining(self):
        self.project.refresh_from_db()
        return self.project.remaining_amount

    def test_project_advance_books_cash_out(self):
        advance = issue_advance(
            employee=self.employee, project=self.project, advance_amount="10000.00"
        )

        self.assertEqual(advance.status, "open")
        txn = Transaction.objects.get(related_advance=advance)
        self.assertEqual(txn.transaction_type, "debit")
        self.assertEqual(txn.fund_source, "cash")
        self.assertEqual(txn.related_employee, self.employee)
        self.assertEqual(txn.reason, "Petty cash advance to Suresh Kumar")
        self.assertEqual(self.remaining(), Decimal("160000.00"))

    def test_general_advance_has_no_transaction(self):
        advance = issue_advance(employee=self.employee, advance_amount="5000.00")

        self.assertIsNone(advance.project)
        self.assertFalse(Transaction.objects.exists())

    def test_zero_advance_rejected(self):
        with self.assertRaises(ValidationError):
            issue_advance(employee=self.employee, advance_amount="0")
        self.assertFalse(PettyCashAdvance.objects.exists())

    def test_partial_return_then_settle(self):
        advance = issue_advance(
            employee=self.employee, project=self.project, advance_amount="10000.00"
        )

        advance = record_advance_return(advance.pk, "2000.00")
        self.assertEqual(advance.status, "partially_returned")
        self.assertEqual(advance.returned_amount, Decimal("2000.00"))
        self.assertEqual(self.remaining(), Decimal("158000.00"))

        advance = settle_advance(advance.pk, "7500.00", "2500.00")
        self.assertEqual(advance.status, "closed")
        self.assertEqual(advance.unaccounted_amount, Decimal("0.00"))

        # only the extra 500 comes back as a new credit
        returns = Transaction.objects.filter(reason=RETURN_REASON).order_by("amount")
        self.assertEqual(
            [t.amount for t in returns], [Decimal("500.00"), Decimal("2000.00")]
        )
        self.assertEqual(self.remaining(), Decimal("157500.00"))

    def test_settlement_must_balance(self):
        advance = issue_advance(employee=self.employee, advance_amount="10000.00")

        with self.assertLogs("books_core.services.petty_cash", level="WARNING"):
            with self.assertRaisesMessage(
                ValidationError, "Expense + Returned amount must equal Advance amount"
            ):
                settle_advance(advance.pk, "7500.00", "2000.00")

        advance.refresh_from_db()
        self.assertEqual(advance.status, "open")
        self.assertEqual(advance.expense_total, Decimal("0.00"))

    def test_settlement_cannot_lower_returned_amount(self):
        advance = issue_advance(employee=self.employee, advance_amount="10000.00")
        record_advance_return(advance.pk, "2000.00")

        with self.assertRaises(ValidationError):
            settle_advance(advance.pk, "8500.00", "1500.00")

    def test_closed_advance_is_final(self):
        advance = issue_advance(employee=self.employee, advance_amount="5000.00")
        settle_advance(advance.pk, "5000.00", "0.00")

        with self.assertRaises(ValidationError):
            settle_advance(advance.pk, "5000.00", "0.00")
        with self.assertRaises(ValidationError):
            record_advance_return(advance.pk, "1.00")

    def test_return_cannot_exceed_outstanding(self):
        advance = issue_advance(employee=self.employee, advance_amount="1000.00")
        with self.assertRaises(ValidationError):
            record_advance_return(advance.pk, "1000.01")

    def test_model_rejects_overspent_advance(self):
        with self.assertRaises(ValidationError):
            PettyCashAdvance.objects.create(
                employee=self.employee,
                advance_amount=Decimal("100.00"),
                expense_total=Decimal("80.00"),
                returned_amount=Decimal("30.00"),
            )
