from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.urls import reverse

from ..models import (ActivityLog, Customer, Employee, PettyCashAdvance,
                      Transaction, User)
from ..services import (create_project, issue_advance, record_advance_return,
                        record_transaction, void_transaction)


class AdminWriteTests(TestCase):
    """Admin edits must go through the ledger like every other caller."""

    def setUp(self):
        self.admin = User.objects.create_superuser("boss", "boss@example.com", "pw")
        self.client.force_login(self.admin)
        customer = Customer.objects.create(name="Rajesh Kumar")
        self.project = create_project(
            customer, name="Living Room Furnishing", estimated_total="150000.00", status="active"
        )

    def remaining(self):
        self.project.refresh_from_db()
        return self.project.remaining_amount

    def transaction_form(self, **overrides):
        data = {
            "project": str(self.project.pk),
            "transaction_type": "debit",
            "fund_source": "bank",
            "amount": "35000.00",
            "payment_mode": "UPI",
            "reason": "Payment to supplier for sofa",
            "metadata": "",
            "related_employee": "",
            "related_advance": "",
        }
        data.update(overrides)
        return data

    def test_superuser_gets_admin_role(self):
        self.assertEqual(self.admin.role, "admin")

    def test_add_change_delete_transaction(self):
        resp = self.client.post(
            reverse("admin:books_core_transaction_add"), self.transaction_form())
        self.assertEqual(resp.status_code, 302)
        txn = Transaction.objects.get()
        self.assertEqual(self.remaining(), Decimal("185000.00"))

        resp = self.client.post(
            reverse("admin:books_core_transaction_change", args=[txn.pk]),
            self.transaction_form(amount="40000.00"),
        )
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(self.remaining(), Decimal("190000.00"))

        resp = self.client.post(
            reverse("admin:books_core_transaction_delete", args=[txn.pk]), {"post": "yes"})
        self.assertEqual(resp.status_code, 302)
        self.assertFalse(Transaction.objects.exists())
        self.assertEqual(self.remaining(), Decimal("150000.00"))
        self.assertEqual(ActivityLog.objects.count(), 3)

    def test_void_action(self):
        txn = record_transaction(project=self.project, transaction_type="credit",
                                 fund_source="cash", amount="500.00", reason="Deposit")
        resp = self.client.post(reverse("admin:books_core_transaction_changelist"), {
            "action": "void_transactions",
            "_selected_action": [str(txn.pk)],
        })
        self.assertEqual(resp.status_code, 302)
        self.assertFalse(Transaction.objects.exists())
        self.assertEqual(self.remaining(), Decimal("150000.00"))

    def test_project_remaining_is_read_only(self):
        resp = self.client.get(
            reverse("admin:books_core_project_change", args=[self.project.pk]))
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("remaining_amount", resp.context["adminform"].form.fields)
        self.assertNotIn("estimated_total", resp.context["adminform"].form.fields)

    def test_activity_log_is_read_only(self):
        record_transaction(project=self.project, transaction_type="credit",
                           fund_source="cash", amount="500.00", reason="Deposit")
        entry = ActivityLog.objects.get()

        resp = self.client.get(reverse("admin:books_core_activitylog_changelist"))
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post(
            reverse("admin:books_core_activitylog_delete", args=[entry.pk]), {"post": "yes"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(ActivityLog.objects.count(), 1)

    def test_issue_and_settle_advance(self):
        employee = Employee.objects.create(name="Suresh Kumar")
        resp = self.client.post(reverse("admin:books_core_pettycashadvance_add"), {
            "employee": str(employee.pk),
            "project": str(self.project.pk),
            "advance_amount": "10000.00",
            "notes": "For miscellaneous procurement items",
        })
        self.assertEqual(resp.status_code, 302)
        advance = PettyCashAdvance.objects.get()
        self.assertEqual(self.remaining(), Decimal("160000.00"))

        resp = self.client.post(
            reverse("admin:books_core_pettycashadvance_change", args=[advance.pk]),
            {"expense_total": "7500.00", "returned_amount": "2500.00",
             "notes": "For miscellaneous procurement items"},
        )
        self.assertEqual(resp.status_code, 302)
        advance.refresh_from_db()
        self.assertEqual(advance.status, "closed")
        self.assertEqual(self.remaining(), Decimal("157500.00"))

    def test_unbalanced_settlement_shows_form_error(self):
        advance = issue_advance(employee=Employee.objects.create(name="Anita Desai"),
                                advance_amount="5000.00")
        resp = self.client.post(
            reverse("admin:books_core_pettycashadvance_change", args=[advance.pk]),
            {"expense_total": "1000.00", "returned_amount": "0.00", "notes": ""},
        )
        self.assertEqual(resp.status_code, 200)
        advance.refresh_from_db()
        self.assertEqual(advance.status, "open")

    def test_settlement_below_earlier_returns_shows_form_error(self):
        advance = issue_advance(employee=Employee.objects.create(name="Suresh Kumar"),
                                project=self.project, advance_amount="10000.00")
        record_advance_return(advance.pk, "3000.00")

        resp = self.client.post(
            reverse("admin:books_core_pettycashadvance_change", args=[advance.pk]),
            {"expense_total": "9000.00", "returned_amount": "1000.00", "notes": ""},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertIn("returned_amount", resp.context["adminform"].form.errors)
        advance.refresh_from_db()
        self.assertEqual(advance.status, "partially_returned")
        self.assertEqual(advance.returned_amount, Decimal("3000.00"))
        self.assertEqual(self.remaining(), Decimal("157000.00"))

    def test_void_action_reports_rows_it_could_not_void(self):
        kept = record_transaction(project=self.project, transaction_type="credit",
                                  fund_source="cash", amount="500.00", reason="Deposit")
        gone = record_transaction(project=self.project, transaction_type="debit",
                                  fund_source="cash", amount="200.00", reason="Paint")
        real_void = void_transaction

        def void_or_miss(txn_id):
            # row removed by someone else between selection and void
            if txn_id == kept.pk:
                raise Transaction.DoesNotExist
            return real_void(txn_id)

        with mock.patch("books_core.admin.actions.void_transaction", side_effect=void_or_miss):
            resp = self.client.post(
                reverse("admin:books_core_transaction_changelist"),
                {"action": "void_transactions",
                 "_selected_action": [str(kept.pk), str(gone.pk)]},
                follow=True,
            )

        self.assertEqual(resp.status_code, 200)
        texts = [str(m) for m in resp.context["messages"]]
        self.assertTrue(any("Could not void" in t for t in texts))
        self.assertTrue(any("Voided 1 transactions. 1 failed." in t for t in texts))
        self.assertEqual(list(Transaction.objects.values_list("pk", flat=True)), [kept.pk])
