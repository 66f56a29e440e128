import datetime
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from ..models import Customer, Employee, Transaction
from ..services import (create_project, dashboard_summary, issue_advance,
                        project_summary, record_transaction)
from ..services.dashboard import fund_positions, month_expenses, start_of_month


class DashboardTests(TestCase):
    def setUp(self):
        rajesh = Customer.objects.create(name="Rajesh Kumar")
        priya = Customer.objects.create(name="Priya Sharma")
        amit = Customer.objects.create(name="Amit Patel")
        self.living = create_project(
            rajesh, name="Living Room Furnishing", estimated_total="150000.00", status="active"
        )
        self.bedroom = create_project(
            priya, name="Bedroom Makeover", estimated_total="85000.00", status="active"
        )
        self.office = create_project(
            amit, name="Office Furniture", estimated_total="320000.00"
        )

    def record(self, project, kind, source, amount):
        return record_transaction(
            project=project,
            transaction_type=kind,
            fund_source=source,
            amount=amount,
            reason=f"{kind} via {source}",
        )

    def test_empty_books(self):
        summary = dashboard_summary()
        self.assertEqual(summary["cash_on_hand"], Decimal("0.00"))
        self.assertEqual(summary["bank_balance"], Decimal("0.00"))
        self.assertEqual(summary["month_expenses"], Decimal("0.00"))
        self.assertEqual(summary["recent_transactions"], [])

    def test_summary_figures(self):
        self.record(self.living, "credit", "bank", "50000.00")
        self.record(self.living, "debit", "bank", "35000.00")
        self.record(self.bedroom, "credit", "cash", "25000.00")
        issue_advance(employee=Employee.objects.create(name="Anita Desai"),
                      advance_amount="5000.00")

        summary = dashboard_summary()

        # the prospect project is not counted
        self.assertEqual(summary["active_projects"], 2)
        self.assertEqual(summary["total_outstanding"], Decimal("195000.00"))
        self.assertEqual(summary["cash_on_hand"], Decimal("25000.00"))
        self.assertEqual(summary["bank_balance"], Decimal("15000.00"))
        self.assertEqual(summary["month_expenses"], Decimal("35000.00"))
        self.assertEqual(summary["open_advances"], 1)
        self.assertEqual(summary["top_projects"][0], self.living)
        self.assertEqual(len(summary["recent_transactions"]), 3)

    def test_overdrawn_fund_clamped_only_for_display(self):
        self.record(self.living, "credit", "cash", "1000.00")
        self.record(self.living, "debit", "cash", "4000.00")

        self.assertEqual(fund_positions()["cash"], Decimal("-3000.00"))
        self.assertEqual(dashboard_summary()["cash_on_hand"], Decimal("0.00"))

    def test_month_expenses_ignore_earlier_months(self):
        old = self.record(self.living, "debit", "bank", "700.00")
        self.record(self.living, "debit", "cash", "300.00")
        self.record(self.living, "credit", "cash", "5000.00")
        Transaction.objects.filter(pk=old.pk).update(
            created_at=start_of_month() - datetime.timedelta(days=1)
        )

        self.assertEqual(month_expenses(), Decimal("300.00"))

    def test_start_of_month(self):
        now = timezone.make_aware(datetime.datetime(2025, 3, 17, 15, 30))
        start = start_of_month(now)
        self.assertEqual((start.year, start.month, start.day), (2025, 3, 1))
        self.assertEqual((start.hour, start.minute, start.second), (0, 0, 0))


class ProjectSummaryTests(TestCase):
    def setUp(self):
        self.customer = Customer.objects.create(name="Rajesh Kumar")

    def test_paid_pending_profit(self):
        project = create_project(
            self.customer, name="Living Room Furnishing", estimated_total="150000.00"
        )
        for kind, amount in [("credit", "50000.00"), ("debit", "35000.00")]:
            record_transaction(project=project, transaction_type=kind,
                               fund_source="bank", amount=amount, reason=kind)
        project.refresh_from_db()

        summary = project_summary(project)

        self.assertEqual(summary["total_value"], Decimal("150000.00"))
        self.assertEqual(summary["paid"], Decimal("50000.00"))
        self.assertEqual(summary["pending"], Decimal("135000.00"))
        self.assertEqual(summary["profit"], Decimal("35000.00"))
        self.assertEqual(summary["progress_percent"], Decimal("10.00"))

    def test_progress_clamped(self):
        project = create_project(self.customer, name="Overrun", estimated_total="1000.00")
        record_transaction(project=project, transaction_type="debit",
                           fund_source="cash", amount="500.00", reason="Extra")
        project.refresh_from_db()
        self.assertEqual(project_summary(project)["progress_percent"], Decimal("0.00"))

        empty = create_project(self.customer, name="Zero", estimated_total="0")
        self.assertEqual(project_summary(empty)["progress_percent"], Decimal("0.00"))
