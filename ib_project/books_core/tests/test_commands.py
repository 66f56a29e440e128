from decimal import Decimal
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from ..models import (ActivityLog, Customer, PettyCashAdvance, Project,
                      Transaction, User)


class SeedDemoTests(TestCase):
    def test_seed_builds_consistent_books(self):
        call_command("seed_demo", stdout=StringIO())

        self.assertTrue(User.objects.filter(username="demo").exists())
        self.assertEqual(Customer.objects.count(), 3)
        self.assertEqual(Transaction.objects.count(), 3)
        self.assertEqual(ActivityLog.objects.count(), 3)

        remaining = dict(Project.objects.values_list("name", "remaining_amount"))
        self.assertEqual(remaining["Living Room Furnishing"], Decimal("135000.00"))
        self.assertEqual(remaining["Bedroom Makeover"], Decimal("60000.00"))
        self.assertEqual(remaining["Office Furniture"], Decimal("320000.00"))

        suresh = PettyCashAdvance.objects.get(employee__name="Suresh Kumar")
        self.assertEqual(suresh.status, "partially_returned")
        self.assertEqual(suresh.unaccounted_amount, Decimal("500.00"))

    def test_seed_is_idempotent(self):
        call_command("seed_demo", stdout=StringIO())
        out = StringIO()
        call_command("seed_demo", stdout=out)

        self.assertIn("already present", out.getvalue())
        self.assertEqual(Customer.objects.count(), 3)


class VerifyBalancesTests(TestCase):
    def setUp(self):
        call_command("seed_demo", stdout=StringIO())

    def test_clean_books_pass(self):
        out = StringIO()
        call_command("verify_balances", stdout=out)
        self.assertIn("All project balances match", out.getvalue())

    def test_drift_is_reported(self):
        Project.objects.filter(name="Bedroom Makeover").update(
            remaining_amount=Decimal("1.00"))
        out = StringIO()

        with self.assertLogs("books_core.management.commands.verify_balances", level="ERROR"):
            with self.assertRaises(CommandError):
                call_command("verify_balances", stdout=out)
        self.assertIn("Bedroom Makeover", out.getvalue())

    def test_malformed_project_id(self):
        with self.assertRaisesMessage(CommandError, "'not-a-uuid' is not a valid project id"):
            call_command("verify_balances", project="not-a-uuid", stdout=StringIO())
