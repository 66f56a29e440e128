import datetime
import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from books_core.models import Customer, Employee, PettyCashAdvance
from books_core.services import create_project, issue_advance, record_transaction

logger = logging.getLogger(__name__)

User = get_user_model()

CUSTOMERS = [
    ("Rajesh Kumar", "123 MG Road, Bangalore", "+91-9876543210",
     "rajesh.kumar@email.com", "Premium customer, prefers contemporary designs"),
    ("Priya Sharma", "456 Park Street, Mumbai", "+91-9876543211",
     "priya.sharma@email.com", "Budget-conscious, looking for modular furniture"),
    ("Amit Patel", "789 Ring Road, Ahmedabad", "+91-9876543212",
     "amit.patel@email.com", "Corporate client, office furnishing"),
]

EMPLOYEES = [
    ("Suresh Kumar", "Procurement", "suresh@company.com", "+91-9123456789"),
    ("Anita Desai", "Installation", "anita@company.com", "+91-9123456790"),
]

# (customer, name, description, estimated_total, status, start_date)
PROJECTS = [
    ("Rajesh Kumar", "Living Room Furnishing",
     "Complete living room setup with sofa, TV unit, and coffee table",
     "150000.00", "active", datetime.date(2025, 1, 15)),
    ("Priya Sharma", "Bedroom Makeover",
     "Modular wardrobe and bed with storage",
     "85000.00", "active", datetime.date(2025, 2, 1)),
    ("Amit Patel", "Office Furniture",
     "Workstations, cabinets, and conference table",
     "320000.00", "prospect", datetime.date(2025, 3, 1)),
]

# (project, type, fund source, amount, payment mode, reason, metadata)
TRANSACTIONS = [
    ("Living Room Furnishing", "credit", "bank", "50000.00", "NEFT",
     "Advance payment for project",
     {"bank": "HDFC Bank", "utr": "UTR202501150001", "account_last4": "1234"}),
    ("Living Room Furnishing", "debit", "bank", "35000.00", "UPI",
     "Payment to supplier for sofa",
     {"bank": "ICICI Bank", "utr": "UPI202501180001", "supplier": "Modern Furniture Co."}),
    ("Bedroom Makeover", "credit", "cash", "25000.00", "Cash",
     "Initial deposit", {}),
]


class Command(BaseCommand):
    help = "Seed customers, projects, transactions and petty cash advances for a demo."

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--username", default="demo", help="Username for the demo user."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo user."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = options["username"]
        password = options["password"]

        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                "email": f"{username}@example.com",
                "full_name": "Demo User",
                "is_staff": True,
            },
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(
                self.style.SUCCESS(f"Created user: {user.username} (pw={password})"))

        if Customer.objects.filter(name=CUSTOMERS[0][0]).exists():
            self.stdout.write(self.style.WARNING("Demo data already present, skipping."))
            return

        # 1. Customers and employees
        customers = {}
        for name, address, phone, email, notes in CUSTOMERS:
            customers[name] = Customer.objects.create(
                name=name, address=address, phone_number=phone,
                email=email, notes=notes,
            )
        employees = {}
        for name, department, email, phone in EMPLOYEES:
            employees[name] = Employee.objects.create(
                name=name, department=department, email=email, phone=phone,
            )
        self.stdout.write(self.style.SUCCESS(
            f"Created {len(customers)} customers, {len(employees)} employees"))

        # 2. Projects; remaining_amount starts at the estimate
        projects = {}
        for customer, name, description, estimate, status, start in PROJECTS:
            projects[name] = create_project(
                customers[customer],
                name=name,
                description=description,
                estimated_total=estimate,
                status=status,
                start_date=start,
            )

        # 3. Transactions through the ledger so balances follow
        for project, kind, source, amount, mode, reason, metadata in TRANSACTIONS:
            record_transaction(
                project=projects[project],
                transaction_type=kind,
                fund_source=source,
                amount=amount,
                payment_mode=mode,
                reason=reason,
                metadata=metadata,
            )

        # 4. Petty cash: floats already handed out before the books started
        suresh = issue_advance(
            employee=employees["Suresh Kumar"],
            project=projects["Living Room Furnishing"],
            advance_amount="10000.00",
            notes="For miscellaneous procurement items",
            record_cash_out=False,
        )
        suresh.expense_total = Decimal("7500.00")
        suresh.returned_amount = Decimal("2000.00")
        suresh.transition_to("partially_returned")

        issue_advance(
            employee=employees["Anita Desai"],
            advance_amount="5000.00",
            notes="Site installation expenses",
        )

        for project in projects.values():
            project.refresh_from_db()
            self.stdout.write(f"  {project.name}: remaining {project.remaining_amount}")
        logger.info("Seeded demo data (%s advances)", PettyCashAdvance.objects.count())
        self.stdout.write(self.style.SUCCESS("Demo data seeded successfully!"))
