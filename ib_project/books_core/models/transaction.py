from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator
from django.db import models

from ..exceptions import UnmaintainedTransactionWrite
from ..managers import TransactionManager
from .base import TimeStampedModel
from .customer import Customer
from .employee import Employee
from .petty_cash import PettyCashAdvance
from .project import Project

TRANSACTION_TYPE_CHOICES = [
    # money received toward the project: lowers remaining_amount
    ("credit", "Credit"),
    # money spent on behalf of the project: raises remaining_amount
    ("debit", "Debit"),
]

FUND_SOURCE_CHOICES = [
    ("cash", "Cash"),
    ("bank", "Bank"),
]


# ---------- Transaction ----------
class Transaction(TimeStampedModel):
    """
    A cash or bank movement recorded against a project.

    Rows are written only through services.transactions, which adjusts the
    project's remaining_amount in the same atomic block. save()/delete()
    refuse to run unless called with maintained=True.
    """
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="transactions"
    )
    # Denormalized from project.customer
    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="transactions"
    )
    transaction_type = models.CharField(
        max_length=10, choices=TRANSACTION_TYPE_CHOICES
    )
    fund_source = models.CharField(max_length=10, choices=FUND_SOURCE_CHOICES)
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    # Free text: "NEFT", "UPI", "Cash", "Cheque"...
    payment_mode = models.CharField(max_length=100, blank=True, default="")
    reason = models.TextField()
    # e.g. {"bank": "HDFC Bank", "utr": "UTR202501150001"}
    metadata = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    related_employee = models.ForeignKey(
        Employee,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transactions",
    )
    related_advance = models.ForeignKey(
        PettyCashAdvance,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transactions",
    )

    objects = TransactionManager()

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["project", "transaction_type"], name="txn_project_type_idx"),
            models.Index(fields=["fund_source", "transaction_type"], name="txn_fund_source_type_idx"),
            models.Index(fields=["created_at"], name="txn_created_at_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="transaction_amount_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} ({self.fund_source}) - {self.reason}"

    @property
    def is_credit(self):
        return self.transaction_type == "credit"

    def clean(self):
        # customer is a copy of project.customer, never an independent choice
        if (self.project_id and self.customer_id
                and self.customer_id != self.project.customer_id):
            raise ValidationError(
                "Transaction customer must match the project's customer.")

        adv = self.related_advance
        if adv and self.related_employee_id and adv.employee_id != self.related_employee_id:
            raise ValidationError(
                "Related advance belongs to a different employee.")
        return super().clean()

    def save(self, *args, maintained=False, **kwargs):
        if not maintained:
            raise UnmaintainedTransactionWrite(
                "Transactions must be written through the ledger service "
                "(record_transaction / amend_transaction)."
            )
        if self.project_id and not self.customer_id:
            self.customer_id = self.project.customer_id
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, maintained=False, **kwargs):
        if not maintained:
            raise UnmaintainedTransactionWrite(
                "Transactions must be removed through the ledger service "
                "(void_transaction)."
            )
        return super().delete(*args, **kwargs)
