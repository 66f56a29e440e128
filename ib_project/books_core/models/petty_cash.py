from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from ..managers import PettyCashAdvanceQuerySet
from .base import TimeStampedModel
from .employee import Employee
from .project import Project

ADVANCE_STATUS_CHOICES = [
    ("open", "Open"),
    ("partially_returned", "Partially returned"),
    ("closed", "Closed"),
]

NON_NEGATIVE = [MinValueValidator(Decimal("0.00"))]


# ---------- Petty cash ----------
class PettyCashAdvance(TimeStampedModel):
    """
    Float handed to an employee; later reconciled into
    expense_total + returned_amount == advance_amount.
    """
    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name="advances"
    )
    # Office/site expenses are tied to a project; general floats are not
    project = models.ForeignKey(
        Project,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="advances",
    )
    advance_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00"),
        validators=NON_NEGATIVE,
    )
    expense_total = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00"),
        validators=NON_NEGATIVE,
    )
    returned_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00"),
        validators=NON_NEGATIVE,
    )
    status = models.CharField(
        max_length=20, choices=ADVANCE_STATUS_CHOICES, default="open"
    )
    notes = models.TextField(blank=True, null=True)

    objects = PettyCashAdvanceQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at",)
        verbose_name = "petty cash advance"
        indexes = [
            models.Index(fields=["employee", "status"], name="advance_employee_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(advance_amount__gte=0)
                & models.Q(expense_total__gte=0)
                & models.Q(returned_amount__gte=0),
                name="advance_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return f"{self.employee.name} - {self.advance_amount} ({self.status})"

    @property
    def unaccounted_amount(self):
        # Part of the float neither spent nor handed back yet
        return self.advance_amount - self.expense_total - self.returned_amount

    def clean(self):
        if self.expense_total + self.returned_amount > self.advance_amount:
            raise ValidationError(
                "Expense + Returned amount cannot exceed the advance amount"
            )
        return super().clean()

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        allowed = {
            "open": ["partially_returned", "closed"],
            # further returns keep it partially returned
            "partially_returned": ["partially_returned", "closed"],
            "closed": [],
        }
        if new_status not in allowed.get(self.status, []):
            raise ValidationError(
                f"Cannot go from {self.status} to {new_status}")
        self.status = new_status
        self.save()
        return self
