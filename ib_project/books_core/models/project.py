from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from ..managers import ProjectQuerySet
from .base import TimeStampedModel
from .customer import Customer

PROJECT_STATUS_CHOICES = [
    ("prospect", "Prospect"),
    ("active", "Active"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
]

# Current state vs. allowed next states
PROJECT_TRANSITIONS = {
    "prospect": ["active", "cancelled"],
    "active": ["completed", "cancelled"],
    "completed": [],
    "cancelled": [],
}


# ---------- Project ----------
class Project(TimeStampedModel):
    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="projects",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)

    # Quoted value of the job, fixed once the project exists
    estimated_total = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    # Amount still owed/to be spent.
    # Seeded from estimated_total on insert, afterwards only moved by
    # services.balance.apply_delta
    remaining_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20, choices=PROJECT_STATUS_CHOICES, default="prospect"
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    objects = ProjectQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["customer", "status"], name="project_customer_status_idx"),
            models.Index(fields=["status", "remaining_amount"], name="project_status_remaining_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(estimated_total__gte=0),
                name="project_estimated_total_non_negative",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("end_date cannot be before start_date")

        if self._state.adding:
            return super().clean()

        orig = Project.objects.only("estimated_total", "status").get(pk=self.pk)
        # The estimate anchors remaining_amount; editing it would break
        # remaining == estimated_total - credits + debits
        if orig.estimated_total != self.estimated_total:
            raise ValidationError(
                "estimated_total cannot be changed once the project exists."
            )
        if orig.status != self.status:
            self._check_transition(orig.status, self.status)
        return super().clean()

    def save(self, *args, **kwargs):
        if self._state.adding:
            # Opening balance always mirrors the estimate,
            # whatever the caller put in remaining_amount
            self.remaining_amount = self.estimated_total
        else:
            # Never write remaining_amount from here on
            update_fields = kwargs.get("update_fields")
            if update_fields is None:
                update_fields = [
                    f.name
                    for f in self._meta.concrete_fields
                    if not f.primary_key
                ]
            kwargs["update_fields"] = [
                name for name in update_fields if name != "remaining_amount"
            ]
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    @staticmethod
    def _check_transition(current, new_status):
        if new_status not in PROJECT_TRANSITIONS.get(current, []):
            raise ValidationError(f"Cannot go from {current} to {new_status}")

    def transition_to(self, new_status):
        self._check_transition(self.status, new_status)
        self.status = new_status
        self.save(update_fields=["status", "updated_at"])
        return self
