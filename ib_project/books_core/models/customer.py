from django.db import models

from .base import TimeStampedModel


# ---------- Customer ----------
# Client a project is delivered for; owns projects and (denormalized) transactions
class Customer(TimeStampedModel):
    name = models.CharField(max_length=200)
    address = models.TextField(blank=True, null=True)
    phone_number = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    # Free-form preferences, e.g. "prefers contemporary designs"
    notes = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ("name",)
        indexes = [models.Index(fields=["name"], name="customer_name_idx")]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
