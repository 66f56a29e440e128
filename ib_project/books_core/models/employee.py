from django.db import models

from .base import TimeStampedModel


# ---------- Employee ----------
# Staff member who can receive petty-cash advances
class Employee(TimeStampedModel):
    name = models.CharField(max_length=200)
    department = models.CharField(max_length=100, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        if self.department:
            return f"{self.name} ({self.department})"
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
