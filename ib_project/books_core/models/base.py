import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """UUID primary key plus created/updated stamps shared by every ledger table."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    # refreshed on every save (replaces the old update_updated_at trigger)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
