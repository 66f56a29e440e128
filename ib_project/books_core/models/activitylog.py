import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from ..exceptions import ActivityLogImmutable
from ..managers import ActivityLogManager


# ---------- Audit / Activity log ----------
class ActivityLog(models.Model):  # Append-only trail of balance adjustments
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # "system" for automatic adjustments
    actor_type = models.CharField(max_length=20, null=True, blank=True)
    actor_id = models.UUIDField(null=True, blank=True)
    # e.g. "project_balance_updated"
    action = models.CharField(max_length=100)
    # Structured payload; money is stored as two-decimal strings
    data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(default=timezone.now, editable=False)

    objects = ActivityLogManager()

    class Meta:
        ordering = ("timestamp",)
        indexes = [
            models.Index(fields=["action", "timestamp"], name="activitylog_action_ts_idx"),
        ]

    def __str__(self):
        return f"[{self.timestamp:%Y-%m-%d %H:%M}] {self.actor_type or '-'} {self.action}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ActivityLogImmutable("Activity log entries cannot be edited.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ActivityLogImmutable("Activity log entries cannot be deleted.")
