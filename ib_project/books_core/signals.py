"""Activity log rows are never removed, not even by a cascade or bulk delete."""
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .exceptions import ActivityLogImmutable
from .models import ActivityLog


# pre_delete fires for every row the deletion collector visits
@receiver(pre_delete, sender=ActivityLog)
def prevent_delete_activity_log(sender, instance, **kwargs):
    raise ActivityLogImmutable("Activity log entries cannot be deleted.")
