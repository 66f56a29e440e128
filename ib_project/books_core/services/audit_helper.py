from ..models import ActivityLog


def log_action(*, action: str, data: dict | None = None,
               actor_type: str = "system", actor_id=None) -> ActivityLog:
    """
    Append one activity log entry.
    Callers run inside the same atomic block as the change they describe.
    """
    return ActivityLog.objects.create(
        actor_type=actor_type,
        actor_id=actor_id,
        action=action,
        data=data,
    )
