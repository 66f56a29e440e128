from django.core.exceptions import ValidationError

from ..models.project import PROJECT_STATUS_CHOICES
from ..models.transaction import FUND_SOURCE_CHOICES, TRANSACTION_TYPE_CHOICES

# Fields a caller may change on an existing transaction
AMENDABLE_TRANSACTION_FIELDS = (
    "project",
    "transaction_type",
    "fund_source",
    "amount",
    "payment_mode",
    "reason",
    "metadata",
    "related_employee",
    "related_advance",
)


def require_text(value, field):
    if value is None or not str(value).strip():
        raise ValidationError({field: "This field is required."})
    return str(value).strip()


def require_choice(value, choices, field):
    allowed = [key for key, _ in choices]
    if value not in allowed:
        raise ValidationError(
            {field: f"'{value}' is not one of: {', '.join(allowed)}."})
    return value


def check_transaction_kind(transaction_type, fund_source):
    require_choice(transaction_type, TRANSACTION_TYPE_CHOICES, "transaction_type")
    require_choice(fund_source, FUND_SOURCE_CHOICES, "fund_source")


def check_amendment(changes):
    """Reject unknown fields before anything is locked or written."""
    unknown = sorted(set(changes) - set(AMENDABLE_TRANSACTION_FIELDS))
    if unknown:
        raise ValidationError(
            f"Cannot amend field(s): {', '.join(unknown)}")
    if "transaction_type" in changes:
        require_choice(changes["transaction_type"], TRANSACTION_TYPE_CHOICES,
                       "transaction_type")
    if "fund_source" in changes:
        require_choice(changes["fund_source"], FUND_SOURCE_CHOICES, "fund_source")
    if "reason" in changes:
        changes["reason"] = require_text(changes["reason"], "reason")
    if "project" in changes and changes["project"] is None:
        raise ValidationError({"project": "A transaction must belong to a project."})
    return changes


def check_project_status(status):
    return require_choice(status, PROJECT_STATUS_CHOICES, "status")
