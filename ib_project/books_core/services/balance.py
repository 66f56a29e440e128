"""
Project balance maintenance.

Every transaction mutation calls exactly one hook here, inside the caller's
atomic block:

    created   -> remaining += effect(new)
    modified  -> remaining += reversal(old) + effect(new)
    removed   -> remaining += reversal(old)

where effect is -amount for a credit (money received) and +amount for a
debit (money spent on the project). Each hook writes one
"project_balance_updated" activity log entry.
"""
import logging
from decimal import Decimal

from django.db.models import F
from django.utils import timezone

from ..exceptions import BalanceConsistencyError
from ..models import Project
from .audit_helper import log_action
from .money import quantize

logger = logging.getLogger(__name__)

BALANCE_ACTION = "project_balance_updated"


def credit_effect(transaction_type: str, amount) -> Decimal:
    """Change a transaction applies to its project's remaining_amount."""
    amount = quantize(amount)
    if transaction_type == "credit":
        return quantize(-amount)
    return amount


def reversal_effect(transaction_type: str, amount) -> Decimal:
    return quantize(-credit_effect(transaction_type, amount))


def _money(value) -> str:
    return str(quantize(value))


def apply_delta(project_id, delta: Decimal) -> None:
    """
    Add delta to the project's remaining_amount in the database.
    The only code path that writes remaining_amount after creation.
    """
    updated = Project.objects.filter(pk=project_id).update(
        remaining_amount=F("remaining_amount") + delta,
        updated_at=timezone.now(),
    )
    if updated != 1:
        logger.error(
            "Balance update hit %s rows for project %s (delta %s)",
            updated, project_id, delta,
        )
        raise BalanceConsistencyError(
            f"Project {project_id} not found while applying balance change {delta}"
        )
    logger.info("Project %s remaining_amount adjusted by %s", project_id, delta)


def expected_remaining(project) -> Decimal:
    """Recompute remaining_amount from scratch: estimate - credits + debits."""
    totals = project.transactions.totals()
    return quantize(project.estimated_total - totals["credit"] + totals["debit"])


def on_transaction_created(txn) -> Decimal:
    delta = credit_effect(txn.transaction_type, txn.amount)
    apply_delta(txn.project_id, delta)
    log_action(
        action=BALANCE_ACTION,
        data={
            "project_id": str(txn.project_id),
            "transaction_id": str(txn.pk),
            "transaction_type": txn.transaction_type,
            "amount": _money(txn.amount),
            "amount_change": _money(delta),
        },
    )
    return delta


def on_transaction_modified(old, new) -> Decimal:
    """
    old is a snapshot taken before the edit, new the saved row.
    When the project changed, the reversal lands on the old project and the
    new effect on the new one; the returned delta is the new project's.
    """
    reverse = reversal_effect(old.transaction_type, old.amount)
    effect = credit_effect(new.transaction_type, new.amount)
    data = {
        "project_id": str(new.project_id),
        "transaction_id": str(new.pk),
        "old_type": old.transaction_type,
        "new_type": new.transaction_type,
        "old_amount": _money(old.amount),
        "new_amount": _money(new.amount),
    }

    if old.project_id == new.project_id:
        # single combined adjustment
        delta = quantize(reverse + effect)
        apply_delta(new.project_id, delta)
    else:
        apply_delta(old.project_id, reverse)
        apply_delta(new.project_id, effect)
        delta = effect
        data["previous_project_id"] = str(old.project_id)
        data["previous_project_change"] = _money(reverse)

    data["amount_change"] = _money(delta)
    log_action(action=BALANCE_ACTION, data=data)
    return delta


def on_transaction_removed(txn) -> Decimal:
    delta = reversal_effect(txn.transaction_type, txn.amount)
    apply_delta(txn.project_id, delta)
    log_action(
        action=BALANCE_ACTION,
        data={
            "project_id": str(txn.project_id),
            "transaction_id": str(txn.pk),
            "amount": _money(txn.amount),
            "amount_change": _money(delta),
            "operation": "delete",
        },
    )
    return delta
