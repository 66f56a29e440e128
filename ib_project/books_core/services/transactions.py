import copy
import logging
import uuid

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Project, Transaction
from .balance import (on_transaction_created, on_transaction_modified,
                      on_transaction_removed)
from .money import parse_amount
from .validation import check_amendment, check_transaction_kind, require_text

logger = logging.getLogger(__name__)


def _pk(obj_or_pk):
    # instances, UUIDs and UUID strings all come back as UUID
    value = getattr(obj_or_pk, "pk", obj_or_pk)
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError({"project": f"'{value}' is not a valid id."})


def _lock_projects(project_ids):
    """
    Lock the given project rows in pk order and return them keyed by pk.
    """
    projects = {
        p.pk: p
        for p in Project.objects.select_for_update().filter(
            pk__in=set(project_ids)).order_by("pk")
    }
    return projects


# ----------------------------
# Transaction workflows
# ----------------------------
def record_transaction(*, project, transaction_type, fund_source, amount, reason,
                       payment_mode="", metadata=None, related_employee=None,
                       related_advance=None) -> Transaction:
    """
    Insert a transaction and apply its effect to the project balance
    in one atomic unit.
    """
    check_transaction_kind(transaction_type, fund_source)
    amount = parse_amount(amount)
    reason = require_text(reason, "reason")

    with transaction.atomic():
        projects = _lock_projects([_pk(project)])
        locked = projects.get(_pk(project))
        if locked is None:
            raise ValidationError({"project": f"Project {_pk(project)} does not exist."})

        txn = Transaction(
            project=locked,
            customer_id=locked.customer_id,
            transaction_type=transaction_type,
            fund_source=fund_source,
            amount=amount,
            payment_mode=payment_mode or "",
            reason=reason,
            metadata=metadata,
            related_employee=related_employee,
            related_advance=related_advance,
        )
        txn.save(maintained=True)
        on_transaction_created(txn)

    logger.info("Recorded %s %s on project %s", transaction_type, amount, locked.pk)
    return txn


def amend_transaction(transaction_id, **changes) -> Transaction:
    """
    Change an existing transaction. The balance moves by
    reversal(old) + effect(new); a project move touches both projects.
    """
    changes = check_amendment(dict(changes))
    changed_fields = ", ".join(sorted(changes)) or "nothing"
    if "amount" in changes:
        changes["amount"] = parse_amount(changes["amount"])

    with transaction.atomic():
        txn = Transaction.objects.select_for_update().get(pk=transaction_id)
        old = copy.copy(txn)

        new_project_id = _pk(changes.pop("project", txn.project_id))
        projects = _lock_projects([old.project_id, new_project_id])
        if new_project_id not in projects:
            raise ValidationError({"project": f"Project {new_project_id} does not exist."})

        for field, value in changes.items():
            setattr(txn, field, value)
        if new_project_id != old.project_id:
            new_project = projects[new_project_id]
            txn.project = new_project
            # keep the denormalized customer in step with the project
            txn.customer_id = new_project.customer_id

        txn.save(maintained=True)
        on_transaction_modified(old, txn)

    logger.info("Amended transaction %s (%s)", txn.pk, changed_fields)
    return txn


def void_transaction(transaction_id) -> Transaction:
    """
    Delete a transaction and reverse its effect. Returns the removed row
    (still carrying its original pk).
    """
    with transaction.atomic():
        txn = Transaction.objects.select_for_update().get(pk=transaction_id)
        _lock_projects([txn.project_id])
        removed = copy.copy(txn)
        txn.delete(maintained=True)
        on_transaction_removed(removed)

    logger.info("Voided transaction %s on project %s", removed.pk, removed.project_id)
    return removed
