import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import PettyCashAdvance
from .money import ZERO, parse_amount
from .transactions import record_transaction

logger = logging.getLogger(__name__)

RETURN_REASON = "Returned balance from petty cash advance"


def _record_return(advance, amount):
    record_transaction(
        project=advance.project_id,
        transaction_type="credit",
        fund_source="cash",
        amount=amount,
        payment_mode="Cash",
        reason=RETURN_REASON,
        related_employee=advance.employee,
        related_advance=advance,
    )


# ----------------------------
# Petty cash workflows
# ----------------------------
def issue_advance(*, employee, advance_amount, project=None, notes=None,
                  record_cash_out=True) -> PettyCashAdvance:
    """
    Hand a float to an employee. Project-linked advances also book the
    cash debit against the project, so its balance reflects the money out.
    """
    amount = parse_amount(advance_amount, "advance_amount")
    if amount == ZERO:
        raise ValidationError({"advance_amount": "Advance amount must be positive."})

    with transaction.atomic():
        advance = PettyCashAdvance.objects.create(
            employee=employee,
            project=project,
            advance_amount=amount,
            notes=notes,
        )
        if project is not None and record_cash_out:
            record_transaction(
                project=project,
                transaction_type="debit",
                fund_source="cash",
                amount=amount,
                payment_mode="Cash",
                reason=f"Petty cash advance to {employee.name}",
                related_employee=employee,
                related_advance=advance,
            )

    logger.info("Issued advance %s of %s to %s", advance.pk, amount, employee)
    return advance


def record_advance_return(advance_id, amount) -> PettyCashAdvance:
    """Employee hands back part of the float; the advance stays open for settlement."""
    amount = parse_amount(amount, "returned_amount")
    if amount == ZERO:
        raise ValidationError({"returned_amount": "Returned amount must be positive."})

    with transaction.atomic():
        advance = (PettyCashAdvance.objects.select_for_update()
                   .select_related("employee").get(pk=advance_id))
        if advance.status == "closed":
            raise ValidationError("Advance is already closed.")
        if amount > advance.unaccounted_amount:
            raise ValidationError(
                "Returned amount exceeds what is still outstanding on the advance.")

        advance.returned_amount += amount
        advance.transition_to("partially_returned")
        if advance.project_id:
            _record_return(advance, amount)

    return advance


def settle_advance(advance_id, expense_total, returned_amount) -> PettyCashAdvance:
    """
    Close an advance. expense_total + returned_amount must equal the
    advance amount; returned_amount is the running total, including any
    earlier partial returns.
    """
    expense_total = parse_amount(expense_total, "expense_total")
    returned_amount = parse_amount(returned_amount, "returned_amount")

    with transaction.atomic():
        advance = (PettyCashAdvance.objects.select_for_update()
                   .select_related("employee").get(pk=advance_id))
        if advance.status == "closed":
            raise ValidationError("Advance is already closed.")
        if expense_total + returned_amount != advance.advance_amount:
            logger.warning(
                "Rejected settlement of advance %s: %s + %s != %s",
                advance.pk, expense_total, returned_amount, advance.advance_amount,
            )
            raise ValidationError("Expense + Returned amount must equal Advance amount")

        additional_return = returned_amount - advance.returned_amount
        if additional_return < 0:
            raise ValidationError(
                "Returned amount cannot be lower than what was already returned.")

        advance.expense_total = expense_total
        advance.returned_amount = returned_amount
        advance.transition_to("closed")
        if advance.project_id and additional_return > 0:
            _record_return(advance, additional_return)

    logger.info("Settled advance %s", advance.pk)
    return advance
