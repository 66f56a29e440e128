import json
import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from .models import PettyCashAdvance, Project, Transaction
from .services import (amend_transaction, dashboard_summary, project_summary,
                       record_transaction, settle_advance, void_transaction)
from .services.money import ZERO

logger = logging.getLogger(__name__)

# Employee/advance links are set from the admin, not over JSON
JSON_AMENDABLE_FIELDS = (
    "project",
    "transaction_type",
    "fund_source",
    "amount",
    "payment_mode",
    "reason",
    "metadata",
)


def _money(value):
    return f"{value:.2f}"


def _error(exc):
    # ValidationError carries either a message list or a field dict
    detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
    return JsonResponse({"ok": False, "error": detail}, status=400)


def _payload(request):
    # JSON bodies from the SPA, form posts from everything else
    if request.content_type == "application/json":
        try:
            body = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationError("Request body is not valid JSON.")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object.")
        return body
    return request.POST.dict()


def _transaction_json(txn):
    return {
        "id": str(txn.pk),
        "project_id": str(txn.project_id),
        "customer_id": str(txn.customer_id),
        "transaction_type": txn.transaction_type,
        "fund_source": txn.fund_source,
        "amount": _money(txn.amount),
        "payment_mode": txn.payment_mode,
        "reason": txn.reason,
        "created_at": txn.created_at.isoformat() if txn.created_at else None,
    }


def _remaining(project_id):
    return _money(Project.objects.values_list(
        "remaining_amount", flat=True).get(pk=project_id))


# ----------------------------
# Read views
# ----------------------------
@login_required
@require_GET
def dashboard_view(request):
    try:
        summary = dashboard_summary()
    except DatabaseError:
        # Show an empty dashboard rather than a 500
        logger.exception("Dashboard query failed")
        return JsonResponse({
            "active_projects": 0,
            "total_outstanding": _money(ZERO),
            "cash_on_hand": _money(ZERO),
            "bank_balance": _money(ZERO),
            "month_expenses": _money(ZERO),
            "open_advances": 0,
            "top_projects": [],
            "recent_transactions": [],
        })

    return JsonResponse({
        "active_projects": summary["active_projects"],
        "total_outstanding": _money(summary["total_outstanding"]),
        "cash_on_hand": _money(summary["cash_on_hand"]),
        "bank_balance": _money(summary["bank_balance"]),
        "month_expenses": _money(summary["month_expenses"]),
        "open_advances": summary["open_advances"],
        "top_projects": [
            {
                "id": str(p.pk),
                "name": p.name,
                "customer": p.customer.name,
                "remaining_amount": _money(p.remaining_amount),
            }
            for p in summary["top_projects"]
        ],
        "recent_transactions": [
            _transaction_json(t) for t in summary["recent_transactions"]
        ],
    })


@login_required
@require_GET
def project_summary_view(request, project_id):
    project = get_object_or_404(Project, pk=project_id)
    summary = project_summary(project)
    return JsonResponse({
        "id": str(project.pk),
        "name": project.name,
        "status": project.status,
        "total_value": _money(summary["total_value"]),
        "paid": _money(summary["paid"]),
        "pending": _money(summary["pending"]),
        "profit": _money(summary["profit"]),
        "progress_percent": _money(summary["progress_percent"]),
    })


# ----------------------------
# Write views
# ----------------------------
@login_required
@require_POST
def record_transaction_view(request):
    try:
        data = _payload(request)
        txn = record_transaction(
            project=data.get("project"),
            transaction_type=data.get("transaction_type"),
            fund_source=data.get("fund_source"),
            amount=data.get("amount"),
            reason=data.get("reason"),
            payment_mode=data.get("payment_mode") or "",
            metadata=data.get("metadata"),
        )
    except ValidationError as e:
        return _error(e)
    return JsonResponse(
        {"ok": True, "transaction": _transaction_json(txn),
         "remaining_amount": _remaining(txn.project_id)},
        status=201,
    )


@login_required
@require_POST
def amend_transaction_view(request, transaction_id):
    try:
        data = _payload(request)
        changes = {k: v for k, v in data.items() if k in JSON_AMENDABLE_FIELDS}
        unknown = sorted(set(data) - set(changes))
        if unknown:
            raise ValidationError(f"Cannot amend field(s): {', '.join(unknown)}")
        txn = amend_transaction(transaction_id, **changes)
    except Transaction.DoesNotExist:
        raise Http404("No transaction matches the given query.")
    except ValidationError as e:
        return _error(e)
    return JsonResponse({"ok": True, "transaction": _transaction_json(txn),
                         "remaining_amount": _remaining(txn.project_id)})


@login_required
@require_POST
def void_transaction_view(request, transaction_id):
    try:
        removed = void_transaction(transaction_id)
    except Transaction.DoesNotExist:
        raise Http404("No transaction matches the given query.")
    return JsonResponse({"ok": True, "transaction_id": str(removed.pk),
                         "remaining_amount": _remaining(removed.project_id)})


@login_required
@require_POST
def settle_advance_view(request, advance_id):
    try:
        data = _payload(request)
        advance = settle_advance(
            advance_id, data.get("expense_total"), data.get("returned_amount"))
    except PettyCashAdvance.DoesNotExist:
        raise Http404("No advance matches the given query.")
    except ValidationError as e:
        return _error(e)
    return JsonResponse({
        "ok": True,
        "advance_id": str(advance.pk),
        "status": advance.status,
        "expense_total": _money(advance.expense_total),
        "returned_amount": _money(advance.returned_amount),
    })
