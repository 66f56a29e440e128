"""
Read-only aggregates for the dashboard and project pages.

Balances are accumulated signed (credits minus debits per fund source);
clamping to zero happens only in dashboard_summary, the display boundary.
"""
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..models import PettyCashAdvance, Project, Transaction
from ..models.transaction import FUND_SOURCE_CHOICES
from .money import ZERO, quantize


def start_of_month(now=None):
    """First instant of the current calendar month in the active time zone."""
    now = timezone.localtime(now)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def fund_positions() -> dict:
    # {"cash": Decimal, "bank": Decimal}, may be negative
    return {
        source: Transaction.objects.for_fund_source(source).net_credit()
        for source, _ in FUND_SOURCE_CHOICES
    }


def month_expenses(now=None) -> Decimal:
    return Transaction.objects.debits().since(start_of_month(now)).aggregate(
        total=Coalesce(Sum("amount"), ZERO)
    )["total"]


def dashboard_summary(now=None) -> dict:
    active = Project.objects.active()
    positions = fund_positions()
    return {
        "active_projects": active.count(),
        "total_outstanding": active.total_outstanding(),
        "cash_on_hand": max(ZERO, positions["cash"]),
        "bank_balance": max(ZERO, positions["bank"]),
        "month_expenses": month_expenses(now),
        "open_advances": PettyCashAdvance.objects.outstanding().count(),
        "top_projects": list(
            active.select_related("customer").order_by("-remaining_amount")[:5]
        ),
        "recent_transactions": list(
            Transaction.objects.select_related("customer", "project")
            .order_by("-created_at")[:10]
        ),
    }


def project_summary(project) -> dict:
    """Paid / pending / profit figures shown on a project's detail page."""
    total_value = project.estimated_total
    paid = project.transactions.totals()["credit"]
    pending = project.remaining_amount
    profit = paid - (total_value - pending)

    if total_value > 0:
        progress = (total_value - pending) / total_value * 100
        progress = min(Decimal("100"), max(Decimal("0"), progress))
    else:
        progress = Decimal("0")

    return {
        "total_value": total_value,
        "paid": paid,
        "pending": pending,
        "profit": quantize(profit),
        "progress_percent": quantize(progress),
    }
