from django.contrib import admin

from books_core.models import PettyCashAdvance, Project, Transaction

# ---------- Helpful inline admin classes ----------


class TransactionInline(admin.TabularInline):
    """Transactions listed under a project; edits go through TransactionAdmin."""

    model = Transaction
    extra = 0
    fields = (
        "created_at",
        "transaction_type",
        "fund_source",
        "amount",
        "payment_mode",
        "reason",
    )
    readonly_fields = fields
    show_change_link = True
    can_delete = False
    ordering = ("-created_at",)

    def has_add_permission(self, request, obj=None):
        return False


class ProjectInline(admin.TabularInline):
    model = Project
    extra = 0
    fields = ("name", "status", "estimated_total", "remaining_amount")
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class PettyCashAdvanceInline(admin.TabularInline):
    model = PettyCashAdvance
    extra = 0
    fields = ("project", "advance_amount", "expense_total",
              "returned_amount", "status")
    readonly_fields = fields
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False
