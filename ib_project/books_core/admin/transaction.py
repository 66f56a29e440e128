from django.contrib import admin

from books_core.models import Transaction
from books_core.services import (amend_transaction, record_transaction,
                                 void_transaction)
from books_core.services.validation import AMENDABLE_TRANSACTION_FIELDS

from .actions import void_transactions
from .forms import TransactionAdminForm


# Register `Transaction` model
@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Every write goes through the ledger service so the project's
    remaining_amount and the activity log stay in step.
    """

    form = TransactionAdminForm
    list_display = (
        "created_at",
        "project",
        "customer",
        "transaction_type",
        "fund_source",
        "amount",
        "payment_mode",
        "reason",
    )
    list_filter = ("transaction_type", "fund_source", "created_at")
    search_fields = ("reason", "payment_mode", "project__name", "customer__name")
    readonly_fields = ("customer", "created_at", "updated_at")
    actions = [void_transactions]

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("project", "customer")

    # bulk delete_selected would bypass the service
    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop("delete_selected", None)
        return actions

    def save_model(self, request, obj, form, change):
        data = {
            field: form.cleaned_data[field]
            for field in AMENDABLE_TRANSACTION_FIELDS
            if field in form.cleaned_data
        }
        if change:
            changes = {f: data[f] for f in form.changed_data if f in data}
            if not changes:
                return
            saved = amend_transaction(obj.pk, **changes)
        else:
            saved = record_transaction(**data)
        # admin uses obj for the redirect and its own change log
        obj.pk = saved.pk
        obj.customer_id = saved.customer_id
        obj._state.adding = False

    def delete_model(self, request, obj):
        void_transaction(obj.pk)

    def delete_queryset(self, request, queryset):
        for txn_id in list(queryset.values_list("pk", flat=True)):
            void_transaction(txn_id)
