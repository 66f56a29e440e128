from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from books_core.exceptions import BookkeepingError
from books_core.models import Transaction
from books_core.services import void_transaction

# ---------- Admin actions ----------


@admin.action(description="Void selected transactions")
def void_transactions(modeladmin, request, queryset):
    """
    Remove each selected transaction through the ledger service so the
    project balance is reversed and the activity log gets its entry.
    Each void runs in its own atomic block.
    """
    success = 0
    failures = 0
    for txn_id in list(queryset.values_list("pk", flat=True)):
        try:
            void_transaction(txn_id)
            success += 1
        except (Transaction.DoesNotExist, BookkeepingError) as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not void transaction %(pk)s: %(err)s") % {"pk": txn_id, "err": exc},
                level=messages.ERROR,
            )

    modeladmin.message_user(
        request,
        _("Voided %(success)d transactions. %(failures)d failed.") % {
            "success": success,
            "failures": failures,
        },
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


""" Buttons that call project.transition_to(...) """


def _transition_projects(modeladmin, request, queryset, new_status):
    for project in queryset:
        try:
            project.transition_to(new_status)
            # enforces the rules coded in transition_to()
            # instead of letting admins bypass them
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{project}: {e}", level=messages.ERROR)


@admin.action(description="Mark selected projects as Active")
def mark_projects_active(modeladmin, request, queryset):
    _transition_projects(modeladmin, request, queryset, "active")


@admin.action(description="Mark selected projects as Completed")
def mark_projects_completed(modeladmin, request, queryset):
    _transition_projects(modeladmin, request, queryset, "completed")


@admin.action(description="Mark selected projects as Cancelled")
def mark_projects_cancelled(modeladmin, request, queryset):
    _transition_projects(modeladmin, request, queryset, "cancelled")
