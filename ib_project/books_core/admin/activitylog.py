from django.contrib import admin

from books_core.models import ActivityLog

from .ReadOnly import ReadOnlyAdmin


# Register `ActivityLog` model (append-only, so read-only here)
@admin.register(ActivityLog)
class ActivityLogAdmin(ReadOnlyAdmin):
    list_display = (
        "timestamp",
        "actor_type",
        "action",
        "project_ref",
        "transaction_ref",
        "amount_change",
    )
    ordering = ("-timestamp",)
    date_hierarchy = "timestamp"

    @admin.display(description="Project")
    def project_ref(self, obj):
        return (obj.data or {}).get("project_id")

    @admin.display(description="Transaction")
    def transaction_ref(self, obj):
        return (obj.data or {}).get("transaction_id")

    @admin.display(description="Change")
    def amount_change(self, obj):
        return (obj.data or {}).get("amount_change")
