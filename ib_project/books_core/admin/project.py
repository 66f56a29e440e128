from django.contrib import admin

from books_core.models import Project
from books_core.services.money import format_inr

from .actions import (mark_projects_active, mark_projects_cancelled,
                      mark_projects_completed)
from .inlines import TransactionInline


# Register `Project` model
@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "customer",
        "status",
        "estimated",
        "remaining",
        "start_date",
        "end_date",
    )
    list_filter = ("status", "start_date")
    search_fields = ("name", "customer__name")
    actions = [mark_projects_active, mark_projects_completed, mark_projects_cancelled]
    inlines = [TransactionInline]

    # remaining_amount is owned by the balance maintainer;
    # the estimate is fixed once the project exists
    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ("remaining_amount",)
        return ("remaining_amount", "estimated_total")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("customer")

    @admin.display(description="Estimated", ordering="estimated_total")
    def estimated(self, obj):
        return format_inr(obj.estimated_total)

    @admin.display(description="Remaining", ordering="remaining_amount")
    def remaining(self, obj):
        return format_inr(obj.remaining_amount)
