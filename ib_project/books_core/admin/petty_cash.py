from django.contrib import admin

from books_core.models import PettyCashAdvance
from books_core.services import issue_advance, settle_advance

from .forms import PettyCashAdvanceAdminForm


# Register `PettyCashAdvance` model
@admin.register(PettyCashAdvance)
class PettyCashAdvanceAdmin(admin.ModelAdmin):
    form = PettyCashAdvanceAdminForm
    list_display = (
        "employee",
        "project",
        "advance_amount",
        "expense_total",
        "returned_amount",
        "status",
        "created_at",
    )
    list_filter = ("status", "employee")
    search_fields = ("employee__name", "project__name", "notes")

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            # spent/returned start at zero
            return ("expense_total", "returned_amount", "status")
        if obj.status == "closed":
            return ("employee", "project", "advance_amount",
                    "expense_total", "returned_amount", "status")
        return ("employee", "project", "advance_amount", "status")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("employee", "project")

    def save_model(self, request, obj, form, change):
        cleaned = form.cleaned_data
        if not change:
            saved = issue_advance(
                employee=cleaned["employee"],
                advance_amount=cleaned["advance_amount"],
                project=cleaned.get("project"),
                notes=cleaned.get("notes"),
            )
            obj.pk = saved.pk
            obj._state.adding = False
            return

        if {"expense_total", "returned_amount"} & set(form.changed_data):
            settle_advance(obj.pk, cleaned["expense_total"], cleaned["returned_amount"])
        if "notes" in form.changed_data:
            PettyCashAdvance.objects.filter(pk=obj.pk).update(notes=obj.notes)
