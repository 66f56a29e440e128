from django import forms
from django.contrib.auth.forms import UserChangeForm as DjangoUserChangeForm
from django.contrib.auth.forms import \
    UserCreationForm as DjangoUserCreationForm
from django.core.exceptions import ValidationError

from books_core.models import PettyCashAdvance, Transaction, User

# -----------------------------
# Register custom admin forms
# ----------------------------


class UserAdminCreationForm(DjangoUserCreationForm):
    class Meta(DjangoUserCreationForm.Meta):
        model = User  # Points `model` to custom User model
        fields = ("username", "email", "full_name", "role")


class UserAdminChangeForm(DjangoUserChangeForm):
    class Meta(DjangoUserChangeForm.Meta):
        model = User
        fields = (
            "username",
            "email",
            "full_name",
            "phone",
            "role",
            "is_active",
            "is_staff",
            "is_superuser",
        )


class TransactionAdminForm(forms.ModelForm):
    class Meta:
        model = Transaction
        exclude = ("customer",)  # always copied from the project

    def clean(self):
        cleaned = super().clean()
        # keep the denormalized customer in step with the chosen project
        project = cleaned.get("project")
        if project is not None:
            self.instance.customer_id = project.customer_id

        advance = cleaned.get("related_advance")
        employee = cleaned.get("related_employee")
        if advance and employee and advance.employee_id != employee.pk:
            raise ValidationError(
                {"related_advance": "Advance belongs to a different employee."})
        return cleaned


class PettyCashAdvanceAdminForm(forms.ModelForm):
    class Meta:
        model = PettyCashAdvance
        fields = ("employee", "project", "advance_amount", "expense_total",
                  "returned_amount", "notes")

    def clean(self):
        cleaned = super().clean()
        # Editing the spent/returned split on an existing advance settles it
        settling = not self.instance._state.adding and (
            {"expense_total", "returned_amount"} & set(self.changed_data))
        if settling:
            expense = cleaned.get("expense_total")
            returned = cleaned.get("returned_amount")
            if expense is not None and returned is not None and (
                expense + returned != self.instance.advance_amount
            ):
                raise ValidationError(
                    "Expense + Returned amount must equal Advance amount")
            if returned is not None and returned < self.instance.returned_amount:
                raise ValidationError({
                    "returned_amount":
                        "Returned amount cannot be lower than what was already returned.",
                })
        return cleaned
