from django.contrib import admin

from books_core.models import Customer, Employee

from .inlines import PettyCashAdvanceInline, ProjectInline


# Register `Customer` model
@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone_number", "email", "created_at")
    search_fields = ("name", "email", "phone_number")
    inlines = [ProjectInline]


# Register `Employee` model
@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "department", "email", "phone")
    list_filter = ("department",)
    search_fields = ("name", "email")
    inlines = [PettyCashAdvanceInline]
