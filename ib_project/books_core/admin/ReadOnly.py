from django.contrib import admin

"""Base admin for rows that are written by the services only (e.g. the activity log)."""


class ReadOnlyAdmin(admin.ModelAdmin):
    list_per_page = 100

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.concrete_fields]

    # view permission alone renders the detail page without a save button
    def has_view_permission(self, request, obj=None):
        return request.user.is_active and request.user.is_staff

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        return {}

    def get_list_filter(self, request):
        names = {f.name for f in self.model._meta.concrete_fields}
        return tuple(n for n in ("action", "actor_type", "timestamp") if n in names)

    def get_search_fields(self, request):
        names = {f.name for f in self.model._meta.concrete_fields}
        return tuple(n for n in ("action", "actor_type") if n in names)
