from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from accounts.models import ClubUser, RoleAssignment


class RoleAssignmentInline(admin.TabularInline):  # type: ignore[type-arg]
    model = RoleAssignment
    extra = 0
    autocomplete_fields = ["club"]


@admin.register(ClubUser)
class ClubUserAdmin(UserAdmin):  # type: ignore[type-arg]
    list_display = ["username", "email", "first_name", "last_name", "student_id", "is_staff"]
    search_fields = ["username", "email", "first_name", "last_name", "student_id"]
    fieldsets = (*UserAdmin.fieldsets, ("Club", {"fields": ("student_id",)}))  # type: ignore[misc]
    inlines = [RoleAssignmentInline]


@admin.register(RoleAssignment)
class RoleAssignmentAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "role", "club", "user_type", "created_at"]
    list_filter = ["role", "user_type"]
    search_fields = ["user__username", "user__email", "club__name"]
    autocomplete_fields = ["user", "club"]
