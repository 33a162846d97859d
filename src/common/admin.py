from django.contrib import admin

from . import models


@admin.register(models.AuditLog)
class AuditLogAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Read-only view of the audit trail."""

    list_display = ["created_at", "action", "entity", "entity_id", "actor"]
    list_filter = ["entity", "action"]
    search_fields = ["entity_id", "actor__username"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request: object) -> bool:  # type: ignore[override]
        return False

    def has_change_permission(self, request: object, obj: object = None) -> bool:  # type: ignore[override]
        return False

    def has_delete_permission(self, request: object, obj: object = None) -> bool:  # type: ignore[override]
        return False
