"""Admin for clubs, venues and events.

Status fields are read-only here: status changes go through the review
workflow so that decisions, audit entries and notifications stay consistent.
"""

from django.contrib import admin

from events import models


class BlackoutDateInline(admin.TabularInline):  # type: ignore[type-arg]
    model = models.BlackoutDate
    extra = 0
    fields = ["start_date", "end_date", "reason"]


class ApprovalLevelInline(admin.TabularInline):  # type: ignore[type-arg]
    model = models.ApprovalLevel
    extra = 0
    can_delete = False
    fields = ["level", "required_roles", "approval_rule", "status", "approved_by", "approved_at", "comment"]
    readonly_fields = fields


class ApprovalInline(admin.TabularInline):  # type: ignore[type-arg]
    model = models.Approval
    extra = 0
    can_delete = False
    fields = ["stage", "status", "reviewer", "comment", "created_at"]
    readonly_fields = fields


@admin.register(models.Club)
class ClubAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "approval_flow", "active", "created_at"]
    list_filter = ["approval_flow", "active"]
    search_fields = ["name"]


@admin.register(models.Venue)
class VenueAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "location", "capacity", "active", "open_from", "open_to"]
    list_filter = ["active"]
    search_fields = ["name", "location"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [BlackoutDateInline]


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["title", "club", "venue", "start", "end", "status", "created_by"]
    list_filter = ["status", "club", "venue"]
    search_fields = ["title", "description", "club__name", "created_by__username"]
    autocomplete_fields = ["club", "venue", "created_by"]
    readonly_fields = ["status", "last_decision_at", "reminder_sent_at", "created_at", "updated_at"]
    date_hierarchy = "start"
    inlines = [ApprovalLevelInline, ApprovalInline]

    fieldsets = [
        ("Event", {"fields": ("club", "title", "category", "description", "created_by")}),
        ("Schedule", {"fields": ("venue", ("start", "end"), "expected_attendees")}),
        ("Policy", {"fields": ("policy_ack", "risk_notes")}),
        ("Review", {"fields": ("status", "last_decision_at", "reminder_sent_at")}),
        ("Metadata", {"fields": (("created_at", "updated_at"),)}),
    ]


@admin.register(models.Attendance)
class AttendanceAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["event", "user", "guest_label", "checked_in_at"]
    search_fields = ["event__title", "user__username", "guest_label"]
    readonly_fields = ["event", "user", "guest_label", "token", "checked_in_at"]


@admin.register(models.EventTemplate)
class EventTemplateAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "club", "created_by", "created_at"]
    search_fields = ["name", "club__name"]
