from django.contrib import admin

from noel_famille.events import models


class EventCodeEventInline(admin.TabularInline):
    model = models.EventCodeEvent
    extra = 0


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "date", "location", "status"]
    search_fields = ["name", "description", "location"]
    list_filter = ["status", "date"]


@admin.register(models.EventCode)
class EventCodeAdmin(admin.ModelAdmin):
    list_display = ["id", "code", "is_master", "is_active", "expires_at"]
    search_fields = ["code"]
    list_filter = ["is_master", "is_active"]
    inlines = [EventCodeEventInline]


@admin.register(models.EventUser)
class EventUserAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "event", "joined_at"]
    list_filter = ["event"]
