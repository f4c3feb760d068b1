from django.contrib import admin

from noel_famille.polls import models


class PollOptionInline(admin.TabularInline):
    model = models.PollOption
    extra = 0


@admin.register(models.Poll)
class PollAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "title", "type", "is_closed", "auto_close"]
    search_fields = ["title", "description"]
    list_filter = ["type", "is_closed", "event"]
    inlines = [PollOptionInline]
