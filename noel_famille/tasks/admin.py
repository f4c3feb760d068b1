from django.contrib import admin

from noel_famille.tasks import models


@admin.register(models.Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "title", "status", "is_private", "due_date"]
    search_fields = ["title", "description"]
    list_filter = ["status", "is_private", "event"]
