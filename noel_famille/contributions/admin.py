from django.contrib import admin

from noel_famille.contributions import models


@admin.register(models.Contribution)
class ContributionAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "title", "category", "status", "assignee"]
    search_fields = ["title", "description"]
    list_filter = ["category", "status", "event"]
