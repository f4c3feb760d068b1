from django.contrib import admin

from noel_famille.chat import models


class ChatMessageMediaInline(admin.TabularInline):
    model = models.ChatMessageMedia
    extra = 0


@admin.register(models.ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "user", "content", "created_at"]
    search_fields = ["content"]
    list_filter = ["event", "created_at"]
    inlines = [ChatMessageMediaInline]
