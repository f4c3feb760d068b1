from django.contrib import admin

from noel_famille.users import models


@admin.register(models.User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "email", "avatar", "role"]
    search_fields = ["name", "email", "username"]
    list_filter = ["role", "created_at"]
    exclude = ["password", "user_permissions", "groups"]


@admin.register(models.RefreshToken)
class RefreshTokenAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "expires_at", "revoked_at", "created_at"]
    list_filter = ["revoked_at", "expires_at"]
    readonly_fields = ["token"]
