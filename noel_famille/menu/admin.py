from django.contrib import admin

from noel_famille.menu import models


class MenuIngredientInline(admin.TabularInline):
    model = models.MenuIngredient
    extra = 0
    raw_id_fields = ["contribution"]


@admin.register(models.MenuRecipe)
class MenuRecipeAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "title", "created_at"]
    search_fields = ["title", "description"]
    list_filter = ["event"]
    inlines = [MenuIngredientInline]
