from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "discord_id", "role", "national_id", "is_active")
    search_fields = ("username", "discord_id", "national_id")
    list_filter = ("role", "is_active", "is_staff")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Portal", {"fields": ("discord_id", "avatar", "role", "national_id")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Portal", {"fields": ("discord_id", "role", "national_id")}),
    )
