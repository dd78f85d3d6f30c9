from django.contrib import admin

from .models import Case


@admin.register(Case)
class CaseAdmin(admin.ModelAdmin):
    list_display = ("case_id", "internal_roll", "status", "defendant",
                    "deleted", "updated_at")
    list_filter = ("status", "deleted")
    search_fields = ("case_id", "internal_roll")
    readonly_fields = ("case_id", "created_at", "updated_at")
