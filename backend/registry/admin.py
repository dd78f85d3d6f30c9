from django.contrib import admin

from .models import Citizen, Vehicle


@admin.register(Citizen)
class CitizenAdmin(admin.ModelAdmin):
    list_display = ("national_id", "full_name", "birth_date", "created_at")
    search_fields = ("national_id", "full_name")


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("plate", "model", "color", "owner_national_id")
    search_fields = ("plate", "owner_national_id")
