"""
Registry app URL configuration.

    GET /api/citizens/search/?q=         → CitizenSearchView
    GET /api/citizens/me/certificate/    → MyCertificateView
    GET /api/vehicles/search/?q=         → VehicleSearchView
"""

from django.urls import path

from . import views

app_name = "registry"

urlpatterns = [
    path("citizens/search/", views.CitizenSearchView.as_view(), name="citizen-search"),
    path("citizens/me/certificate/", views.MyCertificateView.as_view(), name="my-certificate"),
    path("vehicles/search/", views.VehicleSearchView.as_view(), name="vehicle-search"),
]
