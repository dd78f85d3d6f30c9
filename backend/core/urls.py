"""
Core app URL configuration.

URL prefix (registered in ``portal/urls.py``)::

    path('api/core/', include('core.urls'))

Endpoint summary
----------------
GET  /api/core/dashboard/   — Record counts for the staff dashboard.
GET  /api/core/constants/   — Case statuses, roles and access policy.
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("dashboard/", views.DashboardStatsView.as_view(), name="dashboard-stats"),
    path("constants/", views.SystemConstantsView.as_view(), name="system-constants"),
]
