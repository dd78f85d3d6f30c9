"""
Cases app URL configuration.

All routes are registered under the ``/api/cases/`` prefix.

Route Hierarchy
---------------
  POST   /api/cases/                      → open a case
  GET    /api/cases/search/?q=            → search active cases
  GET    /api/cases/trash/                → recycle bin
  GET    /api/cases/{case_id}/            → retrieve
  DELETE /api/cases/{case_id}/            → destroy (staff / admin)
  POST   /api/cases/{case_id}/archive/    → move to recycle bin
  POST   /api/cases/{case_id}/restore/    → restore from recycle bin
"""

from rest_framework.routers import DefaultRouter

from .views import CaseViewSet

router = DefaultRouter()
router.register(
    prefix=r"cases",
    viewset=CaseViewSet,
    basename="case",
)

urlpatterns = router.urls
