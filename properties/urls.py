"""
URL configuration for properties app.

Included by the main project URLs at /api/, so the router generates:

Owner Endpoints:
- /api/owners/                       - list/create (GET, POST)
- /api/owners/{id}/                  - detail/update/delete
- /api/owners/{id}/properties/       - the owner's properties (GET)

Property Endpoints:
- /api/properties/                   - list/create (GET, POST)
- /api/properties/{id}/              - detail/update/delete
- /api/properties/{id}/tenants/      - active tenants of the property (GET)
- /api/properties/statistics/        - occupancy summary (GET)

Tenant Endpoints:
- /api/tenants/                      - list/create (GET, POST)
- /api/tenants/{id}/                 - detail/update/soft delete
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import PropertyOwnerViewSet, PropertyTenantViewSet, PropertyViewSet


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

router = DefaultRouter()
router.register(r'owners', PropertyOwnerViewSet, basename='owner')
router.register(r'properties', PropertyViewSet, basename='property')
router.register(r'tenants', PropertyTenantViewSet, basename='tenant')

urlpatterns = [
    path('', include(router.urls)),
]
