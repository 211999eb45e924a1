"""
URL configuration for the Roovia portal.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.0/topics/http/urls/
"""

import logging
import sys

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path, include
from django.utils import timezone
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_http_methods
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from accounts.views import PortalTokenObtainPairView
from cdn.urls import debug_urlpatterns as cdn_debug_urlpatterns
from services import check_service_health

logger = logging.getLogger(__name__)


# =============================================================================
# HEALTH CHECK ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
@cache_control(no_cache=True, must_revalidate=True, no_store=True)
def health_check(request):
    """
    Health check endpoint for deployment monitoring.

    Returns:
        JSON response with database connectivity and CDN configuration state
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check database error: {str(e)}")
        return JsonResponse({
            "status": "unhealthy",
            "database": "error",
            "error": str(e) if settings.DEBUG else "Database connection failed",
        }, status=503)

    return JsonResponse({
        "status": "healthy",
        "database": "connected",
        "services": check_service_health(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
        "timestamp": timezone.now().isoformat(),
    })


# =============================================================================
# API INFO ENDPOINT
# =============================================================================

@require_http_methods(["GET"])
def api_info(request):
    """
    API information endpoint for frontend integration.

    Returns:
        JSON response with API version and available endpoints
    """
    return JsonResponse({
        "api_name": "Roovia Portal API",
        "version": "1.0",
        "description": "Property management portal with CDN file storage",
        "endpoints": {
            "authentication": {
                "token_obtain": "/api/auth/token/",
                "token_refresh": "/api/auth/token/refresh/",
                "token_verify": "/api/auth/token/verify/",
            },
            "accounts": {
                "companies": "/api/companies/",
                "branches": "/api/branches/",
                "users": "/api/users/",
                "current_user": "/api/users/me/",
                "emails": "/api/emails/",
                "contact_numbers": "/api/contact-numbers/",
            },
            "properties": {
                "owners": "/api/owners/",
                "properties": "/api/properties/",
                "property_tenants": "/api/properties/{id}/tenants/",
                "tenants": "/api/tenants/",
            },
            "cdn": {
                "upload": "/api/cdn/upload/",
                "files": "/api/cdn/files/",
                "view": "/api/cdn/view/?path=",
                "folders": "/api/cdn/folders/",
                "ping": "/api/cdn-debug/ping/",
            },
            "utilities": {
                "health": "/api/health/",
            },
        },
    })


# =============================================================================
# MAIN URL PATTERNS
# =============================================================================

urlpatterns = [
    # Django Admin Interface
    path('admin/', admin.site.urls),

    # Health and System Status
    path('api/health/', health_check, name='health-check'),
    path('api/info/', api_info, name='api-info'),

    # Authentication Endpoints (JWT)
    path('api/auth/token/', PortalTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # CDN proxy, guarded by the API key middleware
    path('api/cdn/', include('cdn.urls')),
    path('api/cdn-debug/', include((cdn_debug_urlpatterns, 'cdn_debug'))),

    # API Root, ahead of the router roots
    path('api/', api_info, name='api-default'),

    # Core Application Endpoints
    path('api/', include('accounts.urls')),
    path('api/', include('properties.urls')),
]


# =============================================================================
# DEVELOPMENT URL PATTERNS
# =============================================================================

if settings.DEBUG:
    urlpatterns += [
        # Django REST Framework browsable API login
        path('api-auth/', include('rest_framework.urls')),
    ]


# =============================================================================
# CUSTOM ERROR HANDLERS
# =============================================================================

def api_not_found(request, exception):
    """JSON 404 for /api/ routes, the regular page elsewhere."""
    if request.path.startswith('/api/'):
        return JsonResponse({
            'success': False,
            'message': f'No endpoint at {request.path}',
            'available_endpoints': '/api/info/'
        }, status=404)

    from django.views.defaults import page_not_found
    return page_not_found(request, exception)


def api_server_error(request):
    if request.path.startswith('/api/'):
        logger.error(f"Unhandled error on {request.method} {request.path}")
        return JsonResponse({
            'success': False,
            'message': 'Internal server error',
        }, status=500)

    from django.views.defaults import server_error
    return server_error(request)


handler404 = api_not_found
handler500 = api_server_error
