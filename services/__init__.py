# ===== SERVICES INTEGRATION LAYER =====
"""
Centralized service integration layer for the Roovia portal.
Provides consistent interfaces and error handling for outbound integrations.
"""

import logging
from typing import Dict, Any, Tuple

from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# SERVICE INTEGRATION EXCEPTIONS
# =============================================================================

class ServiceIntegrationError(Exception):
    """Base exception for service integration errors."""
    pass


class CdnServiceError(ServiceIntegrationError):
    """Raised when the upstream CDN cannot be reached."""
    pass


# =============================================================================
# HEALTH CHECK SERVICES
# =============================================================================

def check_service_health() -> Dict[str, Dict[str, Any]]:
    """
    Check health of all integrated services.

    Only configuration is inspected; no upstream call is made.

    Returns:
        Dictionary with health status of each service
    """
    from .cdn_client import cdn_client

    return {
        'cdn': {
            'configured': cdn_client.is_configured,
            'api_url': settings.CDN.get('API_URL'),
            'api_key_configured': bool(cdn_client.api_key),
        }
    }


# =============================================================================
# SERVICE CONFIGURATION VALIDATION
# =============================================================================

def validate_service_configuration() -> Tuple[bool, list]:
    """
    Validate that all required services are properly configured.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []
    cdn = getattr(settings, 'CDN', {})

    if not cdn.get('API_URL'):
        errors.append("CDN_API_URL not configured")

    if not cdn.get('BASE_URL'):
        errors.append("CDN_BASE_URL not configured")

    if not cdn.get('API_KEY'):
        errors.append("CDN_API_KEY not configured - every CDN request will be rejected")

    if not getattr(settings, 'DATABASES', {}).get('default'):
        errors.append("Database configuration missing")

    required_apps = ['rest_framework', 'accounts', 'properties', 'cdn']
    installed_apps = getattr(settings, 'INSTALLED_APPS', [])

    for app in required_apps:
        if app not in installed_apps:
            errors.append(f"Required app '{app}' not in INSTALLED_APPS")

    return len(errors) == 0, errors


# =============================================================================
# EXPORT FOR EASY IMPORTS
# =============================================================================

__all__ = [
    'check_service_health',
    'validate_service_configuration',
    'ServiceIntegrationError',
    'CdnServiceError',
]
