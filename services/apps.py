"""
Django application configuration for the services app.

The services app holds the outbound integrations of the Roovia portal:
the upstream CDN client, shared field validators and service health checks.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ServicesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'services'
    verbose_name = 'Services'

    def ready(self):
        """Warn at startup about incomplete integration settings."""
        from . import validate_service_configuration

        is_valid, errors = validate_service_configuration()
        if not is_valid:
            for error in errors:
                logger.warning(f"Service configuration: {error}")
