"""
Properties App Configuration - Roovia portal
Django app configuration for the properties application.
"""

from django.apps import AppConfig


class PropertiesConfig(AppConfig):
    """
    Configuration for the Properties app.

    This app manages:
    - Property owners and their bank details
    - Rental properties and lease dates
    - Tenants, with soft delete
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'properties'
    verbose_name = 'Properties & Tenants'
