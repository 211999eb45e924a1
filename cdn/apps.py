"""
CDN App Configuration - Roovia portal

Proxy endpoints for the external CDN and the local tables that record
what passes through them.
"""

from django.apps import AppConfig


class CdnConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cdn'
    verbose_name = 'CDN Proxy'
