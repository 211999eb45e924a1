"""
Django application configuration for the accounts app.

The accounts app owns identity for the Roovia portal: companies, branches,
the custom user model and the email addresses and contact numbers attached
to them.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Companies & Users'
