#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Roovia Portal Management Script
===============================

Usage Examples:
===============

Development:
  python manage.py runserver                    # Start development server
  python manage.py runserver 0.0.0.0:8000      # Start server on all interfaces

Database Operations:
  python manage.py migrate                      # Apply migrations
  python manage.py showmigrations               # Show migration status

User Management:
  python manage.py createsuperuser              # Create admin user

Roovia Specific Commands:
  python manage.py seed_data                    # Create the default CDN category
  python manage.py seed_data --with-company     # Also create a company, head office and admin user

Testing:
  python manage.py test                         # Run tests against SQLite
"""

import os
import sys


def main():
    """Run administrative tasks."""

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roovia.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        error_msg = (
            "Couldn't import Django. This usually means:\n"
            "  1. Django is not installed - run: pip install -e .\n"
            "  2. Virtual environment is not activated\n\n"
            f"Current Python path: {sys.executable}\n"
            f"Current working directory: {os.getcwd()}\n"
            f"DJANGO_SETTINGS_MODULE: {os.environ.get('DJANGO_SETTINGS_MODULE', 'Not set')}\n"
        )
        raise ImportError(error_msg) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
