"""
WSGI config for the Roovia portal project.

It exposes the WSGI callable as a module-level variable named ``application``.
This is the production entry point (``gunicorn roovia.wsgi:application``).
"""

import json
import logging
import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Add the project directory to Python path
sys.path.append(str(BASE_DIR))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roovia.settings')

# Initialize Django application early to avoid AppRegistryNotReady errors
django_application = get_wsgi_application()

logger = logging.getLogger('roovia.wsgi')


# =============================================================================
# PRODUCTION WSGI APPLICATION
# =============================================================================

def application(environ, start_response):
    """
    Production WSGI application.

    Answers ``/wsgi-health/`` without touching Django and turns WSGI-level
    failures into a JSON 500 response.
    """
    if environ.get('PATH_INFO') == '/wsgi-health/':
        start_response('200 OK', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        return [b'{"status": "healthy", "service": "roovia-wsgi"}']

    try:
        return django_application(environ, start_response)
    except Exception as e:
        logger.exception(f"WSGI application error: {str(e)}")

        start_response('500 Internal Server Error', [
            ('Content-Type', 'application/json'),
            ('Cache-Control', 'no-cache'),
        ])
        error_response = {
            "success": False,
            "message": "The server encountered an unexpected condition",
            "service": "roovia-wsgi",
        }
        return [json.dumps(error_response).encode('utf-8')]
