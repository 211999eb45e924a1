"""
ASGI config for the Roovia portal project.

It exposes the ASGI callable as a module-level variable named ``application``.
The REST API is synchronous; this entry point exists for ASGI servers such as
Uvicorn or Daphne.
"""

import os
import sys
from pathlib import Path

from django.core.asgi import get_asgi_application

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Add the project directory to Python path
sys.path.append(str(BASE_DIR))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roovia.settings')

application = get_asgi_application()
