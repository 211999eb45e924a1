"""
URL configuration for the accounts app.

Included by the main project URLs at /api/, so the router generates:

- /api/companies/                    - list/create (GET, POST)
- /api/companies/{id}/               - detail/update/soft delete
- /api/companies/{id}/details/       - nested branches, emails, numbers (GET)
- /api/branches/ , /api/branches/{id}/users/
- /api/users/ , /api/users/me/
- /api/emails/
- /api/contact-numbers/
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    BranchViewSet,
    CompanyViewSet,
    ContactNumberViewSet,
    EmailViewSet,
    UserViewSet,
)

router = DefaultRouter()
router.register(r'companies', CompanyViewSet, basename='company')
router.register(r'branches', BranchViewSet, basename='branch')
router.register(r'users', UserViewSet, basename='user')
router.register(r'emails', EmailViewSet, basename='email')
router.register(r'contact-numbers', ContactNumberViewSet, basename='contact-number')

urlpatterns = [
    path('', include(router.urls)),
]
