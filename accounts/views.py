"""
Views for the accounts app.

This module defines the API viewsets for companies, branches, users, email
addresses and contact numbers, plus the JWT token view. Every viewset is
scoped to the caller's company unless the caller is a superuser or system
administrator.
"""

import logging

from django.db.models import Q
from django.utils import timezone
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView
from django_filters.rest_framework import DjangoFilterBackend

from roovia.middleware import get_client_ip

from .filters import BranchFilter, ContactNumberFilter, EmailFilter, UserFilter
from .mixins import CompanyScopedMixin, sees_all_companies
from .models import ApplicationUser, Branch, Company, ContactNumber, Email
from .permissions import IsSystemAdministrator
from .serializers import (
    BranchSerializer,
    CompanyDetailSerializer,
    CompanySerializer,
    ContactNumberSerializer,
    EmailSerializer,
    PortalTokenObtainPairSerializer,
    UserProfileSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# AUTHENTICATION
# =============================================================================

class PortalTokenObtainPairView(TokenObtainPairView):
    """
    POST /api/auth/token/

    Issues an access/refresh pair whose access token carries company_id,
    branch_id, role and full_name claims.
    """
    serializer_class = PortalTokenObtainPairSerializer


# =============================================================================
# COMPANY VIEWSET
# =============================================================================

class CompanyViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Companies.

    Supports:
    - List / create / retrieve / update companies
    - Soft delete, refused while branches or users remain
    - Nested details (branches, email addresses, contact numbers)

    Removed companies are hidden from every query.
    """
    queryset = Company.objects.filter(is_removed=False)
    serializer_class = CompanySerializer
    company_lookup = 'id'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active']
    search_fields = ['name', 'registration_number', 'email', 'address_city']
    ordering_fields = ['name', 'created_on']
    ordering = ['name']

    def get_permissions(self):
        """Only system administrators create or remove companies."""
        if self.action in ['create', 'destroy']:
            return [IsAuthenticated(), IsSystemAdministrator()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action in ['retrieve', 'details']:
            return CompanyDetailSerializer
        return CompanySerializer

    def destroy(self, request, *args, **kwargs):
        company = self.get_object()

        if not company.can_be_removed():
            return Response(
                {
                    'error': 'Company cannot be removed',
                    'message': 'Remove or reassign all branches and users before removing the company.',
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        company.soft_delete(removed_by=request.user.get_username())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        """
        GET /api/companies/{id}/details/

        Company with nested branches, email addresses and contact numbers.
        """
        company = self.get_object()
        serializer = self.get_serializer(company)
        return Response(serializer.data)


# =============================================================================
# BRANCH VIEWSET
# =============================================================================

class BranchViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Branches.

    Filter by ``company``, ``city``, ``is_active`` and ``is_head_office``.
    """
    queryset = Branch.objects.select_related('company').filter(company__is_removed=False)
    serializer_class = BranchSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = BranchFilter
    search_fields = ['name', 'address_city', 'company__name']
    ordering_fields = ['name', 'created_on']
    ordering = ['company__name', 'name']

    @action(detail=True, methods=['get'])
    def users(self, request, pk=None):
        """
        GET /api/branches/{id}/users/

        Active and inactive users assigned to the branch.
        """
        branch = self.get_object()
        queryset = branch.users.select_related('company', 'branch').order_by('username')

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = UserSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)

        serializer = UserSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)


# =============================================================================
# USER VIEWSET
# =============================================================================

class UserViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Users.

    Supports:
    - CRUD, passwords always hashed through set_password
    - Filtering by company, branch, role and is_active
    - Destroy deactivates the user instead of deleting the row
    - ``me`` returns the caller's own profile
    """
    queryset = ApplicationUser.objects.select_related('company', 'branch')
    serializer_class = UserSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = UserFilter
    search_fields = ['username', 'first_name', 'last_name', 'email']
    ordering_fields = ['username', 'last_name', 'date_joined', 'last_login']
    ordering = ['username']

    def perform_create(self, serializer):
        serializer.save(**self.get_company_kwargs())

    def perform_update(self, serializer):
        serializer.save(**self.get_company_kwargs())

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()

        if user.pk == request.user.pk:
            return Response(
                {
                    'error': 'User cannot be deactivated',
                    'message': 'You cannot deactivate your own account.',
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        user.is_active = False
        user.save(update_fields=['is_active'])
        logger.info(f"User '{user.username}' deactivated by {request.user.get_username()}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        GET /api/users/me/

        The authenticated user's profile with company, branch, email
        addresses and contact numbers. Records the login time and address.
        """
        user = request.user
        user.last_login = timezone.now()
        user.last_login_ip = get_client_ip(request)
        if user.last_login_ip == 'unknown':
            user.last_login_ip = None
        user.save(update_fields=['last_login', 'last_login_ip'])

        serializer = UserProfileSerializer(user, context=self.get_serializer_context())
        return Response(serializer.data)


# =============================================================================
# EMAIL & CONTACT NUMBER VIEWSETS
# =============================================================================

class RelatedEntityViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    Base viewset for rows owned by a user, company or branch.

    Scoping follows whichever owner the row points at.
    """
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering_fields = ['created_on', 'is_primary']

    def scope_queryset(self, queryset):
        user = self.request.user
        if sees_all_companies(user):
            return queryset
        if not user.company_id:
            return queryset.none()
        return queryset.filter(
            Q(company_id=user.company_id)
            | Q(branch__company_id=user.company_id)
            | Q(user__company_id=user.company_id)
        )

    def get_company_kwargs(self):
        # The owner is set from related_entity_type / related_entity_id
        return {}


class EmailViewSet(RelatedEntityViewSet):
    """API endpoint for email addresses."""
    queryset = Email.objects.all()
    serializer_class = EmailSerializer
    filterset_class = EmailFilter
    ordering = ['-is_primary', 'email_address']


class ContactNumberViewSet(RelatedEntityViewSet):
    """API endpoint for contact numbers."""
    queryset = ContactNumber.objects.all()
    serializer_class = ContactNumberSerializer
    filterset_class = ContactNumberFilter
    ordering = ['-is_primary', 'number']
