"""
Views for the properties app.

This module defines the API viewsets for property owners, properties and
tenants, including filtering, search and custom actions. Every viewset is
scoped to the caller's company.
"""

import logging

from django.db.models import Count
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from accounts.mixins import CompanyScopedMixin

from .filters import PropertyFilter, PropertyOwnerFilter, PropertyTenantFilter
from .models import Property, PropertyOwner, PropertyTenant
from .serializers import (
    PropertyDetailSerializer,
    PropertyOwnerSerializer,
    PropertySerializer,
    PropertyTenantSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PROPERTY OWNER VIEWSET
# =============================================================================

class PropertyOwnerViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Property Owners.

    Supports:
    - CRUD
    - Search by name, ID number and email
    - ``properties`` action listing the owner's properties
    """
    queryset = PropertyOwner.objects.all()
    serializer_class = PropertyOwnerSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyOwnerFilter
    search_fields = ['first_name', 'last_name', 'id_number', 'email_address']
    ordering_fields = ['last_name', 'first_name', 'created_on']
    ordering = ['last_name', 'first_name']

    def destroy(self, request, *args, **kwargs):
        owner = self.get_object()
        if owner.properties.exists():
            return Response(
                {
                    'error': 'Owner cannot be deleted',
                    'message': 'Reassign or delete the owner\'s properties first.',
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['get'])
    def properties(self, request, pk=None):
        """
        GET /api/owners/{id}/properties/
        """
        owner = self.get_object()
        queryset = owner.properties.select_related('owner', 'current_tenant')

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = PropertySerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)

        serializer = PropertySerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)


# =============================================================================
# PROPERTY VIEWSET
# =============================================================================

class PropertyViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Properties.

    Supports:
    - CRUD
    - Filtering by owner, occupancy, city, rental range and lease end range
    - Search by address and owner name
    - ``tenants`` action listing the property's active tenants
    - ``statistics`` action with occupancy and lease summary
    """
    queryset = Property.objects.all()
    serializer_class = PropertySerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyFilter

    search_fields = [
        'address_street',
        'address_city',
        'address_province',
        'address_postal_code',
        'owner__first_name',
        'owner__last_name',
    ]

    ordering_fields = [
        'address_city',
        'rental_amount',
        'lease_end_date',
        'created_on',
    ]
    ordering = ['address_city', 'address_street']

    def get_serializer_class(self):
        """Nested tenants for the detail view only."""
        if self.action == 'retrieve':
            return PropertyDetailSerializer
        return PropertySerializer

    def get_queryset(self):
        queryset = super().get_queryset().select_related('owner', 'current_tenant')
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('tenants')
        return queryset

    def destroy(self, request, *args, **kwargs):
        rental = self.get_object()
        if PropertyTenant.all_objects.filter(property=rental).exists():
            return Response(
                {
                    'error': 'Property cannot be deleted',
                    'message': 'The property has tenant history and cannot be deleted.',
                },
                status=status.HTTP_400_BAD_REQUEST
            )
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['get'])
    def tenants(self, request, pk=None):
        """
        GET /api/properties/{id}/tenants/

        Active (not removed) tenants of the property.
        """
        rental = self.get_object()
        queryset = rental.tenants.select_related('property')

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = PropertyTenantSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)

        serializer = PropertyTenantSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        """
        GET /api/properties/statistics/

        Response:
        {
            "total_properties": 12,
            "occupied": 9,
            "vacant": 3,
            "lease_status": {"Active": 7, "Expiring Soon": 1, "Expired": 1, "Vacant": 3}
        }
        """
        queryset = self.filter_queryset(self.get_queryset())
        counts = queryset.aggregate(total=Count('id'))
        occupied = queryset.filter(has_tenant=True).count()

        lease_status = {'Active': 0, 'Expiring Soon': 0, 'Expired': 0, 'Vacant': 0}
        for rental in queryset.select_related(None).only('has_tenant', 'lease_end_date'):
            lease_status[rental.get_lease_status()] += 1

        return Response({
            'total_properties': counts['total'],
            'occupied': occupied,
            'vacant': counts['total'] - occupied,
            'lease_status': lease_status,
        })


# =============================================================================
# TENANT VIEWSET
# =============================================================================

class PropertyTenantViewSet(CompanyScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for Tenants.

    Destroy is a soft delete: the tenant is flagged removed and, if it was
    the property's current tenant, the property becomes vacant. Removed
    tenants never appear in any response.
    """
    queryset = PropertyTenant.objects.select_related('property')
    serializer_class = PropertyTenantSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PropertyTenantFilter
    search_fields = ['first_name', 'last_name', 'id_number', 'email_address', 'mobile_number']
    ordering_fields = ['last_name', 'first_name', 'debit_day_of_month', 'created_on']
    ordering = ['last_name', 'first_name']

    def destroy(self, request, *args, **kwargs):
        tenant = self.get_object()
        tenant.soft_delete(removed_by=request.user.get_username())
        return Response(status=status.HTTP_204_NO_CONTENT)
