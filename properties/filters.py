"""
Properties Filters - Roovia portal API
Django REST Framework filters for owners, properties and tenants.

Provides filtering for:
- Location (city, province, postal code)
- Rental amount ranges
- Occupancy and lease end dates
- Owner and property relationships
"""

from datetime import date, timedelta

from django_filters import rest_framework as filters
from django_filters import BooleanFilter, CharFilter, DateFilter, NumberFilter

from .models import LEASE_EXPIRY_WARNING_DAYS, Property, PropertyOwner, PropertyTenant


# =============================================================================
# PROPERTY FILTERS
# =============================================================================

class PropertyFilter(filters.FilterSet):
    """
    Filtering for properties.

    Examples:
        ?owner=3&has_tenant=true
        ?city=cape&min_rental=5000&max_rental=12000
        ?lease_end_after=2025-01-01&lease_end_before=2025-06-30
        ?lease_expiring=true
    """

    owner = NumberFilter(field_name='owner_id')
    has_tenant = BooleanFilter()

    city = CharFilter(
        field_name='address_city',
        lookup_expr='icontains',
        help_text='Filter by city name (partial match)'
    )
    province = CharFilter(
        field_name='address_province',
        lookup_expr='iexact',
        help_text='Filter by province (exact match)'
    )
    postal_code = CharFilter(
        field_name='address_postal_code',
        lookup_expr='istartswith',
        help_text='Filter by postal code (prefix match)'
    )

    min_rental = NumberFilter(
        field_name='rental_amount',
        lookup_expr='gte',
        help_text='Minimum monthly rental'
    )
    max_rental = NumberFilter(
        field_name='rental_amount',
        lookup_expr='lte',
        help_text='Maximum monthly rental'
    )

    lease_end_after = DateFilter(field_name='lease_end_date', lookup_expr='gte')
    lease_end_before = DateFilter(field_name='lease_end_date', lookup_expr='lte')

    lease_expiring = BooleanFilter(
        method='filter_lease_expiring',
        help_text='Tenanted properties whose lease ends within the warning window'
    )

    class Meta:
        model = Property
        fields = [
            'owner', 'has_tenant', 'city', 'province', 'postal_code',
            'min_rental', 'max_rental', 'lease_end_after', 'lease_end_before',
        ]

    def filter_lease_expiring(self, queryset, name, value):
        today = date.today()
        window = {
            'has_tenant': True,
            'lease_end_date__gte': today,
            'lease_end_date__lte': today + timedelta(days=LEASE_EXPIRY_WARNING_DAYS),
        }
        if value:
            return queryset.filter(**window)
        return queryset.exclude(**window)


# =============================================================================
# OWNER & TENANT FILTERS
# =============================================================================

class PropertyOwnerFilter(filters.FilterSet):
    city = CharFilter(field_name='address_city', lookup_expr='icontains')
    has_properties = BooleanFilter(method='filter_has_properties')

    class Meta:
        model = PropertyOwner
        fields = ['city', 'bank_name']

    def filter_has_properties(self, queryset, name, value):
        return queryset.filter(properties__isnull=not value).distinct()


class PropertyTenantFilter(filters.FilterSet):
    property = NumberFilter(field_name='property_id')
    debit_day_of_month = NumberFilter()

    class Meta:
        model = PropertyTenant
        fields = ['property', 'debit_day_of_month']
