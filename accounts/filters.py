"""
Accounts Filters - Roovia portal API
Django REST Framework filters for branches, users, email addresses and
contact numbers.
"""

from django_filters import rest_framework as filters
from django_filters import BooleanFilter, CharFilter, ChoiceFilter, UUIDFilter

from .models import (
    ApplicationUser,
    Branch,
    ContactNumber,
    ContactNumberType,
    Email,
    RelatedEntityType,
    SystemRole,
)


class BranchFilter(filters.FilterSet):
    company = UUIDFilter(field_name='company_id')
    city = CharFilter(field_name='address_city', lookup_expr='icontains')
    is_active = BooleanFilter()
    is_head_office = BooleanFilter()

    class Meta:
        model = Branch
        fields = ['company', 'city', 'is_active', 'is_head_office']


class UserFilter(filters.FilterSet):
    """Filter users by company, branch, role and active state."""

    company = UUIDFilter(field_name='company_id')
    branch = UUIDFilter(field_name='branch_id')
    role = ChoiceFilter(choices=SystemRole.choices)
    is_active = BooleanFilter()

    class Meta:
        model = ApplicationUser
        fields = ['company', 'branch', 'role', 'is_active']


class RelatedEntityFilter(filters.FilterSet):
    """Shared discriminator filters for email addresses and contact numbers."""

    related_entity_type = ChoiceFilter(choices=RelatedEntityType.choices)
    related_entity_id = CharFilter()
    is_primary = BooleanFilter()
    is_active = BooleanFilter()


class EmailFilter(RelatedEntityFilter):

    class Meta:
        model = Email
        fields = ['related_entity_type', 'related_entity_id', 'is_primary', 'is_active']


class ContactNumberFilter(RelatedEntityFilter):
    type = ChoiceFilter(choices=ContactNumberType.choices)

    class Meta:
        model = ContactNumber
        fields = ['related_entity_type', 'related_entity_id', 'type', 'is_primary', 'is_active']
