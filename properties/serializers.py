"""
API Serializers for Roovia properties.

This module defines the serialization layer for property owners, properties
and tenants:
- List views (summary data for tables)
- Detail views (complete record with nested relations)
- Create/Update (input validation mirroring the model rules)
"""

import logging

from rest_framework import serializers

from accounts.mixins import sees_all_companies
from accounts.serializers import ADDRESS_FIELDS, AUDIT_FIELDS, PhoneNumberField

from .models import Property, PropertyOwner, PropertyTenant, validate_lease

logger = logging.getLogger(__name__)

PERSON_FIELDS = [
    'first_name',
    'last_name',
    'full_name',
    'id_number',
    'email_address',
    'is_email_notifications_enabled',
    'mobile_number',
    'is_sms_notifications_enabled',
]

BANK_ACCOUNT_FIELDS = [
    'bank_account_type',
    'bank_account_number',
    'bank_name',
    'bank_branch_code',
]


class CompanyScopedSerializerMixin:
    """
    Company handling for records that belong to one company.

    Company-bound callers only ever see their own company's rows, so a
    foreign id is reported the same way as a missing one. A new record
    without an explicit company falls back to the caller's company.
    """

    def check_same_company(self, field_name, obj):
        request = self.context.get('request')
        if obj is None or request is None or sees_all_companies(request.user):
            return
        if obj.company_id != request.user.company_id:
            raise serializers.ValidationError('Object does not exist.')

    def resolve_company(self, data):
        if data.get('company') is not None:
            return data['company']
        if self.instance is not None:
            return self.instance.company

        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if user is not None and getattr(user, 'company', None) is not None:
            data['company'] = user.company
            return user.company

        raise serializers.ValidationError({'company': 'This field is required.'})


# =============================================================================
# TENANT SERIALIZERS
# =============================================================================

class PropertyTenantSerializer(CompanyScopedSerializerMixin, serializers.ModelSerializer):
    """
    Complete tenant serializer.

    The tenant always belongs to its property's company. Removal state is
    managed by the destroy endpoint only.
    """
    full_name = serializers.CharField(read_only=True)
    mobile_number = PhoneNumberField(required=False, allow_blank=True)
    property_address = serializers.SerializerMethodField()

    class Meta:
        model = PropertyTenant
        fields = [
            'id',
            'company',
            'property',
            'property_address',
        ] + PERSON_FIELDS + BANK_ACCOUNT_FIELDS + ['debit_day_of_month'] + ADDRESS_FIELDS + AUDIT_FIELDS
        read_only_fields = ['id', 'company', 'full_name', 'property_address'] + AUDIT_FIELDS

    def get_property_address(self, obj):
        return obj.property.get_full_address()

    def validate_property(self, value):
        self.check_same_company('property', value)
        return value

    def validate(self, data):
        if 'property' in data:
            data['company'] = data['property'].company
        return data


class PropertyTenantListSerializer(serializers.ModelSerializer):
    """Simplified tenant serializer for nested property details."""
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = PropertyTenant
        fields = ['id', 'full_name', 'email_address', 'mobile_number', 'debit_day_of_month']
        read_only_fields = fields


# =============================================================================
# PROPERTY SERIALIZERS
# =============================================================================

class PropertySerializer(CompanyScopedSerializerMixin, serializers.ModelSerializer):
    """
    Property serializer for list, create and update.

    Validation:
    - With a tenant, all three lease dates are required and the lease end
      cannot precede the current lease start
    - The current tenant must be a tenant of this property
    - The owner must belong to the property's company
    """
    owner_name = serializers.CharField(source='owner.full_name', read_only=True)
    current_tenant_name = serializers.CharField(source='current_tenant.full_name', read_only=True, allow_null=True)
    full_address = serializers.SerializerMethodField()
    lease_status = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id',
            'company',
            'owner',
            'owner_name',
            'full_address',
            'rental_amount',
            'has_tenant',
            'lease_original_start_date',
            'current_lease_start_date',
            'lease_end_date',
            'lease_status',
            'current_tenant',
            'current_tenant_name',
        ] + ADDRESS_FIELDS + AUDIT_FIELDS
        read_only_fields = [
            'id', 'owner_name', 'current_tenant_name', 'full_address', 'lease_status'
        ] + AUDIT_FIELDS
        extra_kwargs = {'company': {'required': False}}

    def get_full_address(self, obj):
        return obj.get_full_address()

    def get_lease_status(self, obj):
        return obj.get_lease_status()

    def validate_owner(self, value):
        self.check_same_company('owner', value)
        return value

    def validate(self, data):
        """Lease, owner and current tenant rules."""

        def current(field):
            if field in data:
                return data[field]
            return getattr(self.instance, field, None)

        errors = validate_lease(
            current('has_tenant'),
            current('lease_original_start_date'),
            current('current_lease_start_date'),
            current('lease_end_date'),
        )

        company = self.resolve_company(data)
        owner = current('owner')
        if owner is not None and owner.company_id != company.pk:
            errors['owner'] = 'Owner must belong to the same company as the property.'

        current_tenant = current('current_tenant')
        if current_tenant is not None:
            if self.instance is None or current_tenant.property_id != self.instance.pk:
                errors['current_tenant'] = 'Current tenant must be a tenant of this property.'

        if errors:
            raise serializers.ValidationError(errors)

        return data


class PropertyDetailSerializer(PropertySerializer):
    """Property with its active tenants."""
    tenants = PropertyTenantListSerializer(many=True, read_only=True)
    days_until_lease_end = serializers.SerializerMethodField()

    class Meta(PropertySerializer.Meta):
        fields = PropertySerializer.Meta.fields + ['tenants', 'days_until_lease_end']

    def get_days_until_lease_end(self, obj):
        return obj.get_days_until_lease_end()


# =============================================================================
# OWNER SERIALIZERS
# =============================================================================

class PropertyOwnerSerializer(CompanyScopedSerializerMixin, serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    mobile_number = PhoneNumberField(required=False, allow_blank=True)
    property_count = serializers.SerializerMethodField()

    class Meta:
        model = PropertyOwner
        fields = [
            'id',
            'company',
            'vat_number',
            'property_count',
        ] + PERSON_FIELDS + BANK_ACCOUNT_FIELDS + ADDRESS_FIELDS + AUDIT_FIELDS
        read_only_fields = ['id', 'full_name', 'property_count'] + AUDIT_FIELDS
        extra_kwargs = {'company': {'required': False}}

    def get_property_count(self, obj):
        return obj.properties.count()

    def validate(self, data):
        self.resolve_company(data)
        return data
