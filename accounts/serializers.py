"""
API Serializers for Roovia accounts.

Serializers for companies, branches, users and their email addresses and
contact numbers, plus the JWT serializer that adds portal claims to tokens.
"""

import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from services.validators import normalize_phone_number, phone_number_validator

from .mixins import sees_all_companies
from .models import (
    ApplicationUser,
    Branch,
    Company,
    ContactNumber,
    Email,
    RelatedEntityType,
    SystemRole,
)

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = [
    'address_street',
    'address_city',
    'address_province',
    'address_postal_code',
    'address_country',
]

AUDIT_FIELDS = ['created_on', 'created_by', 'updated_date', 'updated_by']


class PhoneNumberField(serializers.CharField):
    """Char field that normalizes local numbers to +27 before validation."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_length', 20)
        kwargs.setdefault('validators', [phone_number_validator])
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return normalize_phone_number(super().to_internal_value(data))


# =============================================================================
# EMAIL & CONTACT NUMBER SERIALIZERS
# =============================================================================

ENTITY_MODELS = {
    RelatedEntityType.USER: ApplicationUser,
    RelatedEntityType.COMPANY: Company,
    RelatedEntityType.BRANCH: Branch,
}


def company_id_of(entity):
    if isinstance(entity, Company):
        return entity.pk
    return entity.company_id


class RelatedEntitySerializerMixin:
    """
    Resolves ``related_entity_type`` / ``related_entity_id`` to the owning
    user, company or branch and links the row through ``set_related_entity``.
    """

    def validate(self, attrs):
        attrs = super().validate(attrs)

        if 'related_entity_type' in attrs or 'related_entity_id' in attrs:
            entity_type = attrs.get('related_entity_type', getattr(self.instance, 'related_entity_type', None))
            entity_id = attrs.get('related_entity_id', getattr(self.instance, 'related_entity_id', None))
            attrs['related_entity'] = self._resolve_entity(entity_type, entity_id)

        return attrs

    def _resolve_entity(self, entity_type, entity_id):
        model = ENTITY_MODELS.get(entity_type)
        if model is None or not entity_id:
            raise serializers.ValidationError(
                {'related_entity_type': 'Related entity type and id are required.'}
            )

        missing = serializers.ValidationError(
            {'related_entity_id': f'{entity_type} {entity_id} does not exist.'}
        )
        try:
            entity = model.objects.get(pk=entity_id)
        except (model.DoesNotExist, ValueError, DjangoValidationError):
            raise missing

        request = self.context.get('request')
        if request and not sees_all_companies(request.user):
            if company_id_of(entity) != request.user.company_id:
                raise missing

        return entity

    def create(self, validated_data):
        entity = validated_data.pop('related_entity')
        instance = self.Meta.model(**validated_data)
        instance.set_related_entity(entity)
        instance.save()
        return instance

    def update(self, instance, validated_data):
        entity = validated_data.pop('related_entity', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if entity is not None:
            instance.set_related_entity(entity)
        instance.save()
        return instance


class EmailSerializer(RelatedEntitySerializerMixin, serializers.ModelSerializer):

    class Meta:
        model = Email
        fields = [
            'id',
            'email_address',
            'description',
            'is_primary',
            'is_active',
            'related_entity_type',
            'related_entity_id',
            'user',
            'company',
            'branch',
        ] + AUDIT_FIELDS
        read_only_fields = ['id', 'user', 'company', 'branch'] + AUDIT_FIELDS


class ContactNumberSerializer(RelatedEntitySerializerMixin, serializers.ModelSerializer):
    number = PhoneNumberField()

    class Meta:
        model = ContactNumber
        fields = [
            'id',
            'number',
            'type',
            'description',
            'is_primary',
            'is_active',
            'related_entity_type',
            'related_entity_id',
            'user',
            'company',
            'branch',
        ] + AUDIT_FIELDS
        read_only_fields = ['id', 'user', 'company', 'branch'] + AUDIT_FIELDS


# =============================================================================
# COMPANY & BRANCH SERIALIZERS
# =============================================================================

class BranchSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)
    contact_number = PhoneNumberField(required=False, allow_blank=True)
    full_address = serializers.SerializerMethodField()

    class Meta:
        model = Branch
        fields = [
            'id',
            'company',
            'company_name',
            'name',
            'contact_number',
            'email',
            'is_head_office',
            'is_active',
            'full_address',
        ] + ADDRESS_FIELDS + AUDIT_FIELDS
        read_only_fields = ['id', 'company_name', 'full_address'] + AUDIT_FIELDS
        extra_kwargs = {'company': {'required': False}}

    def get_full_address(self, obj):
        return obj.get_full_address()

    def validate(self, attrs):
        if self.instance is None and attrs.get('company') is None:
            request = self.context.get('request')
            company = getattr(getattr(request, 'user', None), 'company', None)
            if company is None:
                raise serializers.ValidationError({'company': 'This field is required.'})
            attrs['company'] = company
        return attrs


class CompanySerializer(serializers.ModelSerializer):
    """
    Company serializer for list, create and update.

    Removal state is managed by the destroy endpoint only.
    """
    contact_number = PhoneNumberField()
    full_address = serializers.SerializerMethodField()

    class Meta:
        model = Company
        fields = [
            'id',
            'name',
            'registration_number',
            'contact_number',
            'email',
            'website',
            'vat_number',
            'is_active',
            'full_address',
        ] + ADDRESS_FIELDS + AUDIT_FIELDS
        read_only_fields = ['id', 'full_address'] + AUDIT_FIELDS

    def get_full_address(self, obj):
        return obj.get_full_address()


class CompanyDetailSerializer(CompanySerializer):
    """Company with its branches, email addresses and contact numbers."""
    branches = BranchSerializer(many=True, read_only=True)
    email_addresses = EmailSerializer(many=True, read_only=True)
    contact_numbers = ContactNumberSerializer(many=True, read_only=True)
    user_count = serializers.SerializerMethodField()

    class Meta(CompanySerializer.Meta):
        fields = CompanySerializer.Meta.fields + [
            'branches',
            'email_addresses',
            'contact_numbers',
            'user_count',
        ]

    def get_user_count(self, obj):
        return obj.users.filter(is_active=True).count()


# =============================================================================
# USER SERIALIZERS
# =============================================================================

class UserSerializer(serializers.ModelSerializer):
    """
    User management serializer.

    The password is write-only and always stored through ``set_password``.
    """
    password = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    company_name = serializers.CharField(source='company.name', read_only=True, allow_null=True)
    branch_name = serializers.CharField(source='branch.name', read_only=True, allow_null=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = ApplicationUser
        fields = [
            'id',
            'username',
            'password',
            'first_name',
            'last_name',
            'full_name',
            'email',
            'company',
            'company_name',
            'branch',
            'branch_name',
            'role',
            'is_active',
            'last_login',
            'last_login_ip',
            'date_joined',
        ]
        read_only_fields = ['id', 'full_name', 'last_login', 'last_login_ip', 'date_joined']

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_role(self, value):
        request = self.context.get('request')
        if (
            value == SystemRole.SYSTEM_ADMINISTRATOR
            and request is not None
            and not sees_all_companies(request.user)
        ):
            raise serializers.ValidationError('Only system administrators can grant this role.')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required.'})

        company = attrs.get('company', getattr(self.instance, 'company', None))
        request = self.context.get('request')
        if request is not None and not sees_all_companies(request.user):
            # Company-bound callers always save into their own company
            company = request.user.company
        branch = attrs.get('branch', getattr(self.instance, 'branch', None))
        if branch is not None and company is not None and branch.company_id != company.pk:
            raise serializers.ValidationError({'branch': 'Branch must belong to the user\'s company.'})

        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = ApplicationUser(**validated_data)
        user.set_password(password)
        user.save()
        logger.info(f"Created user '{user.username}' with role {user.role}")
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class CompanySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = ['id', 'name', 'registration_number', 'email', 'contact_number']


class BranchSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Branch
        fields = ['id', 'name', 'is_head_office']


class UserProfileSerializer(serializers.ModelSerializer):
    """The authenticated user's own profile."""
    company = CompanySummarySerializer(read_only=True)
    branch = BranchSummarySerializer(read_only=True)
    email_addresses = EmailSerializer(many=True, read_only=True)
    contact_numbers = ContactNumberSerializer(many=True, read_only=True)
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = ApplicationUser
        fields = [
            'id',
            'username',
            'first_name',
            'last_name',
            'full_name',
            'email',
            'role',
            'role_display',
            'is_superuser',
            'company',
            'branch',
            'email_addresses',
            'contact_numbers',
            'last_login',
            'last_login_ip',
        ]
        read_only_fields = fields


# =============================================================================
# JWT
# =============================================================================

class PortalTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Adds company, branch, role and display name claims to issued tokens."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['company_id'] = str(user.company_id) if user.company_id else None
        token['branch_id'] = str(user.branch_id) if user.branch_id else None
        token['role'] = user.role
        token['full_name'] = user.full_name
        return token
