"""
Accounts models for the Roovia portal.

This module implements the identity side of the portal:
- Company: a property management business, the tenancy boundary of all data
- Branch: an office of a company
- ApplicationUser: the custom auth user, linked to a company and branch
- Email / ContactNumber: addresses and numbers attached to a user, company
  or branch through a discriminator

It also holds the abstract field groups (address, audit) shared with the
properties app.
"""

import uuid
import logging

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from services.validators import (
    phone_number_validator,
    postal_code_validator,
    website_validator,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CHOICES
# =============================================================================

class SystemRole(models.TextChoices):
    SYSTEM_ADMINISTRATOR = 'system_administrator', 'System Administrator'
    PROPERTY_MANAGER = 'property_manager', 'Property Manager'
    FINANCIAL_OFFICER = 'financial_officer', 'Financial Officer'
    TENANT_OFFICER = 'tenant_officer', 'Tenant Officer'
    REPORTS_VIEWER = 'reports_viewer', 'Reports Viewer'
    BRANCH_MANAGER = 'branch_manager', 'Branch Manager'
    COMPANY_ADMINISTRATOR = 'company_administrator', 'Company Administrator'


class RelatedEntityType(models.TextChoices):
    USER = 'User', 'User'
    COMPANY = 'Company', 'Company'
    BRANCH = 'Branch', 'Branch'


class ContactNumberType(models.TextChoices):
    MOBILE = 'mobile', 'Mobile'
    LANDLINE = 'landline', 'Landline'
    FAX = 'fax', 'Fax'
    WHATSAPP = 'whatsapp', 'WhatsApp'
    OTHER = 'other', 'Other'


# =============================================================================
# SHARED FIELD GROUPS
# =============================================================================

class AddressFields(models.Model):
    """Street address stored inline on the owning record."""

    address_street = models.CharField(max_length=200, blank=True)
    address_city = models.CharField(max_length=100, blank=True)
    address_province = models.CharField(max_length=50, blank=True)
    address_postal_code = models.CharField(
        max_length=4,
        blank=True,
        validators=[postal_code_validator],
    )
    address_country = models.CharField(max_length=50, blank=True, default='South Africa')

    class Meta:
        abstract = True

    def get_full_address(self):
        """
        Returns formatted full address.

        Returns:
            str: Comma-separated full address or empty string if no components
        """
        parts = [
            self.address_street,
            self.address_city,
            self.address_province,
            self.address_postal_code,
            self.address_country,
        ]
        return ", ".join(filter(None, parts))


class AuditFields(models.Model):
    """Who created and last changed a record, stored as usernames."""

    created_on = models.DateTimeField(default=timezone.now, editable=False)
    created_by = models.CharField(max_length=100, blank=True)
    updated_date = models.DateTimeField(null=True, blank=True)
    updated_by = models.CharField(max_length=100, blank=True)

    class Meta:
        abstract = True


# =============================================================================
# COMPANY & BRANCH
# =============================================================================

class Company(AddressFields, AuditFields):
    """
    A property management business.

    Companies are never deleted: removal flags the row and hides it, and is
    only allowed once no branch or user remains.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    registration_number = models.CharField(max_length=50)
    contact_number = models.CharField(max_length=20, validators=[phone_number_validator])
    email = models.EmailField(max_length=256)
    website = models.CharField(max_length=200, blank=True, validators=[website_validator])
    vat_number = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(default=True)
    is_removed = models.BooleanField(default=False)
    removed_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'companies'
        ordering = ['name']
        verbose_name = 'Company'
        verbose_name_plural = 'Companies'

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"<Company: {self.name}>"

    def can_be_removed(self):
        """A company can only be removed once it has no branches and no users."""
        return not self.branches.exists() and not self.users.exists()

    def soft_delete(self, removed_by=''):
        self.is_removed = True
        self.is_active = False
        self.removed_date = timezone.now()
        self.updated_date = self.removed_date
        self.updated_by = removed_by
        self.save(update_fields=['is_removed', 'is_active', 'removed_date', 'updated_date', 'updated_by'])
        logger.info(f"Company '{self.name}' ({self.pk}) removed by {removed_by or 'system'}")


class Branch(AddressFields, AuditFields):
    """An office of a company."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='branches')
    name = models.CharField(max_length=100)
    contact_number = models.CharField(
        max_length=20,
        blank=True,
        validators=[phone_number_validator],
    )
    email = models.EmailField(max_length=256, blank=True)
    is_head_office = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'branches'
        ordering = ['company__name', 'name']
        verbose_name = 'Branch'
        verbose_name_plural = 'Branches'

    def __str__(self):
        return f"{self.name} ({self.company.name})"

    def __repr__(self):
        return f"<Branch: {self.name}>"


# =============================================================================
# USERS
# =============================================================================

class ApplicationUser(AbstractUser):
    """
    Portal user.

    Every non-administrator user works inside one company; the company link
    scopes every query the user makes through the API.
    """

    company = models.ForeignKey(
        Company,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
    )
    branch = models.ForeignKey(
        Branch,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
    )
    role = models.CharField(
        max_length=30,
        choices=SystemRole.choices,
        default=SystemRole.REPORTS_VIEWER,
    )
    last_login_ip = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        db_table = 'application_users'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __repr__(self):
        return f"<ApplicationUser: {self.username}>"

    @property
    def full_name(self):
        return self.get_full_name() or self.username

    @property
    def is_system_administrator(self):
        return self.is_superuser or self.role == SystemRole.SYSTEM_ADMINISTRATOR

    def clean(self):
        super().clean()
        if self.branch_id and self.company_id and self.branch.company_id != self.company_id:
            raise ValidationError({'branch': 'Branch must belong to the user\'s company.'})


# =============================================================================
# EMAIL ADDRESSES & CONTACT NUMBERS
# =============================================================================

class RelatedEntityMixin(models.Model):
    """
    Links a row to exactly one user, company or branch.

    ``related_entity_type`` names the kind of owner and ``related_entity_id``
    holds its primary key as a string; the matching foreign key is set too so
    the owner can follow the reverse relation.
    """

    ENTITY_FIELDS = {
        RelatedEntityType.USER: 'user',
        RelatedEntityType.COMPANY: 'company',
        RelatedEntityType.BRANCH: 'branch',
    }

    related_entity_type = models.CharField(max_length=20, choices=RelatedEntityType.choices)
    related_entity_id = models.CharField(max_length=50)

    class Meta:
        abstract = True

    @classmethod
    def entity_type_for(cls, entity):
        if isinstance(entity, ApplicationUser):
            return RelatedEntityType.USER
        if isinstance(entity, Company):
            return RelatedEntityType.COMPANY
        if isinstance(entity, Branch):
            return RelatedEntityType.BRANCH
        raise ValueError(f"Unsupported related entity: {entity!r}")

    def set_related_entity(self, entity):
        """Point this row at ``entity``, clearing the other links."""
        entity_type = self.entity_type_for(entity)
        self.related_entity_type = entity_type
        self.related_entity_id = str(entity.pk)
        for candidate_type, field_name in self.ENTITY_FIELDS.items():
            setattr(self, field_name, entity if candidate_type == entity_type else None)

    def get_related_entity(self):
        field_name = self.ENTITY_FIELDS.get(self.related_entity_type)
        return getattr(self, field_name) if field_name else None

    def clean(self):
        super().clean()
        if self.related_entity_type not in self.ENTITY_FIELDS:
            raise ValidationError({'related_entity_type': 'Related entity type must be User, Company or Branch.'})
        if not self.related_entity_id:
            raise ValidationError({'related_entity_id': 'Related entity id is required.'})


class Email(RelatedEntityMixin, AuditFields):
    email_address = models.EmailField(max_length=256)
    description = models.CharField(max_length=50, blank=True)
    is_primary = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    user = models.ForeignKey(
        ApplicationUser, on_delete=models.CASCADE, null=True, blank=True, related_name='email_addresses'
    )
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, null=True, blank=True, related_name='email_addresses'
    )
    branch = models.ForeignKey(
        Branch, on_delete=models.CASCADE, null=True, blank=True, related_name='email_addresses'
    )

    class Meta:
        db_table = 'emails'
        ordering = ['-is_primary', 'email_address']
        verbose_name = 'Email Address'
        verbose_name_plural = 'Email Addresses'
        indexes = [
            models.Index(fields=['related_entity_type', 'related_entity_id'], name='emails_related_entity_idx'),
        ]

    def __str__(self):
        return self.email_address


class ContactNumber(RelatedEntityMixin, AuditFields):
    number = models.CharField(max_length=20, validators=[phone_number_validator])
    type = models.CharField(
        max_length=20,
        choices=ContactNumberType.choices,
        default=ContactNumberType.MOBILE,
    )
    description = models.CharField(max_length=50, blank=True)
    is_primary = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    user = models.ForeignKey(
        ApplicationUser, on_delete=models.CASCADE, null=True, blank=True, related_name='contact_numbers'
    )
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, null=True, blank=True, related_name='contact_numbers'
    )
    branch = models.ForeignKey(
        Branch, on_delete=models.CASCADE, null=True, blank=True, related_name='contact_numbers'
    )

    class Meta:
        db_table = 'contact_numbers'
        ordering = ['-is_primary', 'number']
        verbose_name = 'Contact Number'
        verbose_name_plural = 'Contact Numbers'
        indexes = [
            models.Index(fields=['related_entity_type', 'related_entity_id'], name='contact_numbers_related_idx'),
        ]

    def __str__(self):
        return f"{self.number} ({self.get_type_display()})"
