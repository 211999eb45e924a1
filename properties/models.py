"""
Properties models for the Roovia portal.

This module implements the rental side of the portal:
- PropertyOwner: the landlord a property is managed for
- Property: a rental unit with its lease dates
- PropertyTenant: a tenant renting a property

Every record belongs to one company; the API scopes all queries by it.
"""

import logging
from datetime import date, timedelta

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction
from django.utils import timezone

from accounts.models import AddressFields, AuditFields, Company
from services.validators import (
    bank_account_number_validator,
    bank_branch_code_validator,
    id_number_validator,
    phone_number_validator,
)

logger = logging.getLogger(__name__)

# A lease ending within this many days is reported as expiring soon
LEASE_EXPIRY_WARNING_DAYS = 60


# =============================================================================
# CHOICES & SHARED FIELD GROUPS
# =============================================================================

class BankName(models.TextChoices):
    ABSA = 'absa', 'Absa'
    CAPITEC = 'capitec', 'Capitec'
    FNB = 'fnb', 'FNB'
    NEDBANK = 'nedbank', 'Nedbank'
    STANDARD_BANK = 'standard_bank', 'Standard Bank'


class BankAccountFields(models.Model):
    """Bank account used for rental payments and owner payouts."""

    bank_account_type = models.CharField(max_length=100, blank=True)
    bank_account_number = models.CharField(
        max_length=10,
        blank=True,
        validators=[bank_account_number_validator],
    )
    bank_name = models.CharField(max_length=20, choices=BankName.choices, blank=True)
    bank_branch_code = models.CharField(
        max_length=6,
        blank=True,
        validators=[bank_branch_code_validator],
    )

    class Meta:
        abstract = True


class PersonFields(models.Model):
    """Identity and notification preferences shared by owners and tenants."""

    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    id_number = models.CharField(max_length=13, validators=[id_number_validator])
    email_address = models.EmailField(max_length=256, blank=True)
    is_email_notifications_enabled = models.BooleanField(default=True)
    mobile_number = models.CharField(max_length=20, blank=True, validators=[phone_number_validator])
    is_sms_notifications_enabled = models.BooleanField(default=False)

    class Meta:
        abstract = True

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


def validate_lease(has_tenant, original_start, current_start, end):
    """
    Lease rules for a property.

    Returns:
        dict: field name -> error message, empty when the lease is valid
    """
    errors = {}
    if not has_tenant:
        return errors

    if not original_start:
        errors['lease_original_start_date'] = 'Lease original start date is required.'
    if not current_start:
        errors['current_lease_start_date'] = 'Current lease start date is required.'
    if not end:
        errors['lease_end_date'] = 'Lease end date is required.'

    if current_start and end and end < current_start:
        errors['lease_end_date'] = 'Lease end date cannot be before the current lease start date.'
    if original_start and current_start and current_start < original_start:
        errors['current_lease_start_date'] = 'Current lease start date cannot be before the original start date.'

    return errors


# =============================================================================
# PROPERTY OWNER MODEL
# =============================================================================

class PropertyOwner(PersonFields, BankAccountFields, AddressFields, AuditFields):
    """The landlord a property is managed for."""

    company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='property_owners')
    vat_number = models.CharField(max_length=50, blank=True)

    class Meta:
        db_table = 'property_owners'
        ordering = ['last_name', 'first_name']
        verbose_name = 'Property Owner'
        verbose_name_plural = 'Property Owners'
        indexes = [
            models.Index(fields=['company', 'last_name'], name='owners_company_name_idx'),
        ]

    def __str__(self):
        return self.full_name

    def __repr__(self):
        return f"<PropertyOwner: {self.full_name}>"


# =============================================================================
# PROPERTY MODEL
# =============================================================================

class Property(AddressFields, AuditFields):
    """
    A rental property.

    Lease dates are only meaningful while the property has a tenant.
    """

    company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='properties')
    owner = models.ForeignKey(PropertyOwner, on_delete=models.PROTECT, related_name='properties')

    rental_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Monthly rental in ZAR"
    )
    has_tenant = models.BooleanField(default=False)
    lease_original_start_date = models.DateField(null=True, blank=True)
    current_lease_start_date = models.DateField(null=True, blank=True)
    lease_end_date = models.DateField(null=True, blank=True)
    current_tenant = models.ForeignKey(
        'PropertyTenant',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    class Meta:
        db_table = 'properties'
        ordering = ['address_city', 'address_street']
        verbose_name = 'Property'
        verbose_name_plural = 'Properties'
        indexes = [
            models.Index(fields=['company', 'has_tenant'], name='properties_company_tenant_idx'),
            models.Index(fields=['lease_end_date'], name='properties_lease_end_idx'),
        ]

    def __str__(self):
        return self.get_full_address() or f"Property {self.pk}"

    def __repr__(self):
        return f"<Property: {self.pk} {self.address_street}>"

    def clean(self):
        super().clean()
        errors = validate_lease(
            self.has_tenant,
            self.lease_original_start_date,
            self.current_lease_start_date,
            self.lease_end_date,
        )
        if self.current_tenant_id and self.current_tenant.property_id != self.pk:
            errors['current_tenant'] = 'Current tenant must be a tenant of this property.'
        if errors:
            raise ValidationError(errors)

    def get_lease_status(self):
        """
        Get current lease status.

        Returns:
            str: "Vacant", "Active", "Expiring Soon" or "Expired"
        """
        if not self.has_tenant or not self.lease_end_date:
            return "Vacant"

        today = date.today()
        if self.lease_end_date < today:
            return "Expired"
        elif self.lease_end_date <= today + timedelta(days=LEASE_EXPIRY_WARNING_DAYS):
            return "Expiring Soon"
        return "Active"

    def get_days_until_lease_end(self):
        if not self.lease_end_date:
            return None
        return (self.lease_end_date - date.today()).days


# =============================================================================
# PROPERTY TENANT MODEL
# =============================================================================

class ActiveTenantManager(models.Manager):
    """Hides removed tenants."""

    def get_queryset(self):
        return super().get_queryset().filter(is_removed=False)


class PropertyTenant(PersonFields, BankAccountFields, AddressFields, AuditFields):
    """
    A tenant renting a property.

    Tenants are never deleted: ``soft_delete`` flags the row and the default
    manager hides it.
    """

    company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='property_tenants')
    property = models.ForeignKey(Property, on_delete=models.PROTECT, related_name='tenants')
    debit_day_of_month = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
        help_text="Day of the month the rent is debited"
    )

    is_removed = models.BooleanField(default=False)
    removed_date = models.DateTimeField(null=True, blank=True)
    removed_by = models.CharField(max_length=100, blank=True)

    objects = ActiveTenantManager()
    all_objects = models.Manager()

    class Meta:
        db_table = 'property_tenants'
        ordering = ['last_name', 'first_name']
        verbose_name = 'Property Tenant'
        verbose_name_plural = 'Property Tenants'
        indexes = [
            models.Index(fields=['company', 'is_removed'], name='tenants_company_removed_idx'),
        ]

    def __str__(self):
        return self.full_name

    def __repr__(self):
        return f"<PropertyTenant: {self.full_name}>"

    def soft_delete(self, removed_by=''):
        """
        Flag the tenant removed.

        If the tenant is the property's current tenant, the property is
        marked vacant in the same transaction.
        """
        with transaction.atomic():
            self.is_removed = True
            self.removed_date = timezone.now()
            self.removed_by = removed_by
            self.save(update_fields=['is_removed', 'removed_date', 'removed_by'])

            rented = self.property
            if rented.current_tenant_id == self.pk:
                rented.current_tenant = None
                rented.has_tenant = False
                rented.updated_by = removed_by
                rented.updated_date = self.removed_date
                rented.save(update_fields=['current_tenant', 'has_tenant', 'updated_by', 'updated_date'])

        logger.info(f"Tenant {self.full_name} ({self.pk}) removed by {removed_by or 'system'}")
