"""
Properties Admin - Roovia portal
Django admin configuration for owners, properties and tenants.
"""

from django.contrib import admin
from django.db import models
from django.db.models import Count
from django.forms import TextInput
from django.urls import reverse
from django.utils.html import format_html

from .models import Property, PropertyOwner, PropertyTenant


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class PropertyTenantInline(admin.TabularInline):
    """Inline editing of tenants within property admin"""
    model = PropertyTenant
    extra = 0
    min_num = 0

    fields = [
        'first_name',
        'last_name',
        'mobile_number',
        'debit_day_of_month',
    ]

    formfield_overrides = {
        models.CharField: {'widget': TextInput(attrs={'size': '20'})},
    }


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    """
    Admin interface for properties.

    Features:
    - Filtering by company, occupancy and city
    - Inline tenant editing
    - Lease status column
    """

    list_display = [
        '__str__',
        'company',
        'owner',
        'rental_amount',
        'has_tenant',
        'lease_end_date',
        'lease_status',
        'tenant_count',
    ]

    list_filter = ['company', 'has_tenant', 'address_province', 'address_city']

    search_fields = [
        'address_street',
        'address_city',
        'owner__first_name',
        'owner__last_name',
    ]

    readonly_fields = ['created_on', 'created_by', 'updated_date', 'updated_by']

    fieldsets = (
        ('Ownership', {
            'fields': ('company', 'owner'),
        }),
        ('Address', {
            'fields': (
                'address_street',
                'address_city',
                'address_province',
                'address_postal_code',
                'address_country',
            ),
            'classes': ('wide',)
        }),
        ('Lease', {
            'fields': (
                'rental_amount',
                'has_tenant',
                'current_tenant',
                'lease_original_start_date',
                'current_lease_start_date',
                'lease_end_date',
            ),
            'classes': ('wide',)
        }),
        ('System Metadata', {
            'fields': ('created_on', 'created_by', 'updated_date', 'updated_by'),
            'classes': ('collapse',)
        }),
    )

    inlines = [PropertyTenantInline]
    list_per_page = 25

    def lease_status(self, obj):
        return obj.get_lease_status()
    lease_status.short_description = 'Lease'

    def tenant_count(self, obj):
        """Link to the tenants of this property"""
        count = obj.tenant_count
        if count > 0:
            url = reverse('admin:properties_propertytenant_changelist') + f'?property__id__exact={obj.id}'
            return format_html('<a href="{}">{} tenants</a>', url, count)
        return '0 tenants'
    tenant_count.short_description = 'Tenants'
    tenant_count.admin_order_field = 'tenant_count'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('owner', 'company').annotate(
            tenant_count=Count('tenants')
        )


@admin.register(PropertyOwner)
class PropertyOwnerAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'company', 'id_number', 'email_address', 'mobile_number']
    list_filter = ['company', 'bank_name']
    search_fields = ['first_name', 'last_name', 'id_number', 'email_address']
    readonly_fields = ['created_on', 'created_by', 'updated_date', 'updated_by']


@admin.register(PropertyTenant)
class PropertyTenantAdmin(admin.ModelAdmin):
    """
    Tenants including removed ones, so soft deletes can be audited.
    """

    list_display = ['full_name', 'company', 'property', 'debit_day_of_month', 'is_removed', 'removed_by']
    list_filter = ['company', 'is_removed']
    search_fields = ['first_name', 'last_name', 'id_number', 'email_address']
    readonly_fields = ['created_on', 'created_by', 'updated_date', 'updated_by', 'removed_date', 'removed_by']

    def get_queryset(self, request):
        return PropertyTenant.all_objects.select_related('property', 'company')
