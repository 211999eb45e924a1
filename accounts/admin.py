"""
Accounts Admin - Roovia portal
Django admin configuration for companies, branches, users, email addresses
and contact numbers.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import ApplicationUser, Branch, Company, ContactNumber, Email


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class BranchInline(admin.TabularInline):
    """Inline listing of branches within company admin"""
    model = Branch
    extra = 0
    fields = ['name', 'contact_number', 'email', 'is_head_office', 'is_active']


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'registration_number', 'email', 'address_city', 'is_active', 'is_removed']
    list_filter = ['is_active', 'is_removed', 'address_province']
    search_fields = ['name', 'registration_number', 'email', 'vat_number']
    readonly_fields = ['id', 'created_on', 'created_by', 'updated_date', 'updated_by', 'removed_date']
    inlines = [BranchInline]

    fieldsets = (
        ('Company', {
            'fields': ('id', 'name', 'registration_number', 'vat_number', 'website')
        }),
        ('Contact', {
            'fields': ('contact_number', 'email')
        }),
        ('Address', {
            'fields': (
                'address_street', 'address_city', 'address_province',
                'address_postal_code', 'address_country',
            )
        }),
        ('Status', {
            'fields': ('is_active', 'is_removed', 'removed_date')
        }),
        ('Audit', {
            'fields': ('created_on', 'created_by', 'updated_date', 'updated_by'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'address_city', 'is_head_office', 'is_active']
    list_filter = ['is_active', 'is_head_office', 'company']
    search_fields = ['name', 'company__name', 'address_city']
    list_select_related = ['company']
    readonly_fields = ['id', 'created_on', 'created_by', 'updated_date', 'updated_by']


@admin.register(ApplicationUser)
class ApplicationUserAdmin(UserAdmin):
    list_display = ['username', 'email', 'first_name', 'last_name', 'company', 'branch', 'role', 'is_active']
    list_filter = UserAdmin.list_filter + ('role', 'company')
    list_select_related = ['company', 'branch']
    readonly_fields = ['last_login', 'last_login_ip', 'date_joined']

    fieldsets = UserAdmin.fieldsets + (
        ('Portal', {
            'fields': ('company', 'branch', 'role', 'last_login_ip')
        }),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Portal', {
            'fields': ('company', 'branch', 'role')
        }),
    )


@admin.register(Email)
class EmailAdmin(admin.ModelAdmin):
    list_display = ['email_address', 'related_entity_type', 'related_entity_id', 'is_primary', 'is_active']
    list_filter = ['related_entity_type', 'is_primary', 'is_active']
    search_fields = ['email_address', 'related_entity_id']


@admin.register(ContactNumber)
class ContactNumberAdmin(admin.ModelAdmin):
    list_display = ['number', 'type', 'related_entity_type', 'related_entity_id', 'is_primary', 'is_active']
    list_filter = ['type', 'related_entity_type', 'is_primary', 'is_active']
    search_fields = ['number', 'related_entity_id']
