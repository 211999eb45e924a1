# ===== PROPERTIES APP TEST SUITE =====
"""
Comprehensive test suite for properties app functionality
File: properties/tests.py

Test Coverage:
- Property lease rules and lease status
- Tenant soft delete and its effect on the property
- API endpoints for owners, properties and tenants
- Company scoping, filtering and search
- Seed data management command
"""

from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Branch, Company, SystemRole
from cdn.models import CdnCategory

from .models import Property, PropertyOwner, PropertyTenant, validate_lease

User = get_user_model()

PASSWORD = 'Sunset-Harbour-42'


def create_company(name='Acme Properties'):
    return Company.objects.create(
        name=name,
        registration_number='2020/123456/07',
        contact_number='+27211234567',
        email='info@example.co.za',
    )


def create_owner(company, first_name='Thandi', last_name='Nkosi', **kwargs):
    return PropertyOwner.objects.create(
        company=company,
        first_name=first_name,
        last_name=last_name,
        id_number='8001015009087',
        **kwargs
    )


def create_property(company, owner, **kwargs):
    defaults = {
        'address_street': '12 Kloof Street',
        'address_city': 'Cape Town',
        'address_province': 'Western Cape',
        'address_postal_code': '8001',
        'rental_amount': Decimal('9500.00'),
    }
    defaults.update(kwargs)
    return Property.objects.create(company=company, owner=owner, **defaults)


def create_tenant(rental, first_name='Sipho', last_name='Dlamini', **kwargs):
    return PropertyTenant.objects.create(
        company=rental.company,
        property=rental,
        first_name=first_name,
        last_name=last_name,
        id_number='9202025009081',
        **kwargs
    )


# =============================================================================
# MODEL TESTS
# =============================================================================

class LeaseRulesTest(TestCase):
    """Test lease validation and status"""

    def setUp(self):
        self.company = create_company()
        self.owner = create_owner(self.company)
        self.rental = create_property(self.company, self.owner)

    def test_vacant_property_needs_no_lease_dates(self):
        self.assertEqual(validate_lease(False, None, None, None), {})

    def test_tenanted_property_requires_lease_dates(self):
        errors = validate_lease(True, None, None, None)
        self.assertEqual(
            set(errors),
            {'lease_original_start_date', 'current_lease_start_date', 'lease_end_date'}
        )

    def test_lease_end_before_start(self):
        errors = validate_lease(True, date(2024, 1, 1), date(2024, 3, 1), date(2024, 2, 1))
        self.assertIn('lease_end_date', errors)

    def test_clean_raises_for_invalid_lease(self):
        self.rental.has_tenant = True
        with self.assertRaises(ValidationError):
            self.rental.clean()

    def test_current_tenant_must_belong_to_property(self):
        other = create_property(self.company, self.owner, address_street='1 Other Road')
        tenant = create_tenant(other)
        self.rental.current_tenant = tenant

        with self.assertRaises(ValidationError) as ctx:
            self.rental.clean()
        self.assertIn('current_tenant', ctx.exception.message_dict)

    def test_lease_status(self):
        today = date.today()
        self.assertEqual(self.rental.get_lease_status(), 'Vacant')

        self.rental.has_tenant = True
        self.rental.lease_end_date = today + timedelta(days=200)
        self.assertEqual(self.rental.get_lease_status(), 'Active')

        self.rental.lease_end_date = today + timedelta(days=30)
        self.assertEqual(self.rental.get_lease_status(), 'Expiring Soon')
        self.assertEqual(self.rental.get_days_until_lease_end(), 30)

        self.rental.lease_end_date = today - timedelta(days=1)
        self.assertEqual(self.rental.get_lease_status(), 'Expired')

    def test_full_address(self):
        self.assertEqual(
            self.rental.get_full_address(),
            '12 Kloof Street, Cape Town, Western Cape, 8001, South Africa'
        )


class TenantSoftDeleteTest(TestCase):

    def setUp(self):
        self.company = create_company()
        self.rental = create_property(self.company, create_owner(self.company))
        self.tenant = create_tenant(self.rental)
        self.rental.has_tenant = True
        self.rental.current_tenant = self.tenant
        self.rental.save()

    def test_soft_delete_hides_tenant(self):
        self.tenant.soft_delete(removed_by='manager')

        self.assertFalse(PropertyTenant.objects.filter(pk=self.tenant.pk).exists())
        removed = PropertyTenant.all_objects.get(pk=self.tenant.pk)
        self.assertTrue(removed.is_removed)
        self.assertEqual(removed.removed_by, 'manager')
        self.assertIsNotNone(removed.removed_date)

    def test_soft_delete_of_current_tenant_vacates_property(self):
        self.tenant.soft_delete(removed_by='manager')
        self.rental.refresh_from_db()

        self.assertIsNone(self.rental.current_tenant)
        self.assertFalse(self.rental.has_tenant)
        self.assertEqual(self.rental.updated_by, 'manager')

    def test_soft_delete_of_other_tenant_keeps_current(self):
        previous = create_tenant(self.rental, first_name='Old')
        previous.soft_delete(removed_by='manager')
        self.rental.refresh_from_db()

        self.assertEqual(self.rental.current_tenant, self.tenant)
        self.assertTrue(self.rental.has_tenant)


# =============================================================================
# API TESTS
# =============================================================================

class PropertiesAPITestCase(APITestCase):

    def setUp(self):
        self.company = create_company()
        self.manager = User.objects.create_user(
            username='manager', password=PASSWORD, company=self.company, role=SystemRole.PROPERTY_MANAGER
        )
        self.owner = create_owner(self.company)
        self.rental = create_property(self.company, self.owner)

        self.other_company = create_company('Rival Rentals')
        self.other_owner = create_owner(self.other_company, 'Pieter', 'Botha')
        self.other_rental = create_property(
            self.other_company, self.other_owner, address_street='5 Beach Road', address_city='Durban'
        )

        self.admin = User.objects.create_user(
            username='sysadmin', password=PASSWORD, role=SystemRole.SYSTEM_ADMINISTRATOR
        )
        self.client.force_authenticate(self.manager)


class PropertyOwnerAPITest(PropertiesAPITestCase):

    def test_list_is_company_scoped(self):
        response = self.client.get('/api/owners/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['full_name'] for row in response.data['results']], ['Thandi Nkosi'])

    def test_create_owner_defaults_to_user_company(self):
        response = self.client.post(
            '/api/owners/',
            {
                'first_name': 'Lerato',
                'last_name': 'Mokoena',
                'id_number': '8505055009083',
                'mobile_number': '082 123 4567',
                'bank_name': 'fnb',
                'bank_account_number': '6201234567',
                'bank_branch_code': '250655',
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        owner = PropertyOwner.objects.get(pk=response.data['id'])
        self.assertEqual(owner.company, self.company)
        self.assertEqual(owner.mobile_number, '+27821234567')
        self.assertEqual(owner.created_by, 'manager')

    def test_invalid_id_number(self):
        response = self.client.post(
            '/api/owners/',
            {'first_name': 'A', 'last_name': 'B', 'id_number': '123'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('id_number', response.data)

    def test_admin_without_company_must_name_one(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            '/api/owners/',
            {'first_name': 'A', 'last_name': 'B', 'id_number': '8505055009083'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('company', response.data)

    def test_owner_properties(self):
        response = self.client.get(f'/api/owners/{self.owner.pk}/properties/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [self.rental.pk])

    def test_owner_with_properties_cannot_be_deleted(self):
        response = self.client.delete(f'/api/owners/{self.owner.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(PropertyOwner.objects.filter(pk=self.owner.pk).exists())


class PropertyAPITest(PropertiesAPITestCase):

    def property_payload(self, **overrides):
        payload = {
            'owner': self.owner.pk,
            'address_street': '7 Bree Street',
            'address_city': 'Cape Town',
            'address_postal_code': '8001',
            'rental_amount': '12000.00',
        }
        payload.update(overrides)
        return payload

    def test_list_is_company_scoped(self):
        response = self.client.get('/api/properties/')

        self.assertEqual([row['id'] for row in response.data['results']], [self.rental.pk])

    def test_other_company_property_hidden(self):
        response = self.client.get(f'/api/properties/{self.other_rental.pk}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_vacant_property(self):
        response = self.client.post('/api/properties/', self.property_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['lease_status'], 'Vacant')
        self.assertEqual(response.data['owner_name'], 'Thandi Nkosi')
        self.assertEqual(Property.objects.get(pk=response.data['id']).company, self.company)

    def test_tenanted_property_requires_lease_dates(self):
        response = self.client.post('/api/properties/', self.property_payload(has_tenant=True), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('lease_end_date', response.data)

    def test_lease_end_before_current_start(self):
        response = self.client.post(
            '/api/properties/',
            self.property_payload(
                has_tenant=True,
                lease_original_start_date='2024-01-01',
                current_lease_start_date='2024-06-01',
                lease_end_date='2024-05-31',
            ),
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('lease_end_date', response.data)

    def test_negative_rental_rejected(self):
        response = self.client.post(
            '/api/properties/', self.property_payload(rental_amount='-1.00'), format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rental_amount', response.data)

    def test_owner_from_other_company_rejected(self):
        response = self.client.post(
            '/api/properties/', self.property_payload(owner=self.other_owner.pk), format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('owner', response.data)

    def test_set_current_tenant(self):
        tenant = create_tenant(self.rental)

        response = self.client.patch(
            f'/api/properties/{self.rental.pk}/',
            {
                'has_tenant': True,
                'current_tenant': tenant.pk,
                'lease_original_start_date': '2024-01-01',
                'current_lease_start_date': '2024-01-01',
                'lease_end_date': str(date.today() + timedelta(days=365)),
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['current_tenant_name'], 'Sipho Dlamini')
        self.assertEqual(response.data['lease_status'], 'Active')
        self.assertEqual(response.data['updated_by'], 'manager')

    def test_current_tenant_of_other_property_rejected(self):
        stranger = create_tenant(create_property(self.company, self.owner, address_street='9 Long Street'))

        response = self.client.patch(
            f'/api/properties/{self.rental.pk}/', {'current_tenant': stranger.pk}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_tenant', response.data)

    def test_retrieve_includes_active_tenants(self):
        create_tenant(self.rental)
        create_tenant(self.rental, first_name='Gone').soft_delete(removed_by='manager')

        response = self.client.get(f'/api/properties/{self.rental.pk}/')

        self.assertEqual([row['full_name'] for row in response.data['tenants']], ['Sipho Dlamini'])

    def test_property_tenants_action(self):
        create_tenant(self.rental)
        create_tenant(self.rental, first_name='Gone').soft_delete(removed_by='manager')

        response = self.client.get(f'/api/properties/{self.rental.pk}/tenants/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_filters_and_search(self):
        create_property(
            self.company, self.owner,
            address_street='3 Main Road', address_city='Stellenbosch', rental_amount=Decimal('4000.00'),
        )

        response = self.client.get('/api/properties/', {'city': 'stellen'})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/properties/', {'min_rental': 5000})
        self.assertEqual([row['id'] for row in response.data['results']], [self.rental.pk])

        response = self.client.get('/api/properties/', {'search': 'Nkosi'})
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/properties/', {'has_tenant': 'true'})
        self.assertEqual(response.data['count'], 0)

    def test_statistics(self):
        response = self.client.get('/api/properties/statistics/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_properties'], 1)
        self.assertEqual(response.data['vacant'], 1)
        self.assertEqual(response.data['lease_status']['Vacant'], 1)

    def test_statistics_counts_occupied_leases(self):
        tenant = create_tenant(self.rental)
        self.rental.has_tenant = True
        self.rental.current_tenant = tenant
        self.rental.lease_end_date = date.today() + timedelta(days=10)
        self.rental.save()
        create_property(self.company, self.owner, address_street='3 Main Road')

        response = self.client.get('/api/properties/statistics/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_properties'], 2)
        self.assertEqual(response.data['occupied'], 1)
        self.assertEqual(response.data['vacant'], 1)
        self.assertEqual(
            response.data['lease_status'],
            {'Active': 0, 'Expiring Soon': 1, 'Expired': 0, 'Vacant': 1}
        )


class PropertyTenantAPITest(PropertiesAPITestCase):

    def test_create_tenant_takes_property_company(self):
        response = self.client.post(
            '/api/tenants/',
            {
                'property': self.rental.pk,
                'first_name': 'Naledi',
                'last_name': 'Khumalo',
                'id_number': '9505050009085',
                'email_address': 'naledi@example.com',
                'debit_day_of_month': 25,
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        tenant = PropertyTenant.objects.get(pk=response.data['id'])
        self.assertEqual(tenant.company, self.company)
        self.assertEqual(response.data['property_address'], self.rental.get_full_address())

    def test_debit_day_out_of_range(self):
        response = self.client.post(
            '/api/tenants/',
            {
                'property': self.rental.pk,
                'first_name': 'Naledi',
                'last_name': 'Khumalo',
                'id_number': '9505050009085',
                'debit_day_of_month': 32,
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('debit_day_of_month', response.data)

    def test_invalid_email_rejected(self):
        response = self.client.post(
            '/api/tenants/',
            {
                'property': self.rental.pk,
                'first_name': 'Naledi',
                'last_name': 'Khumalo',
                'id_number': '9505050009085',
                'email_address': 'not-an-email',
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email_address', response.data)

    def test_property_of_other_company_rejected(self):
        response = self.client.post(
            '/api/tenants/',
            {
                'property': self.other_rental.pk,
                'first_name': 'Naledi',
                'last_name': 'Khumalo',
                'id_number': '9505050009085',
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('property', response.data)

    def test_destroy_is_soft_delete(self):
        tenant = create_tenant(self.rental)
        self.rental.has_tenant = True
        self.rental.current_tenant = tenant
        self.rental.save()

        response = self.client.delete(f'/api/tenants/{tenant.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(PropertyTenant.all_objects.get(pk=tenant.pk).is_removed)
        self.rental.refresh_from_db()
        self.assertFalse(self.rental.has_tenant)
        self.assertIsNone(self.rental.current_tenant)

        self.assertEqual(self.client.get(f'/api/tenants/{tenant.pk}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/tenants/').data['count'], 0)

    def test_property_with_tenant_history_cannot_be_deleted(self):
        create_tenant(self.rental).soft_delete(removed_by='manager')

        response = self.client.delete(f'/api/properties/{self.rental.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


# =============================================================================
# MANAGEMENT COMMAND TESTS
# =============================================================================

class SeedDataCommandTest(TestCase):

    def test_seeds_default_category_once(self):
        call_command('seed_data', stdout=StringIO())
        call_command('seed_data', stdout=StringIO())

        category = CdnCategory.objects.get()
        self.assertEqual(category.name, 'documents')
        self.assertEqual(category.allowed_file_types, '*')

    def test_seeds_company_branch_and_admin(self):
        call_command('seed_data', '--with-company', '--admin-password', PASSWORD, stdout=StringIO())
        call_command('seed_data', '--with-company', '--admin-password', PASSWORD, stdout=StringIO())

        company = Company.objects.get()
        branch = Branch.objects.get()
        self.assertTrue(branch.is_head_office)
        self.assertEqual(branch.company, company)

        admin = User.objects.get(username='admin')
        self.assertEqual(admin.role, SystemRole.SYSTEM_ADMINISTRATOR)
        self.assertTrue(admin.check_password(PASSWORD))

    def test_admin_password_required(self):
        with self.assertRaises(CommandError):
            call_command('seed_data', '--with-company', '--admin-password', '', stdout=StringIO())
