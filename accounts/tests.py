# ===== ACCOUNTS APP TEST SUITE =====
"""
Test suite for companies, branches, users and their contact details
File: accounts/tests.py

Test Coverage:
- Model helpers (addresses, related entities, soft delete)
- Company scoping of every endpoint
- User management, password hashing and deactivation
- JWT token claims and the current user profile
"""

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from .models import Branch, Company, ContactNumber, Email, RelatedEntityType, SystemRole

User = get_user_model()

PASSWORD = 'Sunset-Harbour-42'


def create_company(name='Acme Properties', **kwargs):
    defaults = {
        'registration_number': '2020/123456/07',
        'contact_number': '+27211234567',
        'email': f"info@{name.lower().replace(' ', '')}.co.za",
    }
    defaults.update(kwargs)
    return Company.objects.create(name=name, **defaults)


def create_user(username, company=None, branch=None, role=SystemRole.PROPERTY_MANAGER, **kwargs):
    return User.objects.create_user(
        username=username,
        password=PASSWORD,
        company=company,
        branch=branch,
        role=role,
        **kwargs
    )


# =============================================================================
# MODEL TESTS
# =============================================================================

class CompanyModelTest(TestCase):
    """Test Company model functionality"""

    def setUp(self):
        self.company = create_company(
            address_street='1 Long Street',
            address_city='Cape Town',
            address_province='Western Cape',
            address_postal_code='8001',
        )

    def test_full_address(self):
        self.assertEqual(
            self.company.get_full_address(),
            '1 Long Street, Cape Town, Western Cape, 8001, South Africa'
        )

    def test_full_address_partial_data(self):
        company = create_company('Partial', address_city='Durban')
        self.assertEqual(company.get_full_address(), 'Durban, South Africa')

    def test_can_be_removed_without_branches_or_users(self):
        self.assertTrue(self.company.can_be_removed())

    def test_cannot_be_removed_with_branch(self):
        Branch.objects.create(company=self.company, name='Head Office')
        self.assertFalse(self.company.can_be_removed())

    def test_soft_delete(self):
        self.company.soft_delete(removed_by='admin')
        self.company.refresh_from_db()

        self.assertTrue(self.company.is_removed)
        self.assertFalse(self.company.is_active)
        self.assertIsNotNone(self.company.removed_date)
        self.assertEqual(self.company.updated_by, 'admin')

    def test_invalid_postal_code(self):
        self.company.address_postal_code = '80011'
        with self.assertRaises(ValidationError):
            self.company.full_clean()


class ApplicationUserModelTest(TestCase):

    def test_default_role(self):
        user = User.objects.create_user(username='viewer', password=PASSWORD)
        self.assertEqual(user.role, SystemRole.REPORTS_VIEWER)
        self.assertFalse(user.is_system_administrator)

    def test_superuser_is_system_administrator(self):
        user = User.objects.create_superuser(username='root', password=PASSWORD, email='root@example.com')
        self.assertTrue(user.is_system_administrator)

    def test_full_name_falls_back_to_username(self):
        user = User.objects.create_user(username='jdoe', password=PASSWORD)
        self.assertEqual(user.full_name, 'jdoe')
        user.first_name, user.last_name = 'Jane', 'Doe'
        self.assertEqual(user.full_name, 'Jane Doe')

    def test_branch_must_belong_to_company(self):
        company = create_company()
        other_branch = Branch.objects.create(company=create_company('Other Co'), name='Elsewhere')
        user = User(username='mixed', company=company, branch=other_branch)

        with self.assertRaises(ValidationError) as ctx:
            user.clean()
        self.assertIn('branch', ctx.exception.message_dict)


class RelatedEntityModelTest(TestCase):

    def setUp(self):
        self.company = create_company()
        self.branch = Branch.objects.create(company=self.company, name='Head Office')

    def test_set_related_entity_company(self):
        email = Email(email_address='accounts@acme.co.za')
        email.set_related_entity(self.company)
        email.save()

        self.assertEqual(email.related_entity_type, RelatedEntityType.COMPANY)
        self.assertEqual(email.related_entity_id, str(self.company.pk))
        self.assertEqual(email.get_related_entity(), self.company)
        self.assertIsNone(email.branch)
        self.assertIn(email, self.company.email_addresses.all())

    def test_set_related_entity_replaces_previous_owner(self):
        number = ContactNumber(number='+27211234567')
        number.set_related_entity(self.company)
        number.set_related_entity(self.branch)
        number.save()

        self.assertEqual(number.related_entity_type, RelatedEntityType.BRANCH)
        self.assertIsNone(number.company)
        self.assertEqual(number.branch, self.branch)

    def test_unsupported_entity(self):
        with self.assertRaises(ValueError):
            Email(email_address='x@example.com').set_related_entity(object())

    def test_clean_requires_entity(self):
        email = Email(email_address='x@example.com')
        with self.assertRaises(ValidationError):
            email.clean()


# =============================================================================
# API TESTS
# =============================================================================

class AccountsAPITestCase(APITestCase):
    """Two companies, a manager in each and a system administrator"""

    def setUp(self):
        self.company = create_company()
        self.branch = Branch.objects.create(company=self.company, name='Head Office', is_head_office=True)
        self.manager = create_user('manager', company=self.company, branch=self.branch)

        self.other_company = create_company('Rival Rentals')
        self.other_branch = Branch.objects.create(company=self.other_company, name='Rival HQ')
        self.other_manager = create_user('rival', company=self.other_company, branch=self.other_branch)

        self.admin = create_user('sysadmin', role=SystemRole.SYSTEM_ADMINISTRATOR)


class AuthenticationTest(AccountsAPITestCase):

    def test_unauthenticated_request_is_rejected(self):
        response = self.client.get('/api/companies/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_carries_portal_claims(self):
        response = self.client.post(
            '/api/auth/token/', {'username': 'manager', 'password': PASSWORD}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['company_id'], str(self.company.pk))
        self.assertEqual(token['branch_id'], str(self.branch.pk))
        self.assertEqual(token['role'], SystemRole.PROPERTY_MANAGER)
        self.assertEqual(token['full_name'], 'manager')

    def test_bearer_token_authenticates(self):
        response = self.client.post(
            '/api/auth/token/', {'username': 'manager', 'password': PASSWORD}, format='json'
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")

        response = self.client.get('/api/users/me/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'manager')

    def test_wrong_password(self):
        response = self.client.post(
            '/api/auth/token/', {'username': 'manager', 'password': 'nope'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CompanyAPITest(AccountsAPITestCase):

    def test_manager_sees_only_own_company(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get('/api/companies/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [row['id'] for row in response.data['results']]
        self.assertEqual(ids, [str(self.company.pk)])

    def test_manager_cannot_read_other_company(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get(f'/api/companies/{self.other_company.pk}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_all_companies(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get('/api/companies/')

        self.assertEqual(response.data['count'], 2)

    def test_only_admin_creates_companies(self):
        payload = {
            'name': 'New Co',
            'registration_number': '2024/000001/07',
            'contact_number': '021 555 0000',
            'email': 'info@newco.co.za',
        }

        self.client.force_authenticate(self.manager)
        response = self.client.post('/api/companies/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/companies/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['contact_number'], '+27215550000')
        self.assertEqual(response.data['created_by'], 'sysadmin')

    def test_company_requires_contact_details(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/companies/', {'name': 'Bare Co'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('contact_number', response.data)
        self.assertIn('email', response.data)

    def test_remove_company_with_branches_is_refused(self):
        self.client.force_authenticate(self.admin)

        response = self.client.delete(f'/api/companies/{self.company.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.company.refresh_from_db()
        self.assertFalse(self.company.is_removed)

    def test_remove_empty_company(self):
        empty = create_company('Empty Co')
        self.client.force_authenticate(self.admin)

        response = self.client.delete(f'/api/companies/{empty.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        empty.refresh_from_db()
        self.assertTrue(empty.is_removed)
        self.assertEqual(self.client.get(f'/api/companies/{empty.pk}/').status_code, status.HTTP_404_NOT_FOUND)

    def test_company_details(self):
        Email.objects.create(
            email_address='billing@acme.co.za',
            related_entity_type=RelatedEntityType.COMPANY,
            related_entity_id=str(self.company.pk),
            company=self.company,
        )
        self.client.force_authenticate(self.manager)

        response = self.client.get(f'/api/companies/{self.company.pk}/details/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['branches']), 1)
        self.assertEqual(response.data['email_addresses'][0]['email_address'], 'billing@acme.co.za')
        self.assertEqual(response.data['user_count'], 1)


class BranchAPITest(AccountsAPITestCase):

    def test_create_branch_pins_company(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/branches/',
            {'name': 'Stellenbosch', 'company': str(self.other_company.pk)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['company'], self.company.pk)

    def test_branch_users(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get(f'/api/branches/{self.branch.pk}/users/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['username'] for row in response.data['results']], ['manager'])

    def test_other_company_branch_hidden(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get(f'/api/branches/{self.other_branch.pk}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class UserAPITest(AccountsAPITestCase):

    def test_create_user_hashes_password(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/users/',
            {'username': 'clerk', 'password': PASSWORD, 'role': SystemRole.TENANT_OFFICER},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        clerk = User.objects.get(username='clerk')
        self.assertNotEqual(clerk.password, PASSWORD)
        self.assertTrue(clerk.check_password(PASSWORD))
        self.assertEqual(clerk.company, self.company)

    def test_create_user_requires_password(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post('/api/users/', {'username': 'clerk'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_manager_cannot_grant_system_administrator(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/users/',
            {'username': 'sneaky', 'password': PASSWORD, 'role': SystemRole.SYSTEM_ADMINISTRATOR},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('role', response.data)

    def test_branch_from_other_company_rejected(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/users/',
            {'username': 'clerk', 'password': PASSWORD, 'branch': str(self.other_branch.pk)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('branch', response.data)

    def test_destroy_deactivates(self):
        colleague = create_user('colleague', company=self.company)
        self.client.force_authenticate(self.manager)

        response = self.client.delete(f'/api/users/{colleague.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        colleague.refresh_from_db()
        self.assertFalse(colleague.is_active)

    def test_cannot_deactivate_self(self):
        self.client.force_authenticate(self.manager)

        response = self.client.delete(f'/api/users/{self.manager.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.manager.refresh_from_db()
        self.assertTrue(self.manager.is_active)

    def test_me_records_login_address(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get('/api/users/me/', REMOTE_ADDR='10.0.0.5')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company']['name'], 'Acme Properties')
        self.assertEqual(response.data['role_display'], 'Property Manager')
        self.manager.refresh_from_db()
        self.assertEqual(self.manager.last_login_ip, '10.0.0.5')
        self.assertIsNotNone(self.manager.last_login)

    def test_me_uses_forwarded_address(self):
        self.client.force_authenticate(self.manager)

        self.client.get('/api/users/me/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1', REMOTE_ADDR='10.0.0.1')

        self.manager.refresh_from_db()
        self.assertEqual(self.manager.last_login_ip, '203.0.113.7')

    def test_me_ignores_malformed_forwarded_address(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get('/api/users/me/', HTTP_X_FORWARDED_FOR='<script>', REMOTE_ADDR='10.0.0.5')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.manager.refresh_from_db()
        self.assertEqual(self.manager.last_login_ip, '10.0.0.5')


class RelatedEntityAPITest(AccountsAPITestCase):

    def test_create_email_for_branch(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/emails/',
            {
                'email_address': 'branch@acme.co.za',
                'related_entity_type': RelatedEntityType.BRANCH,
                'related_entity_id': str(self.branch.pk),
                'is_primary': True,
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        email = Email.objects.get(pk=response.data['id'])
        self.assertEqual(email.branch, self.branch)
        self.assertEqual(email.created_by, 'manager')

    def test_cannot_attach_to_other_company(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            '/api/contact-numbers/',
            {
                'number': '+27215550000',
                'related_entity_type': RelatedEntityType.COMPANY,
                'related_entity_id': str(self.other_company.pk),
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('related_entity_id', response.data)

    def test_list_is_company_scoped(self):
        own = Email(email_address='mine@acme.co.za')
        own.set_related_entity(self.manager)
        own.save()
        foreign = Email(email_address='theirs@rival.co.za')
        foreign.set_related_entity(self.other_branch)
        foreign.save()
        self.client.force_authenticate(self.manager)

        response = self.client.get('/api/emails/')

        addresses = [row['email_address'] for row in response.data['results']]
        self.assertEqual(addresses, ['mine@acme.co.za'])
