# ===== SERVICES APP TEST SUITE =====
"""
Test suite for the services layer
File: services/tests.py

Test Coverage:
- CdnClient request building, timeouts and error wrapping
- View URL construction and API key comparison
- Shared field validators and phone number normalization
- Service health and configuration checks
"""

import io
from unittest.mock import patch

import requests
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from . import CdnServiceError, check_service_health, validate_service_configuration
from .cdn_client import CdnClient
from .validators import (
    id_number_validator,
    normalize_phone_number,
    phone_number_validator,
    postal_code_validator,
)

TEST_CDN = {
    'API_URL': 'https://cdn.example.test/api/cdn',
    'BASE_URL': 'https://cdn.example.test/cdn',
    'API_KEY': 'test-key-123',
    'TIMEOUT': 100,
    'UPLOAD_TIMEOUT': 300,
    'MAX_UPLOAD_SIZE': 1024,
    'BYPASS_PATHS': ['/api/cdn-debug/ping'],
}


def make_response(status_code=200, content=b'{"success": true}', content_type='application/json'):
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.headers['Content-Type'] = content_type
    return response


class NamedBytesIO(io.BytesIO):
    def __init__(self, content, name, content_type=None):
        super().__init__(content)
        self.name = name
        self.content_type = content_type


# =============================================================================
# CDN CLIENT TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnClientRequestTest(SimpleTestCase):
    """Test upstream calls made by CdnClient"""

    def setUp(self):
        self.client_under_test = CdnClient()

    @patch('services.cdn_client.requests.Session.request')
    def test_request_sends_api_key_and_default_timeout(self, mock_request):
        mock_request.return_value = make_response()

        response = self.client_under_test.request('GET', 'details', params={'path': 'a.pdf'})

        self.assertEqual(response.status_code, 200)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'https://cdn.example.test/api/cdn/details'))
        self.assertEqual(kwargs['params'], {'path': 'a.pdf'})
        self.assertEqual(kwargs['headers']['X-Api-Key'], 'test-key-123')
        self.assertEqual(kwargs['headers']['Accept'], 'application/json')
        self.assertEqual(kwargs['timeout'], 100)

    @patch('services.cdn_client.requests.Session.request')
    def test_request_returns_error_status_unchanged(self, mock_request):
        mock_request.return_value = make_response(404, b'{"success": false}')

        response = self.client_under_test.request('GET', 'details')

        self.assertEqual(response.status_code, 404)

    @patch('services.cdn_client.requests.Session.request')
    def test_network_error_is_wrapped(self, mock_request):
        mock_request.side_effect = requests.ConnectionError('Connection refused')

        with self.assertRaises(CdnServiceError) as ctx:
            self.client_under_test.request('GET', 'categories')

        self.assertIn('Connection refused', str(ctx.exception))

    @patch('services.cdn_client.requests.Session.request')
    def test_timeout_is_wrapped(self, mock_request):
        mock_request.side_effect = requests.Timeout('Read timed out')

        with self.assertRaises(CdnServiceError):
            self.client_under_test.request('GET', 'categories')

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_uses_multipart_and_upload_timeout(self, mock_request):
        mock_request.return_value = make_response()
        upload = NamedBytesIO(b'%PDF-1.4', 'lease.pdf', 'application/pdf')

        self.client_under_test.upload(upload, 'documents', 'leases/2025')

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'https://cdn.example.test/api/cdn/upload'))
        self.assertEqual(kwargs['data'], {'category': 'documents', 'folder': 'leases/2025'})
        self.assertEqual(kwargs['files']['file'][0], 'lease.pdf')
        self.assertEqual(kwargs['files']['file'][2], 'application/pdf')
        self.assertEqual(kwargs['timeout'], 300)

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_without_folder_or_content_type(self, mock_request):
        mock_request.return_value = make_response()
        upload = NamedBytesIO(b'data', 'blob.bin')

        self.client_under_test.upload(upload, 'documents')

        kwargs = mock_request.call_args[1]
        self.assertEqual(kwargs['data'], {'category': 'documents'})
        self.assertEqual(kwargs['files']['file'][2], 'application/octet-stream')


@override_settings(CDN=TEST_CDN)
class CdnClientHelpersTest(SimpleTestCase):
    """Test view URLs and API key checks"""

    def setUp(self):
        self.client_under_test = CdnClient()

    def test_view_url_appends_key_with_question_mark(self):
        self.assertEqual(
            self.client_under_test.get_view_url('https://cdn.example.test/cdn/documents/a.pdf'),
            'https://cdn.example.test/cdn/documents/a.pdf?key=test-key-123',
        )

    def test_view_url_appends_key_with_ampersand(self):
        self.assertEqual(
            self.client_under_test.get_view_url('https://cdn.example.test/cdn/a.pdf?v=2'),
            'https://cdn.example.test/cdn/a.pdf?v=2&key=test-key-123',
        )

    def test_view_url_resolves_relative_path(self):
        self.assertEqual(
            self.client_under_test.get_view_url('/documents/a.pdf'),
            'https://cdn.example.test/cdn/documents/a.pdf?key=test-key-123',
        )

    @override_settings(CDN={**TEST_CDN, 'API_KEY': 'a&b#c+d'})
    def test_view_url_encodes_key(self):
        self.assertEqual(
            self.client_under_test.get_view_url('https://cdn.example.test/cdn/f.pdf'),
            'https://cdn.example.test/cdn/f.pdf?key=a%26b%23c%2Bd',
        )

    def test_view_url_keeps_fragment_last(self):
        self.assertEqual(
            self.client_under_test.get_view_url('https://cdn.example.test/cdn/f.pdf?v=2#page=3'),
            'https://cdn.example.test/cdn/f.pdf?v=2&key=test-key-123#page=3',
        )

    def test_valid_api_key(self):
        self.assertTrue(self.client_under_test.is_valid_api_key('test-key-123'))

    def test_invalid_api_key(self):
        self.assertFalse(self.client_under_test.is_valid_api_key('test-key-124'))
        self.assertFalse(self.client_under_test.is_valid_api_key(''))
        self.assertFalse(self.client_under_test.is_valid_api_key(None))

    @override_settings(CDN={**TEST_CDN, 'API_KEY': ''})
    def test_no_configured_key_rejects_everything(self):
        self.assertFalse(self.client_under_test.is_valid_api_key(''))
        self.assertFalse(self.client_under_test.is_valid_api_key('anything'))
        self.assertFalse(self.client_under_test.is_configured)


# =============================================================================
# VALIDATOR TESTS
# =============================================================================

class ValidatorTest(SimpleTestCase):

    def test_phone_number_validator(self):
        phone_number_validator('+27821234567')
        phone_number_validator('27821234567')
        with self.assertRaises(ValidationError):
            phone_number_validator('082 123 4567')
        with self.assertRaises(ValidationError):
            phone_number_validator('+0821234567')

    def test_id_number_validator(self):
        id_number_validator('8001015009087')
        with self.assertRaises(ValidationError):
            id_number_validator('800101500908')

    def test_postal_code_validator(self):
        postal_code_validator('8001')
        with self.assertRaises(ValidationError):
            postal_code_validator('80012')

    def test_normalize_phone_number(self):
        self.assertEqual(normalize_phone_number('082 123 4567'), '+27821234567')
        self.assertEqual(normalize_phone_number('(082) 123-4567'), '+27821234567')
        self.assertEqual(normalize_phone_number('0027821234567'), '+27821234567')
        self.assertEqual(normalize_phone_number('+27821234567'), '+27821234567')


# =============================================================================
# HEALTH & CONFIGURATION TESTS
# =============================================================================

class ServiceHealthTest(SimpleTestCase):

    @override_settings(CDN=TEST_CDN)
    def test_health_reports_cdn_configuration(self):
        health = check_service_health()

        self.assertTrue(health['cdn']['configured'])
        self.assertTrue(health['cdn']['api_key_configured'])
        self.assertEqual(health['cdn']['api_url'], TEST_CDN['API_URL'])

    @override_settings(CDN={**TEST_CDN, 'API_KEY': ''})
    def test_configuration_flags_missing_api_key(self):
        is_valid, errors = validate_service_configuration()

        self.assertFalse(is_valid)
        self.assertTrue(any('CDN_API_KEY' in error for error in errors))
