# ===== CDN APP TEST SUITE =====
"""
Test suite for the CDN proxy
File: cdn/tests.py

Test Coverage:
- API key gate on every proxy endpoint
- Upstream status code and body relayed unchanged
- Upstream network failures reported as 500 with the reason
- View redirect carrying the API key
- Upload size and filename checks
- Request key casing, metadata and access log side effects
- Diagnostics endpoints
"""

import json
from unittest.mock import patch

import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from .models import CdnAccessLog, CdnCategory, CdnFileMetadata

API_KEY = 'test-key-123'

TEST_CDN = {
    'API_URL': 'https://cdn.example.test/api/cdn',
    'BASE_URL': 'https://cdn.example.test/cdn',
    'API_KEY': API_KEY,
    'TIMEOUT': 100,
    'UPLOAD_TIMEOUT': 300,
    'MAX_UPLOAD_SIZE': 1024,
    'BYPASS_PATHS': ['/api/cdn-debug/ping'],
}

UPSTREAM_URL = TEST_CDN['API_URL']

PROXY_ENDPOINTS = [
    ('post', '/api/cdn/upload/'),
    ('delete', '/api/cdn/delete/?path=documents/a.pdf'),
    ('post', '/api/cdn/rename/'),
    ('get', '/api/cdn/details/?path=documents/a.pdf'),
    ('get', '/api/cdn/files/'),
    ('get', '/api/cdn/view/?path=documents/a.pdf'),
    ('get', '/api/cdn/categories/'),
    ('get', '/api/cdn/folders/'),
    ('post', '/api/cdn/folder/'),
    ('delete', '/api/cdn/folder/?category=documents&path=old'),
    ('post', '/api/cdn/folder/rename/'),
    ('post', '/api/cdn/move/'),
    ('post', '/api/cdn/maintenance/clean/'),
    ('post', '/api/cdn/maintenance/clearcache/'),
    ('get', '/api/cdn-debug/test-connection/'),
]


def make_response(status_code=200, json_body=None, content=None, content_type='application/json'):
    response = requests.Response()
    response.status_code = status_code
    if content is None:
        content = json.dumps(json_body if json_body is not None else {'success': True}).encode('utf-8')
    response._content = content
    response.headers['Content-Type'] = content_type
    response.reason = 'OK' if status_code < 400 else 'Error'
    return response


# =============================================================================
# API KEY GATE TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnApiKeyTest(APITestCase):
    """Every proxy endpoint rejects a missing or wrong key before forwarding"""

    @patch('services.cdn_client.requests.Session.request')
    def test_missing_key_is_rejected_everywhere(self, mock_request):
        for method, url in PROXY_ENDPOINTS:
            with self.subTest(method=method, url=url):
                response = getattr(self.client, method)(url)

                self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
                self.assertEqual(response.json(), {'success': False, 'message': 'API key is required'})

        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_invalid_key_is_rejected_everywhere(self, mock_request):
        self.client.credentials(HTTP_X_API_KEY='wrong-key')

        for method, url in PROXY_ENDPOINTS:
            with self.subTest(method=method, url=url):
                response = getattr(self.client, method)(url)

                self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
                self.assertEqual(response.json(), {'success': False, 'message': 'Invalid API key'})

        mock_request.assert_not_called()

    @override_settings(CDN={**TEST_CDN, 'API_KEY': ''})
    def test_unconfigured_key_rejects_every_request(self):
        self.client.credentials(HTTP_X_API_KEY='anything')

        response = self.client.get('/api/cdn/categories/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @patch('services.cdn_client.requests.Session.request')
    def test_key_accepted_from_query_string(self, mock_request):
        mock_request.return_value = make_response(json_body=['documents'])

        response = self.client.get(f'/api/cdn/categories/?key={API_KEY}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    @patch('services.cdn_client.requests.Session.request')
    def test_routes_work_without_trailing_slash(self, mock_request):
        mock_request.return_value = make_response(json_body=['documents'])
        self.client.credentials(HTTP_X_API_KEY=API_KEY)

        response = self.client.get('/api/cdn/categories')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_ping_needs_no_key(self):
        response = self.client.get('/api/cdn-debug/ping/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['message'], 'CDN Debug controller is operational')
        self.assertIn('controller', body)
        self.assertIn('timestamp', body)


# =============================================================================
# RELAY TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnRelayTest(APITestCase):
    """Upstream responses come back unchanged"""

    def setUp(self):
        self.client.credentials(HTTP_X_API_KEY=API_KEY)

    @patch('services.cdn_client.requests.Session.request')
    def test_details_relays_status_and_body(self, mock_request):
        upstream_body = {'success': False, 'message': 'File not found'}
        mock_request.return_value = make_response(404, upstream_body)

        response = self.client.get('/api/cdn/details/?path=documents/missing.pdf')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), upstream_body)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', f'{UPSTREAM_URL}/details'))
        self.assertEqual(kwargs['params'], {'path': 'documents/missing.pdf'})
        self.assertEqual(kwargs['headers']['X-Api-Key'], API_KEY)

    @patch('services.cdn_client.requests.Session.request')
    def test_files_forwards_only_given_filters(self, mock_request):
        upstream_body = {'files': [{'name': 'a.pdf'}], 'total': 1}
        mock_request.return_value = make_response(200, upstream_body)

        response = self.client.get('/api/cdn/files/?category=documents&pattern=*.pdf')

        self.assertEqual(response.json(), upstream_body)
        self.assertEqual(mock_request.call_args[1]['params'], {'category': 'documents', 'pattern': '*.pdf'})

    @patch('services.cdn_client.requests.Session.request')
    def test_folders_defaults_to_documents(self, mock_request):
        mock_request.return_value = make_response(200, {'folders': []})

        self.client.get('/api/cdn/folders/')

        self.assertEqual(mock_request.call_args[1]['params'], {'category': 'documents'})

    @patch('services.cdn_client.requests.Session.request')
    def test_json_body_is_relayed_byte_for_byte(self, mock_request):
        upstream_content = b'{"size": 1.50,  "n": NaN}'
        mock_request.return_value = make_response(200, content=upstream_content)

        response = self.client.get('/api/cdn/details/?path=documents/a.pdf')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, upstream_content)
        self.assertEqual(response['Content-Type'], 'application/json')

    @patch('services.cdn_client.requests.Session.request')
    def test_non_json_body_is_relayed_with_content_type(self, mock_request):
        mock_request.return_value = make_response(502, content=b'<html>Bad Gateway</html>', content_type='text/html')

        response = self.client.get('/api/cdn/categories/')

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.content, b'<html>Bad Gateway</html>')
        self.assertTrue(response['Content-Type'].startswith('text/html'))

    @patch('services.cdn_client.requests.Session.request')
    def test_network_error_returns_500_with_reason(self, mock_request):
        mock_request.side_effect = requests.ConnectionError('Name or service not known')

        response = self.client.get('/api/cdn/categories/')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        body = response.json()
        self.assertFalse(body['success'])
        self.assertTrue(body['message'].startswith('Internal server error: '))
        self.assertIn('Name or service not known', body['message'])

    @patch('services.cdn_client.requests.Session.request')
    def test_every_call_is_access_logged(self, mock_request):
        mock_request.return_value = make_response(404, {'success': False, 'message': 'File not found'})

        self.client.get('/api/cdn/details/?path=documents/a.pdf')

        log = CdnAccessLog.objects.get()
        self.assertEqual(log.action_type, 'details')
        self.assertEqual(log.path, 'documents/a.pdf')
        self.assertEqual(log.status_code, 404)
        self.assertFalse(log.is_success)
        self.assertEqual(log.error_message, 'File not found')

    @patch('services.cdn_client.requests.Session.request')
    def test_access_log_ignores_malformed_forwarded_address(self, mock_request):
        mock_request.return_value = make_response(200, {'categories': []})

        self.client.get('/api/cdn/categories/', HTTP_X_FORWARDED_FOR='not-an-ip', REMOTE_ADDR='192.0.2.10')

        self.assertEqual(CdnAccessLog.objects.get().ip_address, '192.0.2.10')


# =============================================================================
# JSON BODY ENDPOINT TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnJsonEndpointTest(APITestCase):

    def setUp(self):
        self.client.credentials(HTTP_X_API_KEY=API_KEY)

    @patch('services.cdn_client.requests.Session.request')
    def test_rename_accepts_camel_case_and_forwards_pascal_case(self, mock_request):
        mock_request.return_value = make_response(200, {'success': True, 'url': 'documents/b.pdf'})

        response = self.client.post(
            '/api/cdn/rename/', {'path': 'documents/a.pdf', 'newName': 'b.pdf'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{UPSTREAM_URL}/rename'))
        self.assertEqual(kwargs['json'], {'Path': 'documents/a.pdf', 'NewName': 'b.pdf'})

    @patch('services.cdn_client.requests.Session.request')
    def test_rename_requires_path_and_new_name(self, mock_request):
        response = self.client.post('/api/cdn/rename/', {'Path': 'documents/a.pdf'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'success': False, 'message': 'Path and new name are required'})
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_rename_with_malformed_json_is_bad_request(self, mock_request):
        response = self.client.post('/api/cdn/rename/', data='{"Path": ', content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertFalse(body['success'])
        self.assertTrue(body['message'].startswith('JSON parse error'))
        mock_request.assert_not_called()

        log = CdnAccessLog.objects.get()
        self.assertEqual(log.action_type, 'rename')
        self.assertEqual(log.status_code, 400)

    @patch('services.cdn_client.requests.Session.request')
    def test_move_with_unsupported_media_type(self, mock_request):
        response = self.client.post('/api/cdn/move/', data='Category=documents', content_type='text/plain')

        self.assertEqual(response.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.assertFalse(response.json()['success'])
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_create_folder(self, mock_request):
        mock_request.return_value = make_response(201, {'success': True})

        response = self.client.post(
            '/api/cdn/folder/', {'category': 'documents', 'path': 'leases'}, format='json'
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(mock_request.call_args[1]['json'], {'Category': 'documents', 'Path': 'leases'})

    @patch('services.cdn_client.requests.Session.request')
    def test_delete_folder_forwards_query(self, mock_request):
        mock_request.return_value = make_response(200, {'success': True})

        self.client.delete('/api/cdn/folder/?category=documents&path=old')

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('DELETE', f'{UPSTREAM_URL}/folder'))
        self.assertEqual(kwargs['params'], {'category': 'documents', 'path': 'old'})

    def test_delete_folder_requires_category_and_path(self):
        response = self.client.delete('/api/cdn/folder/?category=documents')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Category and path are required')

    @patch('services.cdn_client.requests.Session.request')
    def test_rename_folder(self, mock_request):
        mock_request.return_value = make_response(200, {'success': True})

        self.client.post(
            '/api/cdn/folder/rename/',
            {'Category': 'documents', 'Path': 'old', 'new_name': 'new'},
            format='json',
        )

        self.assertEqual(mock_request.call_args[0], ('POST', f'{UPSTREAM_URL}/folder/rename'))
        self.assertEqual(
            mock_request.call_args[1]['json'],
            {'Category': 'documents', 'Path': 'old', 'NewName': 'new'},
        )

    def test_rename_folder_requires_all_fields(self):
        response = self.client.post('/api/cdn/folder/rename/', {'Category': 'documents'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Category, path, and new name are required')

    @patch('services.cdn_client.requests.Session.request')
    def test_move_files(self, mock_request):
        mock_request.return_value = make_response(200, {'success': True, 'moved': 2})

        response = self.client.post(
            '/api/cdn/move/',
            {'Category': 'documents', 'Files': ['a.pdf', 'b.pdf'], 'TargetFolder': 'archive'},
            format='json',
        )

        self.assertEqual(response.json(), {'success': True, 'moved': 2})
        self.assertEqual(
            mock_request.call_args[1]['json'],
            {'Category': 'documents', 'Files': ['a.pdf', 'b.pdf'], 'TargetFolder': 'archive'},
        )

    def test_move_requires_category_and_files(self):
        response = self.client.post('/api/cdn/move/', {'Category': 'documents', 'Files': []}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Category and files are required')

    @patch('services.cdn_client.requests.Session.request')
    def test_maintenance_endpoints(self, mock_request):
        mock_request.return_value = make_response(200, {'success': True})

        self.client.post('/api/cdn/maintenance/clean/', {'daysOld': 30}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{UPSTREAM_URL}/maintenance/clean'))
        self.assertEqual(mock_request.call_args[1]['json'], {'DaysOld': 30})

        self.client.post('/api/cdn/maintenance/clearcache/')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{UPSTREAM_URL}/maintenance/clearcache'))


# =============================================================================
# FILE ENDPOINT TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnFileEndpointTest(APITestCase):

    def setUp(self):
        self.client.credentials(HTTP_X_API_KEY=API_KEY)

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_relays_and_records_metadata(self, mock_request):
        upstream_body = {
            'success': True,
            'url': 'https://cdn.example.test/cdn/documents/leases/lease.pdf',
            'fileName': 'lease.pdf',
        }
        mock_request.return_value = make_response(200, upstream_body)
        upload = SimpleUploadedFile('lease.pdf', b'%PDF-1.4 test', content_type='application/pdf')

        response = self.client.post(
            '/api/cdn/upload/', {'file': upload, 'category': 'documents', 'folder': 'leases'}, format='multipart'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), upstream_body)

        kwargs = mock_request.call_args[1]
        self.assertEqual(kwargs['data'], {'category': 'documents', 'folder': 'leases'})
        self.assertEqual(kwargs['timeout'], 300)

        metadata = CdnFileMetadata.objects.get()
        self.assertEqual(metadata.url, upstream_body['url'])
        self.assertEqual(metadata.original_file_name, 'lease.pdf')
        self.assertEqual(metadata.folder, 'leases')
        self.assertFalse(metadata.is_deleted)

    @patch('services.cdn_client.requests.Session.request')
    def test_failed_upload_records_nothing(self, mock_request):
        mock_request.return_value = make_response(400, {'success': False, 'message': 'Invalid category'})
        upload = SimpleUploadedFile('lease.pdf', b'%PDF-1.4 test')

        response = self.client.post('/api/cdn/upload/', {'file': upload}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Invalid category')
        self.assertFalse(CdnFileMetadata.objects.exists())

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_without_file(self, mock_request):
        response = self.client.post('/api/cdn/upload/', {'category': 'documents'}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'success': False, 'message': 'No file was uploaded'})
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_over_size_limit(self, mock_request):
        upload = SimpleUploadedFile('big.pdf', b'x' * 2048)

        response = self.client.post('/api/cdn/upload/', {'file': upload}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])
        self.assertIn('File size exceeds limit', response.json()['message'])
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_with_script_filename(self, mock_request):
        upload = SimpleUploadedFile('<script>alert.pdf', b'data')

        response = self.client.post('/api/cdn/upload/', {'file': upload}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Filename contains invalid characters')
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_upload_rejects_extension_not_allowed_by_category(self, mock_request):
        CdnCategory.objects.create(name='images', display_name='Images', allowed_file_types='.jpg,.png')
        upload = SimpleUploadedFile('lease.pdf', b'%PDF-1.4 test')

        response = self.client.post(
            '/api/cdn/upload/', {'file': upload, 'category': 'images'}, format='multipart'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'File type .pdf not allowed for category images')
        mock_request.assert_not_called()

    @patch('services.cdn_client.requests.Session.request')
    def test_delete_marks_metadata_deleted(self, mock_request):
        metadata = CdnFileMetadata.objects.create(
            file_name='a.pdf', original_file_name='a.pdf', url='documents/a.pdf'
        )
        mock_request.return_value = make_response(200, {'success': True})

        response = self.client.delete('/api/cdn/delete/?path=documents/a.pdf')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('DELETE', f'{UPSTREAM_URL}/delete'))
        self.assertEqual(kwargs['params'], {'path': 'documents/a.pdf'})
        metadata.refresh_from_db()
        self.assertTrue(metadata.is_deleted)
        self.assertIsNotNone(metadata.deleted_at)

    @patch('services.cdn_client.requests.Session.request')
    def test_failed_delete_keeps_metadata(self, mock_request):
        metadata = CdnFileMetadata.objects.create(
            file_name='a.pdf', original_file_name='a.pdf', url='documents/a.pdf'
        )
        mock_request.return_value = make_response(404, {'success': False, 'message': 'File not found'})

        response = self.client.delete('/api/cdn/delete/?path=documents/a.pdf')

        self.assertEqual(response.status_code, 404)
        metadata.refresh_from_db()
        self.assertFalse(metadata.is_deleted)

    def test_delete_requires_path(self):
        response = self.client.delete('/api/cdn/delete/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'success': False, 'message': 'No file path provided'})

    def test_view_redirect_appends_key_with_question_mark(self):
        response = self.client.get('/api/cdn/view/?path=https://cdn.example.test/cdn/documents/a.pdf')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(response['Location'], f'https://cdn.example.test/cdn/documents/a.pdf?key={API_KEY}')

    def test_view_redirect_appends_key_with_ampersand(self):
        response = self.client.get(
            '/api/cdn/view/', {'path': 'https://cdn.example.test/cdn/documents/a.pdf?v=2'}
        )

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(response['Location'], f'https://cdn.example.test/cdn/documents/a.pdf?v=2&key={API_KEY}')

    def test_view_redirect_resolves_relative_path(self):
        response = self.client.get('/api/cdn/view/?path=documents/a.pdf')

        self.assertEqual(response['Location'], f'https://cdn.example.test/cdn/documents/a.pdf?key={API_KEY}')

    def test_view_requires_path(self):
        response = self.client.get('/api/cdn/view/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


# =============================================================================
# DIAGNOSTICS TESTS
# =============================================================================

@override_settings(CDN=TEST_CDN)
class CdnDiagnosticsTest(APITestCase):

    def setUp(self):
        self.client.credentials(HTTP_X_API_KEY=API_KEY)

    @patch('services.cdn_client.requests.Session.request')
    def test_connection_summary_truncates_preview(self, mock_request):
        mock_request.return_value = make_response(200, content=b'a' * 1500, content_type='text/plain')

        response = self.client.get('/api/cdn-debug/test-connection/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['request']['url'], f'{UPSTREAM_URL}/ping')
        self.assertNotIn(API_KEY, str(body['request']))
        self.assertEqual(body['response']['statusCode'], 200)
        self.assertEqual(body['response']['contentLength'], 1500)
        self.assertEqual(body['response']['contentPreview'], 'a' * 1000 + '...')

    @patch('services.cdn_client.requests.Session.request')
    def test_connection_failure_returns_500(self, mock_request):
        mock_request.side_effect = requests.Timeout('timed out')

        response = self.client.get('/api/cdn-debug/test-connection/')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('timed out', response.json()['message'])


# =============================================================================
# MODEL TESTS
# =============================================================================

class CdnCategoryModelTest(TestCase):

    def test_wildcard_allows_everything(self):
        category = CdnCategory(name='documents', display_name='Documents', allowed_file_types='*')
        self.assertTrue(category.allows_extension('.exe'))

    def test_extension_list_is_case_insensitive(self):
        category = CdnCategory(name='images', display_name='Images', allowed_file_types='.JPG, png')
        self.assertTrue(category.allows_extension('.jpg'))
        self.assertTrue(category.allows_extension('PNG'))
        self.assertFalse(category.allows_extension('.pdf'))
