# ===== SECURITY MIDDLEWARE =====
"""
Custom security middleware for the Roovia portal.
Provides the CDN API key gate, upload validation and security monitoring.
"""

import logging
from typing import Dict, Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_ipv46_address
from django.http import JsonResponse

from services.cdn_client import cdn_client

logger = logging.getLogger(__name__)

CDN_PATH_PREFIX = '/api/cdn'
CDN_UPLOAD_PATH = '/api/cdn/upload'
API_KEY_HEADER = 'X-Api-Key'
API_KEY_QUERY_PARAM = 'key'


def _is_ip_address(value) -> bool:
    try:
        validate_ipv46_address(value)
    except ValidationError:
        return False
    return True


def get_client_ip(request) -> str:
    """
    Get real client IP address.

    A forwarded address is only trusted when it parses as an IP; otherwise
    the socket address is used. Returns 'unknown' when neither is valid.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
        if _is_ip_address(ip):
            return ip

    ip = request.META.get('REMOTE_ADDR', '')
    return ip if _is_ip_address(ip) else 'unknown'


def _failure(message: str, status: int) -> JsonResponse:
    return JsonResponse({'success': False, 'message': message}, status=status)


class CdnApiKeyMiddleware:
    """
    Rejects any request under /api/cdn that does not carry the configured key.

    The key is read from the ``X-Api-Key`` header first, then from the
    ``key`` query parameter. Paths listed in ``CDN['BYPASS_PATHS']`` are let
    through unchecked.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if self._is_protected(request.path):
            api_key = self._extract_api_key(request)

            if not api_key:
                logger.warning(f"CDN request without API key: {request.method} {request.path}")
                return _failure('API key is required', 401)

            if not cdn_client.is_valid_api_key(api_key):
                logger.warning(f"CDN request with invalid API key: {request.method} {request.path}")
                return _failure('Invalid API key', 401)

        return self.get_response(request)

    def _is_protected(self, path: str) -> bool:
        """Check if the path belongs to the CDN surface and is not bypassed."""
        if not path.startswith(CDN_PATH_PREFIX):
            return False
        bypass_paths = settings.CDN.get('BYPASS_PATHS', [])
        return not any(path.startswith(bypass) for bypass in bypass_paths)

    def _extract_api_key(self, request) -> str:
        return (
            request.headers.get(API_KEY_HEADER)
            or request.GET.get(API_KEY_QUERY_PARAM)
            or ''
        )


class CdnUploadSecurityMiddleware:
    """
    Security middleware for CDN uploads.

    Runs after the API key gate so anonymous uploads are never parsed.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        # Malicious patterns to check in filenames
        self.dangerous_patterns = ['../', '..\\', '<script', '<?php', '<%']

    def __call__(self, request):
        if request.method == 'POST' and request.path.startswith(CDN_UPLOAD_PATH):
            validation_result = self._validate_file_upload(request)
            if not validation_result['valid']:
                logger.warning(
                    f"Rejected CDN upload from {get_client_ip(request)}: {validation_result['message']}"
                )
                return _failure(validation_result['message'], 400)

        return self.get_response(request)

    def _validate_file_upload(self, request) -> Dict[str, Any]:
        """Size and filename validation for every uploaded file."""
        if not request.FILES:
            return {'valid': True}  # The view reports the missing file

        max_file_size = settings.CDN['MAX_UPLOAD_SIZE']

        for uploaded_file in request.FILES.values():
            if uploaded_file.size > max_file_size:
                return {
                    'valid': False,
                    'message': f'File size exceeds limit of {max_file_size // (1024 * 1024)}MB',
                }

            if self._contains_malicious_patterns(uploaded_file.name):
                return {
                    'valid': False,
                    'message': 'Filename contains invalid characters',
                }

        return {'valid': True}

    def _contains_malicious_patterns(self, filename: str) -> bool:
        """Check filename for malicious patterns."""
        filename_lower = filename.lower()
        return any(pattern in filename_lower for pattern in self.dangerous_patterns)


class SecurityAuditMiddleware:
    """
    Security audit middleware for logging and monitoring suspicious activities.

    Only query strings are inspected; request bodies may be large uploads.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        # Suspicious patterns to monitor
        self.suspicious_patterns = [
            'select * from',
            'union select',
            '<script>',
            'javascript:',
            '../',
            'cmd.exe',
            '/etc/passwd',
        ]

    def __call__(self, request):
        if self._is_suspicious_request(request):
            self._log_suspicious_activity(request)

        response = self.get_response(request)

        if response.status_code == 401:
            self._log_failed_auth(request)

        return response

    def _is_suspicious_request(self, request) -> bool:
        """Check if the query string contains suspicious patterns."""
        for value in request.GET.values():
            value_lower = value.lower()
            if any(pattern in value_lower for pattern in self.suspicious_patterns):
                return True
        return False

    def _log_suspicious_activity(self, request):
        """Log suspicious request activity."""
        ip_address = get_client_ip(request)
        logger.warning(
            f"Suspicious request detected - IP: {ip_address}, Path: {request.path}",
            extra={
                'ip_address': ip_address,
                'path': request.path,
                'method': request.method,
                'user_agent': request.META.get('HTTP_USER_AGENT', 'Unknown'),
            }
        )

    def _log_failed_auth(self, request):
        """Log failed authentication attempts."""
        ip_address = get_client_ip(request)
        logger.warning(
            f"Failed authentication attempt from {ip_address} on {request.path}",
            extra={
                'ip_address': ip_address,
                'path': request.path,
                'user_agent': request.META.get('HTTP_USER_AGENT', 'Unknown'),
            }
        )
