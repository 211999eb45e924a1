# services/cdn_client.py
"""
Upstream CDN client for the Roovia portal.
Forwards file-storage calls to the external CDN API.
"""

import hmac
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urljoin

import requests
from django.conf import settings

from . import CdnServiceError

logger = logging.getLogger(__name__)


class CdnClient:
    """
    Thin HTTP client for the upstream CDN API.

    One pooled ``requests.Session`` is shared by every call. Configuration is
    read from ``settings.CDN`` on each call so it follows settings overrides.
    """

    def __init__(self):
        self.session = requests.Session()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def config(self) -> Dict[str, Any]:
        return settings.CDN

    @property
    def api_key(self) -> str:
        return self.config.get('API_KEY') or ''

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.config.get('API_URL'))

    def build_url(self, endpoint: str) -> str:
        return f"{self.config['API_URL'].rstrip('/')}/{endpoint.lstrip('/')}"

    # =========================================================================
    # UPSTREAM CALLS
    # =========================================================================

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """
        Send one request to the upstream CDN API.

        Args:
            method: HTTP method
            endpoint: Path relative to CDN_API_URL (e.g. "folder/rename")
            params: Query string parameters
            json: JSON body
            files: Multipart files
            data: Multipart form fields
            timeout: Seconds, defaults to CDN_TIMEOUT

        Returns:
            The upstream response, whatever its status code

        Raises:
            CdnServiceError: If the upstream could not be reached
        """
        url = self.build_url(endpoint)
        headers = {
            'X-Api-Key': self.api_key,
            'Accept': 'application/json',
        }
        if timeout is None:
            timeout = self.config['TIMEOUT']

        logger.info(f"CDN request: {method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                files=files,
                data=data,
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as e:
            logger.error(f"CDN request failed: {method} {url}: {str(e)}")
            raise CdnServiceError(str(e)) from e

        logger.info(f"CDN response: {method} {url} -> {response.status_code}")
        return response

    def upload(self, file, category: str, folder: Optional[str] = None) -> requests.Response:
        """
        Forward a multipart upload.

        Args:
            file: Django UploadedFile
            category: CDN category name
            folder: Optional folder inside the category
        """
        data = {'category': category}
        if folder:
            data['folder'] = folder

        files = {
            'file': (file.name, file, file.content_type or 'application/octet-stream'),
        }

        return self.request(
            'POST',
            'upload',
            files=files,
            data=data,
            timeout=self.config['UPLOAD_TIMEOUT'],
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def get_view_url(self, path: str) -> str:
        """
        Build the browser URL for a stored file, carrying the API key.

        Absolute URLs are kept as-is, relative paths are resolved against
        CDN_BASE_URL.
        """
        if path.startswith(('http://', 'https://')):
            url = path
        else:
            base_url = self.config['BASE_URL'].rstrip('/') + '/'
            url = urljoin(base_url, path.lstrip('/'))

        url, hash_mark, fragment = url.partition('#')
        separator = '&' if '?' in url else '?'
        return f"{url}{separator}{urlencode({'key': self.api_key})}{hash_mark}{fragment}"

    def is_valid_api_key(self, candidate: Optional[str]) -> bool:
        """Constant-time comparison against the configured key."""
        expected = self.api_key
        if not expected or not candidate:
            return False
        return hmac.compare_digest(candidate.encode('utf-8'), expected.encode('utf-8'))


# Module-level singleton shared by views and middleware
cdn_client = CdnClient()
