"""
CDN proxy views for the Roovia portal.

Every endpoint forwards one call to the upstream CDN API and relays the
upstream status code and body unchanged. The API key has already been
checked by ``roovia.middleware.CdnApiKeyMiddleware`` when a view runs, so
the views carry no DRF authentication of their own.

Local side effects (file metadata, access log) never alter the relayed
response.
"""

import json
import logging
import os
import re
from functools import wraps

from django.db import DatabaseError
from django.http import HttpResponse, HttpResponseRedirect
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.exceptions import APIException
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from roovia.middleware import get_client_ip
from services.cdn_client import cdn_client

from .models import DEFAULT_CATEGORY, CdnAccessLog, CdnCategory, CdnFileMetadata

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_LENGTH = 1000


# =============================================================================
# HELPERS
# =============================================================================

def failure(message, status_code):
    return Response({'success': False, 'message': message}, status=status_code)


def key_variants(name):
    """'NewName' -> ('NewName', 'newName', 'new_name')"""
    camel = name[0].lower() + name[1:]
    snake = re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()
    return name, camel, snake


def get_value(data, name):
    """Read a request body value given in PascalCase, camelCase or snake_case."""
    if not hasattr(data, 'get'):
        return None
    for key in key_variants(name):
        if key in data:
            return data[key]
    return None


def get_username(request):
    # DRF authentication is disabled here, the Django session user is still set
    user = getattr(request._request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.get_username()
    return ''


def relay(upstream):
    """Pass an upstream ``requests.Response`` through byte for byte."""
    return HttpResponse(
        upstream.content,
        status=upstream.status_code,
        content_type=upstream.headers.get('Content-Type', 'application/octet-stream'),
    )


def upstream_json(upstream):
    """Parsed upstream body, or None when it is not JSON."""
    try:
        return upstream.json()
    except ValueError:
        return None


def response_body(response):
    if hasattr(response, 'data'):
        return response.data
    try:
        return json.loads(response.content)
    except ValueError:
        return None


def record_access(request, action_type, path, response, error_message=''):
    """One access log row per proxied call."""
    ip_address = get_client_ip(request)
    try:
        CdnAccessLog.objects.create(
            action_type=action_type,
            path=path or '',
            status_code=response.status_code,
            is_success=200 <= response.status_code < 400,
            error_message=error_message,
            username=get_username(request),
            ip_address=ip_address if ip_address != 'unknown' else None,
        )
    except DatabaseError as e:
        logger.error(f"Could not write CDN access log for {action_type}: {str(e)}")


def cdn_endpoint(action_type, methods, path_param=None):
    """
    Turn a forwarding function into a CDN proxy endpoint.

    Any exception raised while forwarding is answered with
    ``500 {"success": false, "message": "Internal server error: <reason>"}``.
    Every call is written to the access log; ``path_param`` names the
    request value recorded as the log path.
    """
    def decorator(func):
        @api_view(methods)
        @authentication_classes([])
        @permission_classes([AllowAny])
        @throttle_classes([])
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            logged_path = ''
            try:
                if path_param:
                    logged_path = (
                        request.query_params.get(path_param)
                        or get_value(request.data, path_param.capitalize())
                        or ''
                    )
                response = func(request, *args, **kwargs)
            except APIException as e:
                # Unreadable request body or unsupported media type
                logger.warning(f"CDN {action_type} rejected: {str(e.detail)}")
                response = failure(str(e.detail), e.status_code)
                record_access(request, action_type, logged_path, response, error_message=str(e.detail))
                return response
            except Exception as e:
                logger.exception(f"CDN {action_type} failed: {str(e)}")
                response = failure(f'Internal server error: {str(e)}', status.HTTP_500_INTERNAL_SERVER_ERROR)
                record_access(request, action_type, logged_path, response, error_message=str(e))
                return response

            error_message = ''
            if response.status_code >= 400:
                body = response_body(response)
                if isinstance(body, dict):
                    error_message = str(body.get('message') or '')
            record_access(request, action_type, logged_path, response, error_message=error_message)
            return response
        return wrapper
    return decorator


# =============================================================================
# FILE ENDPOINTS
# =============================================================================

@cdn_endpoint('upload', ['POST'])
def upload(request):
    """
    POST /api/cdn/upload/

    Multipart fields: ``file`` (required), ``category`` (default documents),
    ``folder`` (optional).
    """
    uploaded_file = request.FILES.get('file')
    if uploaded_file is None or uploaded_file.size == 0:
        return failure('No file was uploaded', status.HTTP_400_BAD_REQUEST)

    category = request.data.get('category') or DEFAULT_CATEGORY
    folder = request.data.get('folder') or None

    known_category = CdnCategory.objects.filter(name=category, is_active=True).first()
    if known_category is not None:
        extension = os.path.splitext(uploaded_file.name)[1].lower()
        if not known_category.allows_extension(extension):
            return failure(
                f'File type {extension} not allowed for category {category}',
                status.HTTP_400_BAD_REQUEST
            )

    upstream = cdn_client.upload(uploaded_file, category, folder)

    body = upstream_json(upstream)
    if 200 <= upstream.status_code < 300 and isinstance(body, dict):
        record_upload(request, uploaded_file, category, folder, body)

    return relay(upstream)


def record_upload(request, uploaded_file, category, folder, body):
    url = get_value(body, 'Url')
    if not url:
        return

    try:
        CdnFileMetadata.objects.update_or_create(
            url=url,
            defaults={
                'file_name': get_value(body, 'FileName') or os.path.basename(url.split('?')[0]),
                'original_file_name': uploaded_file.name,
                'category': category,
                'folder': folder or '',
                'content_type': uploaded_file.content_type or '',
                'file_size': uploaded_file.size,
                'uploaded_by': get_username(request),
                'uploaded_at': timezone.now(),
                'is_deleted': False,
                'deleted_at': None,
            }
        )
    except DatabaseError as e:
        logger.error(f"Could not record CDN upload {url}: {str(e)}")


@cdn_endpoint('delete', ['DELETE'], path_param='path')
def delete(request):
    """DELETE /api/cdn/delete/?path=..."""
    path = request.query_params.get('path')
    if not path:
        return failure('No file path provided', status.HTTP_400_BAD_REQUEST)

    upstream = cdn_client.request('DELETE', 'delete', params={'path': path})

    if 200 <= upstream.status_code < 300:
        for metadata in CdnFileMetadata.objects.filter(url=path, is_deleted=False):
            metadata.mark_deleted()

    return relay(upstream)


@cdn_endpoint('rename', ['POST'], path_param='path')
def rename(request):
    """POST /api/cdn/rename/  {"Path": ..., "NewName": ...}"""
    path = get_value(request.data, 'Path')
    new_name = get_value(request.data, 'NewName')
    if not path or not new_name:
        return failure('Path and new name are required', status.HTTP_400_BAD_REQUEST)

    upstream = cdn_client.request('POST', 'rename', json={'Path': path, 'NewName': new_name})
    return relay(upstream)


@cdn_endpoint('details', ['GET'], path_param='path')
def details(request):
    """GET /api/cdn/details/?path=..."""
    path = request.query_params.get('path')
    if not path:
        return failure('No file path provided', status.HTTP_400_BAD_REQUEST)

    upstream = cdn_client.request('GET', 'details', params={'path': path})
    return relay(upstream)


@cdn_endpoint('list_files', ['GET'], path_param='folder')
def files(request):
    """GET /api/cdn/files/?category=&pattern=&folder="""
    params = {
        name: request.query_params.get(name)
        for name in ('category', 'pattern', 'folder')
        if request.query_params.get(name)
    }
    upstream = cdn_client.request('GET', 'files', params=params)
    return relay(upstream)


@cdn_endpoint('view', ['GET'], path_param='path')
def view(request):
    """
    GET /api/cdn/view/?path=...

    Redirects the browser to the stored file with the API key attached.
    """
    path = request.query_params.get('path')
    if not path:
        return failure('No file path provided', status.HTTP_400_BAD_REQUEST)

    return HttpResponseRedirect(cdn_client.get_view_url(path))


# =============================================================================
# CATEGORY & FOLDER ENDPOINTS
# =============================================================================

@cdn_endpoint('list_categories', ['GET'])
def categories(request):
    upstream = cdn_client.request('GET', 'categories')
    return relay(upstream)


@cdn_endpoint('list_folders', ['GET'])
def folders(request):
    """GET /api/cdn/folders/?category= (default documents)"""
    category = request.query_params.get('category') or DEFAULT_CATEGORY
    upstream = cdn_client.request('GET', 'folders', params={'category': category})
    return relay(upstream)


@cdn_endpoint('folder', ['POST', 'DELETE'], path_param='path')
def folder(request):
    """
    POST /api/cdn/folder/          {"Category": ..., "Path": ...}
    DELETE /api/cdn/folder/?category=&path=
    """
    if request.method == 'DELETE':
        category = request.query_params.get('category')
        path = request.query_params.get('path')
        if not category or not path:
            return failure('Category and path are required', status.HTTP_400_BAD_REQUEST)

        upstream = cdn_client.request('DELETE', 'folder', params={'category': category, 'path': path})
        return relay(upstream)

    category = get_value(request.data, 'Category')
    path = get_value(request.data, 'Path')
    if not category or not path:
        return failure('Category and path are required', status.HTTP_400_BAD_REQUEST)

    upstream = cdn_client.request('POST', 'folder', json={'Category': category, 'Path': path})
    return relay(upstream)


@cdn_endpoint('rename_folder', ['POST'], path_param='path')
def rename_folder(request):
    """POST /api/cdn/folder/rename/  {"Category": ..., "Path": ..., "NewName": ...}"""
    category = get_value(request.data, 'Category')
    path = get_value(request.data, 'Path')
    new_name = get_value(request.data, 'NewName')
    if not category or not path or not new_name:
        return failure('Category, path, and new name are required', status.HTTP_400_BAD_REQUEST)

    upstream = cdn_client.request(
        'POST',
        'folder/rename',
        json={'Category': category, 'Path': path, 'NewName': new_name},
    )
    return relay(upstream)


@cdn_endpoint('move', ['POST'])
def move(request):
    """POST /api/cdn/move/  {"Category": ..., "Files": [...], "TargetFolder": ...}"""
    category = get_value(request.data, 'Category')
    file_paths = get_value(request.data, 'Files')
    if not category or not file_paths:
        return failure('Category and files are required', status.HTTP_400_BAD_REQUEST)

    payload = {
        'Category': category,
        'Files': file_paths,
        'TargetFolder': get_value(request.data, 'TargetFolder') or '',
    }
    upstream = cdn_client.request('POST', 'move', json=payload)
    return relay(upstream)


# =============================================================================
# MAINTENANCE ENDPOINTS
# =============================================================================

@cdn_endpoint('maintenance_clean', ['POST'])
def maintenance_clean(request):
    payload = {}
    days_old = get_value(request.data, 'DaysOld')
    if days_old is not None:
        payload['DaysOld'] = days_old

    upstream = cdn_client.request('POST', 'maintenance/clean', json=payload)
    return relay(upstream)


@cdn_endpoint('maintenance_clearcache', ['POST'])
def maintenance_clearcache(request):
    upstream = cdn_client.request('POST', 'maintenance/clearcache')
    return relay(upstream)


# =============================================================================
# DIAGNOSTICS
# =============================================================================

@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([])
def debug_ping(request):
    """
    GET /api/cdn-debug/ping/

    Liveness check of the proxy itself, reachable without an API key.
    """
    return Response({
        'success': True,
        'controller': 'CdnDebug',
        'message': 'CDN Debug controller is operational',
        'timestamp': timezone.now().isoformat(),
    })


@cdn_endpoint('test_connection', ['GET'])
def debug_test_connection(request):
    """
    GET /api/cdn-debug/test-connection/

    Calls the upstream ping and reports what came back.
    """
    upstream = cdn_client.request('GET', 'ping')
    content = upstream.text

    if len(content) > CONTENT_PREVIEW_LENGTH:
        preview = content[:CONTENT_PREVIEW_LENGTH] + '...'
    else:
        preview = content

    return Response({
        'success': True,
        'request': {
            'url': cdn_client.build_url('ping'),
            'method': 'GET',
            'headers': {
                'X-Api-Key': '***' if cdn_client.api_key else '',
                'Accept': 'application/json',
            },
        },
        'response': {
            'statusCode': upstream.status_code,
            'statusPhrase': upstream.reason,
            'contentType': upstream.headers.get('Content-Type'),
            'contentPreview': preview,
            'contentLength': len(content),
        },
    })
