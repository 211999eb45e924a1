"""
CDN Admin - Roovia portal
Django admin configuration for CDN categories, file metadata and access logs.
"""

from django.contrib import admin

from .models import CdnAccessLog, CdnCategory, CdnFileMetadata


@admin.register(CdnCategory)
class CdnCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'display_name', 'allowed_file_types', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'display_name']


@admin.register(CdnFileMetadata)
class CdnFileMetadataAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'category', 'folder', 'file_size', 'uploaded_by', 'uploaded_at', 'is_deleted']
    list_filter = ['category', 'is_deleted']
    search_fields = ['file_name', 'original_file_name', 'url']
    readonly_fields = ['uploaded_at', 'deleted_at']


@admin.register(CdnAccessLog)
class CdnAccessLogAdmin(admin.ModelAdmin):
    """Read-only: rows are written by the proxy views."""

    list_display = ['timestamp', 'action_type', 'path', 'status_code', 'is_success', 'username', 'ip_address']
    list_filter = ['action_type', 'is_success']
    search_fields = ['path', 'username', 'error_message']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
