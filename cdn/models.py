"""
CDN models for the Roovia portal.

Files themselves live on the upstream CDN. These tables only keep:
- CdnCategory: the categories files are uploaded into
- CdnFileMetadata: a local record of every file uploaded through the proxy
- CdnAccessLog: one row per proxied call
"""

import logging

from django.db import models
from django.utils import timezone

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'documents'


# =============================================================================
# CATEGORY MODEL
# =============================================================================

class CdnCategory(models.Model):
    name = models.CharField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)
    allowed_file_types = models.CharField(
        max_length=500,
        default='*',
        help_text="'*' or a comma-separated list of extensions, e.g. '.pdf,.docx'"
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'cdn_categories'
        ordering = ['name']
        verbose_name = 'CDN Category'
        verbose_name_plural = 'CDN Categories'

    def __str__(self):
        return self.display_name or self.name

    def allows_extension(self, extension):
        """
        Check an extension such as '.pdf' against the category's list.

        Comparison is case-insensitive and tolerates a missing leading dot.
        """
        allowed = self.allowed_file_types.strip()
        if allowed == '*':
            return True

        extension = extension.lower()
        if extension and not extension.startswith('.'):
            extension = f'.{extension}'

        for item in allowed.split(','):
            item = item.strip().lower()
            if not item:
                continue
            if not item.startswith('.'):
                item = f'.{item}'
            if item == extension:
                return True
        return False


# =============================================================================
# FILE METADATA MODEL
# =============================================================================

class CdnFileMetadata(models.Model):
    """
    Local record of a file stored on the upstream CDN.

    Rows are created after a successful proxied upload and flagged deleted
    after a successful proxied delete.
    """

    file_name = models.CharField(max_length=255)
    original_file_name = models.CharField(max_length=255)
    url = models.CharField(max_length=1000, unique=True)
    category = models.CharField(max_length=50, default=DEFAULT_CATEGORY)
    folder = models.CharField(max_length=500, blank=True)
    content_type = models.CharField(max_length=100, blank=True)
    file_size = models.BigIntegerField(default=0)
    uploaded_by = models.CharField(max_length=150, blank=True)
    uploaded_at = models.DateTimeField(default=timezone.now)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'cdn_file_metadata'
        ordering = ['-uploaded_at']
        verbose_name = 'CDN File'
        verbose_name_plural = 'CDN Files'
        indexes = [
            models.Index(fields=['category', 'folder'], name='cdn_files_category_idx'),
        ]

    def __str__(self):
        return self.file_name

    def mark_deleted(self):
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.save(update_fields=['is_deleted', 'deleted_at'])
        logger.info(f"CDN file marked deleted: {self.url}")


# =============================================================================
# ACCESS LOG MODEL
# =============================================================================

class CdnAccessLog(models.Model):
    action_type = models.CharField(max_length=50)
    path = models.CharField(max_length=1000, blank=True)
    status_code = models.PositiveSmallIntegerField()
    is_success = models.BooleanField(default=False)
    error_message = models.TextField(blank=True)
    username = models.CharField(max_length=150, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'cdn_access_logs'
        ordering = ['-timestamp']
        verbose_name = 'CDN Access Log'
        verbose_name_plural = 'CDN Access Logs'
        indexes = [
            models.Index(fields=['action_type', 'timestamp'], name='cdn_logs_action_idx'),
        ]

    def __str__(self):
        return f"{self.action_type} {self.path} -> {self.status_code}"
