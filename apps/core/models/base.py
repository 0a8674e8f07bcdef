"""
Base abstract models for the InsureApp domain.

These models provide common functionality for the policy models:
- Audit tracking (who created/modified)
- Timestamps
"""

from django.db import models
from django.conf import settings


class TimeStampedModel(models.Model):
    """
    Abstract base model with creation and modification timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AuditableModel(TimeStampedModel):
    """
    Abstract base model for audit tracking.

    **Tracks:**
    - Who created the record
    - Who last modified it
    - When either happened (from TimeStampedModel)
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_created_set',
        help_text="User who created this record"
    )

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_updated_set',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True
