"""
Partner advertisements shown on the dashboard.
"""

from django.db import models
from auditlog.registry import auditlog

from .base import AuditableModel


class Advertisement(AuditableModel):
    """
    A partner company's promotional card.

    Media is referenced by URL; files are hosted elsewhere. Only active ads
    are eligible for the dashboard rotation.
    """

    TYPE_IMAGE = 'image'
    TYPE_VIDEO = 'video'

    TYPE_CHOICES = [
        (TYPE_IMAGE, 'Static image'),
        (TYPE_VIDEO, 'Promotional video'),
    ]

    company_name = models.CharField(
        max_length=255,
        help_text="Advertising company"
    )

    ad_type = models.CharField(
        max_length=10,
        choices=TYPE_CHOICES,
        default=TYPE_IMAGE,
    )

    media_url = models.CharField(
        max_length=500,
        help_text="Image or video location"
    )

    title = models.CharField(max_length=255, blank=True)

    cta_text = models.CharField(
        max_length=100,
        default='Learn More',
        help_text="Call-to-action button label"
    )

    target_url = models.CharField(max_length=500, blank=True)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Advertisement'
        verbose_name_plural = 'Advertisements'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.company_name}: {self.title or self.media_url}"


auditlog.register(Advertisement)
