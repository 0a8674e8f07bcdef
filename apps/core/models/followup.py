"""
Follow-up status recorded by agents against a policy.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from auditlog.registry import auditlog


class FollowUp(models.Model):
    """
    Agent confirmation state for a policy, independent of its expiry bucket.

    At most one row per policy; no row means ``none``. Writes are
    last-write-wins.
    """

    STATUS_NONE = 'none'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_PENDING = 'pending'
    STATUS_MISSED = 'missed'

    STATUS_CHOICES = [
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_PENDING, 'Pending'),
        (STATUS_MISSED, 'Missed'),
    ]

    policy = models.OneToOneField(
        'core.Policy',
        on_delete=models.CASCADE,
        related_name='followup',
    )

    followup_status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        db_index=True,
    )

    notes = models.TextField(blank=True)

    followed_at = models.DateTimeField(default=timezone.now, db_index=True)

    followed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='followups',
    )

    class Meta:
        verbose_name = 'Follow-up'
        verbose_name_plural = 'Follow-ups'
        ordering = ['-followed_at']

    def __str__(self):
        return f"{self.policy_id}: {self.followup_status}"


auditlog.register(FollowUp)
