"""
Policy model for the InsureApp system.

Represents a motor insurance policy for one vehicle plate.
"""

from django.db import models
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog

from apps.core.managers import PolicyManager
from .base import AuditableModel


class Policy(AuditableModel):
    """
    Insurance policy covering a vehicle.

    **Business Rules:**
    - One policy per plate
    - Expiry status is never stored; it is classified from expiry_date on read
    - Dates change only through renewal, which records the closed term
    - Only Admins may delete a policy
    """

    plate = models.CharField(
        max_length=32,
        unique=True,
        help_text="Vehicle registration plate"
    )

    owner = models.CharField(
        max_length=255,
        help_text="Policy holder name"
    )

    contact = models.CharField(
        max_length=32,
        help_text="Policy holder phone number (E.164)"
    )

    company = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Insurer name"
    )

    # Policy Period
    start_date = models.DateField(
        help_text="Cover start date"
    )

    expiry_date = models.DateField(
        db_index=True,
        help_text="Cover end date"
    )

    renewed_date = models.DateField(
        null=True,
        blank=True,
        help_text="Date of the most recent renewal"
    )

    # History Tracking
    history = HistoricalRecords()

    objects = PolicyManager()

    class Meta:
        verbose_name = 'Policy'
        verbose_name_plural = 'Policies'
        ordering = ['expiry_date', 'id']
        indexes = [
            models.Index(fields=['company', 'expiry_date'], name='core_policy_company_exp_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(expiry_date__gte=models.F('start_date')),
                name='policy_expiry_not_before_start'
            ),
        ]

    def __str__(self):
        return f"{self.plate} - {self.owner} ({self.company})"

    @property
    def followup_status(self):
        """Agent follow-up status, ``none`` when nothing is recorded."""
        from .followup import FollowUp
        try:
            return self.followup.followup_status
        except FollowUp.DoesNotExist:
            return FollowUp.STATUS_NONE

    def bucket(self, now=None):
        from apps.core.services import expiry_service
        return expiry_service.classify(self.expiry_date, now)

    def days_until_expiry(self, now=None):
        from apps.core.services import expiry_service
        return expiry_service.days_until_expiry(self.expiry_date, now)


# Register for audit logging
auditlog.register(Policy)
