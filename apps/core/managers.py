"""
Policy querysets.

Bucket filters reuse expiry_service.bucket_bounds so database filtering and
in-memory classification always agree on the boundaries.
"""

from django.db import models
from django.db.models import Q


class PolicyQuerySet(models.QuerySet):
    """
    QuerySet with expiry-bucket and company filters.
    """

    def for_company(self, company):
        """Filter by insurer; ``None``, empty or ``all`` means no filter."""
        if not company or str(company).lower() == 'all':
            return self
        return self.filter(company__iexact=company)

    def in_bucket(self, bucket, today=None):
        """Policies whose expiry date falls in ``bucket`` on ``today``."""
        from apps.core.services import expiry_service

        lower, upper = expiry_service.bucket_bounds(bucket, expiry_service.today_for(today))
        condition = Q()
        if lower is not None:
            condition &= Q(expiry_date__gte=lower)
        if upper is not None:
            condition &= Q(expiry_date__lte=upper)
        return self.filter(condition)

    def expired(self, today=None):
        from apps.core.services import expiry_service
        return self.in_bucket(expiry_service.EXPIRED, today)

    def expiring(self, today=None):
        """Today, week and month buckets combined."""
        from apps.core.services import expiry_service

        today = expiry_service.today_for(today)
        lower, _ = expiry_service.bucket_bounds(expiry_service.TODAY, today)
        _, upper = expiry_service.bucket_bounds(expiry_service.MONTH, today)
        return self.filter(expiry_date__gte=lower, expiry_date__lte=upper)

    def with_followup(self):
        return self.select_related('followup')

    def search(self, term):
        term = (term or '').strip()
        if not term:
            return self
        return self.filter(
            Q(plate__icontains=term) | Q(owner__icontains=term)
            | Q(contact__icontains=term) | Q(company__icontains=term)
        )


class PolicyManager(models.Manager.from_queryset(PolicyQuerySet)):
    """
    Default manager for Policy.
    """

    def get_by_plate(self, plate):
        return self.get_queryset().filter(plate__iexact=(plate or '').strip()).first()
