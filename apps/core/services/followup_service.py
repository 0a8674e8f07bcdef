"""
Follow-up tracker.

Agents record whether a client confirmed renewal intent. The status lives
beside the policy and never depends on its expiry bucket: an expired policy
can be confirmed.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.models import FollowUp
from apps.core.signals import ACTION_FOLLOWUP, notify_policy_changed
from .policy_service import get_policy

logger = logging.getLogger(__name__)

SETTABLE_STATUSES = (
    FollowUp.STATUS_CONFIRMED,
    FollowUp.STATUS_PENDING,
    FollowUp.STATUS_MISSED,
)


@transaction.atomic
def set_status(policy_id, status, notes="", actor=None):
    """
    Record ``status`` for a policy (last write wins).

    Setting the same status and notes again leaves the row untouched.

    Raises:
        ValidationError: status is not confirmed/pending/missed.
        NotFoundError: unknown policy.
    """
    if status not in SETTABLE_STATUSES:
        raise ValidationError({
            'followup_status': f"Invalid followup_status value: {status!r}. "
                               f"Expected one of {', '.join(SETTABLE_STATUSES)}."
        })

    policy = get_policy(policy_id)
    notes = (notes or "").strip()

    existing = FollowUp.objects.filter(policy=policy).first()
    if existing and existing.followup_status == status and existing.notes == notes:
        return existing

    followup, _ = FollowUp.objects.update_or_create(
        policy=policy,
        defaults={
            'followup_status': status,
            'notes': notes,
            'followed_at': timezone.now(),
            'followed_by': actor if getattr(actor, 'is_authenticated', False) else None,
        },
    )
    logger.info(f"Follow-up for policy {policy.pk} set to {status}")
    notify_policy_changed(FollowUp, policy.pk, ACTION_FOLLOWUP)
    return followup


@transaction.atomic
def clear_status(policy_id):
    """
    Reset a policy's follow-up status to ``none``.

    Clearing a policy that has no status is a no-op.

    Raises:
        NotFoundError: unknown policy.
    """
    policy = get_policy(policy_id)
    deleted, _ = FollowUp.objects.filter(policy=policy).delete()
    if deleted:
        logger.info(f"Follow-up for policy {policy.pk} cleared")
        notify_policy_changed(FollowUp, policy.pk, ACTION_FOLLOWUP)
    return policy


def get_status(policy_id):
    return get_policy(policy_id).followup_status


def list_followups():
    """Follow-ups joined with their policies, newest first."""
    return FollowUp.objects.select_related('policy').order_by('-followed_at')
