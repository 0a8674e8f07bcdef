"""
Policy lifecycle: derived states and renewal.

States are derived from the expiry bucket plus the last renewal date:

    active -> expiring_soon -> expired -> (renew) -> expiring_soon | active

The first two transitions happen by the calendar alone. Renewal is the only
transition an agent drives and it is valid only once a policy has expired.
"""

import logging
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.models import Policy, PolicyHistory
from apps.core.signals import ACTION_RENEWED, notify_policy_changed
from . import expiry_service
from .policy_service import get_policy, normalize_contact

logger = logging.getLogger(__name__)

STATE_ACTIVE = 'active'
STATE_EXPIRING_SOON = 'expiring_soon'
STATE_EXPIRED = 'expired'
STATE_RENEWED = 'renewed'

STATES = (STATE_ACTIVE, STATE_EXPIRING_SOON, STATE_EXPIRED, STATE_RENEWED)

RENEWAL_WINDOW_DAYS = expiry_service.MONTH_DAYS


def lifecycle_state(policy, now=None):
    """
    Derive the lifecycle state of ``policy`` on ``now``.

    A policy in an expiring bucket counts as ``renewed`` when its last
    renewal falls inside the current term's expiring window.
    """
    bucket = expiry_service.classify(policy.expiry_date, now)
    if bucket == expiry_service.EXPIRED:
        return STATE_EXPIRED
    if bucket == expiry_service.ACTIVE:
        return STATE_ACTIVE

    renewed = policy.renewed_date
    if renewed and renewed > policy.expiry_date - timedelta(days=RENEWAL_WINDOW_DAYS):
        return STATE_RENEWED
    return STATE_EXPIRING_SOON


@transaction.atomic
def renew(policy_id, expiry_date, start_date=None, contact=None, actor=None, now=None):
    """
    Renew an expired policy with a new term.

    The closed term is recorded in PolicyHistory with today's renewal date,
    then the policy takes the new dates. ``start_date`` defaults to today.

    Raises:
        NotFoundError: unknown policy.
        ValidationError: policy not expired, or the new dates are invalid.
    """
    today = expiry_service.today_for(now)
    new_expiry = expiry_service.to_date(expiry_date, field='expiry_date')
    new_start = expiry_service.to_date(start_date, field='start_date') if start_date else today

    policy = Policy.objects.select_for_update().get(pk=get_policy(policy_id).pk)

    state = lifecycle_state(policy, today)
    if state != STATE_EXPIRED:
        raise ValidationError({
            'expiry_date': f"Only expired policies can be renewed; policy {policy.pk} is {state}."
        })
    if new_expiry <= today:
        raise ValidationError({'expiry_date': 'New expiry date must be after today.'})
    if new_expiry < new_start:
        raise ValidationError({'expiry_date': 'Expiry date cannot be before start date.'})

    PolicyHistory.objects.update_or_create(
        policy=policy,
        expiry_date=policy.expiry_date,
        defaults={'renewed_date': today},
    )

    old_expiry = policy.expiry_date
    policy.start_date = new_start
    policy.expiry_date = new_expiry
    policy.renewed_date = today
    if contact:
        policy.contact = normalize_contact(contact)
    if getattr(actor, 'is_authenticated', False):
        policy.updated_by = actor
    policy.save()

    logger.info(f"Policy {policy.pk} renewed: {old_expiry} -> {new_expiry}")
    notify_policy_changed(Policy, policy.pk, ACTION_RENEWED)
    return policy


@transaction.atomic
def record_lapsed_terms(now=None):
    """
    Write a PolicyHistory row for every expired term not yet recorded.

    Returns the newly created rows; terms already in history are skipped, so
    running the sweep twice on the same day records nothing the second time.
    """
    today = expiry_service.today_for(now)
    created = []
    for policy in Policy.objects.expired(today).iterator():
        term, was_created = PolicyHistory.objects.get_or_create(
            policy=policy,
            expiry_date=policy.expiry_date,
        )
        if was_created:
            created.append(term)

    if created:
        logger.info(f"Recorded {len(created)} lapsed policy terms")
    return created


def history_between(start=None, end=None):
    """History rows whose term expired within ``[start, end]``."""
    qs = PolicyHistory.objects.select_related('policy')
    if start:
        qs = qs.filter(expiry_date__gte=expiry_service.to_date(start, field='start'))
    if end:
        qs = qs.filter(expiry_date__lte=expiry_service.to_date(end, field='end'))
    return qs


def unrenewed_terms():
    return PolicyHistory.objects.select_related('policy').filter(renewed_date__isnull=True)


def history_for_policy(policy_id):
    policy = get_policy(policy_id)
    return policy.terms.all()
