import logging

import requests
from celery import shared_task
from django.core.exceptions import ValidationError

from apps.core.services import lifecycle_service
from .services import POLICY_EXPIRED, SmsGateway

logger = logging.getLogger(__name__)


@shared_task(bind=True, ignore_result=True)
def send_sms(self, to, message):
    """Send one SMS outside the request cycle."""
    try:
        SmsGateway().send(to, message)
    except (requests.RequestException, ValidationError) as e:
        # Already logged as failed by the gateway
        logger.error(f"SMS to {to} failed: {e}")


@shared_task(bind=True, ignore_result=True)
def record_expired_policies(self):
    """
    Daily sweep: record lapsed terms and tell each client once.
    """
    terms = lifecycle_service.record_lapsed_terms()
    gateway = SmsGateway()
    sent = 0
    for term in terms:
        policy = term.policy
        try:
            gateway.send(policy.contact, POLICY_EXPIRED.format(plate=policy.plate, expiry_date=term.expiry_date))
            sent += 1
        except (requests.RequestException, ValidationError) as e:
            logger.error(f"Error sending expiry SMS for policy {policy.pk}: {e}")

    return f"Recorded {len(terms)} expired terms, sent {sent} SMS"
