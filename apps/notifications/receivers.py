"""
Client SMS on policy registration and renewal.
"""

import logging

from django.dispatch import receiver

from apps.core.models import Policy
from apps.core.signals import ACTION_CREATED, ACTION_RENEWED, policy_changed
from .services import POLICY_REGISTERED, POLICY_RENEWED
from .tasks import send_sms

logger = logging.getLogger(__name__)

TEMPLATES = {
    ACTION_CREATED: POLICY_REGISTERED,
    ACTION_RENEWED: POLICY_RENEWED,
}


@receiver(policy_changed, dispatch_uid='notifications.policy_sms')
def send_policy_sms(sender, policy_id=None, action=None, **kwargs):
    template = TEMPLATES.get(action)
    if template is None or policy_id is None:
        return
    policy = Policy.objects.filter(pk=policy_id).first()
    if policy is None:
        logger.warning(f"Policy {policy_id} vanished before {action} SMS")
        return
    message = template.format(
        plate=policy.plate,
        start_date=policy.start_date,
        expiry_date=policy.expiry_date,
    )
    send_sms.delay(policy.contact, message)
