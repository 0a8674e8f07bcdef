import logging
import re
from decimal import Decimal, InvalidOperation

import requests
from django.conf import settings
from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFoundError
from apps.core.services.policy_service import normalize_contact
from .models import SmsLog

logger = logging.getLogger(__name__)

LATEST_LOGS = 20

POLICY_REGISTERED = "Your insurance policy for {plate} runs from {start_date} to {expiry_date}."
POLICY_EXPIRED = "Your policy for {plate} expired on {expiry_date}"
POLICY_RENEWED = "Your policy was renewed until {expiry_date}"


class SmsGateway:
    """Thin client for the Africa's Talking messaging endpoint.

    Every attempt is logged to SmsLog, including transport failures, which
    are logged as ``failed`` and then re-raised.
    """

    def __init__(self, *, username=None, api_key=None, url=None, sender_id=None, timeout=None):
        self.username = username or settings.AT_USERNAME
        self.api_key = api_key or settings.AT_API_KEY
        self.url = url or settings.AT_SMS_URL
        self.sender_id = sender_id if sender_id is not None else settings.SMS_SENDER_ID
        self.timeout = timeout or settings.SMS_REQUEST_TIMEOUT_SECONDS

    def _post(self, phone_number, message):
        data = {
            'username': self.username,
            'to': phone_number,
            'message': message,
        }
        if self.sender_id:
            data['from'] = self.sender_id
        response = requests.post(
            self.url,
            data=data,
            headers={'apiKey': self.api_key, 'Accept': 'application/json'},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def send(self, to, message):
        """
        Send ``message`` to ``to`` and log the outcome.

        Returns a dict with ``success`` and the SmsLog ``log``.
        """
        phone_number = normalize_contact(to)
        if not phone_number:
            raise ValidationError({'contact': 'A phone number is required.'})
        if not (message or '').strip():
            raise ValidationError({'message': 'Message content is required.'})

        if not getattr(settings, 'SMS_ENABLED', True):
            logger.info(f"SMS disabled; not sending to {phone_number}")
            return {'success': False, 'log': None, 'error': 'SMS disabled'}

        try:
            payload = self._post(phone_number, message)
        except requests.RequestException as e:
            logger.error(f"SMS send error for {phone_number}: {e}")
            log_sms(phone_number, message, cost=0, status=SmsLog.STATUS_FAILED, message_id='N/A')
            raise

        recipients = (payload or {}).get('SMSMessageData', {}).get('Recipients') or []
        if not recipients:
            logger.warning(f"SMS provider returned no recipient data for {phone_number}")
            return {'success': False, 'log': None, 'error': 'No recipient data returned'}

        recipient = recipients[0]
        log = log_sms(
            phone_number,
            message,
            cost=parse_cost(recipient.get('cost')),
            status=recipient.get('status', ''),
            message_id=recipient.get('messageId', ''),
        )
        return {'success': log.is_success, 'log': log}


def parse_cost(raw):
    """``"RWF 15.0000"`` -> ``Decimal('15.0000')``; unparsable -> 0."""
    if raw is None:
        return Decimal('0')
    cleaned = re.sub(r'[^0-9.]', '', str(raw))
    try:
        return Decimal(cleaned) if cleaned else Decimal('0')
    except InvalidOperation:
        return Decimal('0')


def log_sms(phone_number, message, cost, status, message_id=''):
    """Record an SMS; a zero cost is replaced by the standard local rate."""
    cost = Decimal(str(cost or 0))
    if cost <= 0:
        cost = Decimal(str(settings.SMS_DEFAULT_COST))
    return SmsLog.objects.create(
        phone_number=phone_number,
        message=message,
        message_id=message_id or '',
        cost=cost,
        delivery_status=status or '',
    )


def render_template(template, recipient):
    return (
        template
        .replace('{owner}', str(recipient.get('owner') or 'Client'))
        .replace('{plate}', str(recipient.get('plate') or 'your vehicle'))
        .replace('{days}', str(recipient.get('days') if recipient.get('days') is not None else '0'))
    )


def broadcast(template, recipients, gateway=None):
    """
    Send a personalised copy of ``template`` to each recipient.

    Placeholders ``{owner}``, ``{plate}`` and ``{days}`` are filled from the
    recipient dict. A failure for one recipient never stops the others.
    """
    if not (template or '').strip() or not recipients:
        raise ValidationError({'template': 'No recipients or message content provided.'})

    gateway = gateway or SmsGateway()
    successful = failed = 0
    for recipient in recipients:
        try:
            result = gateway.send(recipient.get('contact'), render_template(template, recipient))
        except (requests.RequestException, ValidationError) as e:
            logger.error(f"Failed to send to {recipient.get('contact')}: {e}")
            failed += 1
            continue
        if result['success']:
            successful += 1
        else:
            failed += 1

    return {
        'message': 'Broadcast process completed',
        'summary': {'total': len(recipients), 'successful': successful, 'failed': failed},
    }


def latest_logs(limit=LATEST_LOGS):
    return {
        'logs': list(SmsLog.objects.all()[:limit]),
        'unread': SmsLog.objects.filter(is_read=False).count(),
    }


def mark_all_read():
    return SmsLog.objects.filter(is_read=False).update(is_read=True)


def _get_log(log_id):
    try:
        return SmsLog.objects.get(pk=int(log_id))
    except (TypeError, ValueError):
        raise ValidationError({'id': f'Invalid SMS log id: {log_id!r}'})
    except SmsLog.DoesNotExist:
        raise NotFoundError(f"SMS log {log_id} not found")


def mark_unread(log_id):
    log = _get_log(log_id)
    log.mark_as_unread()
    return log


def delete_log(log_id):
    _get_log(log_id).delete()
