import logging
import re
from typing import Dict, List

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.exceptions import NotFoundError
from apps.core.models import Policy
from apps.core.signals import (
    ACTION_CREATED,
    ACTION_DELETED,
    ACTION_IMPORTED,
    ACTION_UPDATED,
    notify_policy_changed,
)
from . import expiry_service

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('plate', 'owner', 'company', 'start_date', 'expiry_date', 'contact')
EDITABLE_FIELDS = ('plate', 'owner', 'company', 'contact')
DATE_FIELDS = ('start_date', 'expiry_date')


def get_policy(policy_id) -> Policy:
    """
    Fetch a policy by primary key.

    Raises:
        ValidationError: id is not an integer.
        NotFoundError: no such policy.
    """
    try:
        pk = int(policy_id)
    except (TypeError, ValueError):
        raise ValidationError({'policy_id': f'Invalid policy id: {policy_id!r}'})
    try:
        return Policy.objects.get(pk=pk)
    except Policy.DoesNotExist:
        raise NotFoundError(f"Policy {pk} not found")


def normalize_contact(number) -> str:
    """
    Normalise a local phone number to E.164 for the configured country.

    ``0788…`` -> ``+250788…``; ``250788…`` -> ``+250788…``; bare digits get the
    country prefix. Empty input returns an empty string.
    """
    if number is None:
        return ''
    n = re.sub(r'[\s\-()]', '', str(number).strip())
    if not n:
        return ''
    code = getattr(settings, 'SMS_COUNTRY_CODE', '250')
    if re.match(r'^0\d+', n):
        n = f"+{code}{n[1:]}"
    if re.match(rf'^{code}\d+', n):
        n = f"+{n}"
    if not n.startswith('+'):
        n = f"+{code}{n}"
    return n


def _clean_dates(start_date, expiry_date):
    start = expiry_service.to_date(start_date, field='start_date')
    expiry = expiry_service.to_date(expiry_date, field='expiry_date')
    if expiry < start:
        raise ValidationError({'expiry_date': 'Expiry date cannot be before start date.'})
    return start, expiry


@transaction.atomic
def create_policy(*, created_by=None, plate, owner, company, start_date, expiry_date, contact) -> Policy:
    """
    Register a new policy.

    Rules:
    - Every field is required; plate must be unique.
    - Expiry date must not be before start date (DB constraint also enforces).
    """
    values = {
        'plate': (plate or '').strip().upper(),
        'owner': (owner or '').strip(),
        'company': (company or '').strip().upper(),
        'contact': normalize_contact(contact),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError({name: 'This field is required.' for name in missing})

    start, expiry = _clean_dates(start_date, expiry_date)

    if Policy.objects.filter(plate__iexact=values['plate']).exists():
        raise ValidationError({'plate': f"A policy for plate {values['plate']} already exists."})

    actor = created_by if getattr(created_by, 'is_authenticated', False) else None
    policy = Policy(
        start_date=start,
        expiry_date=expiry,
        created_by=actor,
        updated_by=actor,
        **values,
    )
    policy.full_clean()
    policy.save()

    logger.info(f"Policy {policy.pk} created for plate {policy.plate}")
    notify_policy_changed(Policy, policy.pk, ACTION_CREATED)
    return policy


@transaction.atomic
def update_policy(*, policy_id, updated_by=None, **fields) -> Policy:
    """
    Update the non-date fields of a policy.

    Dates only change through renewal (lifecycle_service.renew).
    """
    if any(fields.get(name) for name in DATE_FIELDS):
        raise ValidationError({'expiry_date': 'Use the renew action to change policy dates.'})

    policy = get_policy(policy_id)
    unknown = set(fields) - set(EDITABLE_FIELDS) - set(DATE_FIELDS)
    if unknown:
        raise ValidationError({name: 'This field cannot be updated.' for name in sorted(unknown)})

    for name in EDITABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == 'contact':
            value = normalize_contact(value)
        elif name in ('plate', 'company'):
            value = (value or '').strip().upper()
        else:
            value = (value or '').strip()
        if not value:
            raise ValidationError({name: 'This field may not be blank.'})
        setattr(policy, name, value)

    if Policy.objects.filter(plate__iexact=policy.plate).exclude(pk=policy.pk).exists():
        raise ValidationError({'plate': f"A policy for plate {policy.plate} already exists."})

    if getattr(updated_by, 'is_authenticated', False):
        policy.updated_by = updated_by
    policy.full_clean()
    policy.save()

    notify_policy_changed(Policy, policy.pk, ACTION_UPDATED)
    return policy


@transaction.atomic
def delete_policy(*, policy_id, actor) -> None:
    """Hard-delete a policy. Admin only; the audit log keeps the record."""
    if getattr(actor, 'role', None) != 'admin':
        raise ValidationError({'__all__': 'Only admins can delete policies.'})
    policy = get_policy(policy_id)
    pk = policy.pk
    policy.delete()
    logger.warning(f"Policy {pk} ({policy.plate}) deleted by user {actor.pk}")
    notify_policy_changed(Policy, pk, ACTION_DELETED)


def _norm(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _describe(exc: ValidationError) -> str:
    if hasattr(exc, 'message_dict'):
        return '; '.join(f"{field}: {msg}" for field, msgs in exc.message_dict.items() for msg in msgs)
    return '; '.join(exc.messages)


def _validate_row(row: Dict[str, object]) -> List[str]:
    missing = [name for name in REQUIRED_FIELDS if not _norm(row.get(name))]
    if missing:
        return [f"Missing: {', '.join(missing)}"]
    try:
        _clean_dates(row.get('start_date'), row.get('expiry_date'))
    except ValidationError as exc:
        return [msg for msgs in exc.message_dict.values() for msg in msgs]
    return []


@transaction.atomic
def import_policies(*, rows, imported_by=None) -> Dict[str, object]:
    """
    Bulk upsert policies keyed by plate.

    Each row needs plate, owner, company, start_date, expiry_date and contact.
    Existing plates are updated in place (dates included, since an import is a
    fresh snapshot of the insurer's register); unknown plates are inserted.
    Invalid rows are skipped and reported with their 1-based row number.
    """
    if not rows:
        raise ValidationError({'policies': 'You must upload at least one policy.'})

    actor = imported_by if getattr(imported_by, 'is_authenticated', False) else None
    inserted, updated, skipped = [], [], []

    for index, raw in enumerate(rows, start=1):
        row = dict(raw or {})
        errors = _validate_row(row)
        if errors:
            skipped.append({'row': index, 'reason': '; '.join(errors), 'data': raw})
            continue

        plate = _norm(row['plate']).upper()
        start, expiry = _clean_dates(row['start_date'], row['expiry_date'])
        values = {
            'owner': _norm(row['owner']),
            'company': _norm(row['company']).upper(),
            'contact': normalize_contact(row['contact']),
            'start_date': start,
            'expiry_date': expiry,
        }

        policy = Policy.objects.get_by_plate(plate)
        created = policy is None
        if created:
            policy = Policy(plate=plate, created_by=actor, **values)
        else:
            for name, value in values.items():
                setattr(policy, name, value)
        policy.updated_by = actor or policy.updated_by

        try:
            policy.full_clean()
        except ValidationError as exc:
            skipped.append({'row': index, 'reason': _describe(exc), 'data': raw})
            continue

        policy.save()
        (inserted if created else updated).append({'row': index, 'id': policy.pk, 'plate': plate})

    processed = len(inserted) + len(updated)
    message = f"Processed {processed} policies. ({len(inserted)} new, {len(updated)} updated)."
    if skipped:
        message += f" {len(skipped)} rows skipped."

    logger.info(f"Policy import: {message}")
    if processed:
        notify_policy_changed(Policy, None, ACTION_IMPORTED)

    return {
        'message': message,
        'total_rows': len(rows),
        'inserted': len(inserted),
        'updated': len(updated),
        'skipped': len(skipped),
        'skipped_rows': skipped,
    }
