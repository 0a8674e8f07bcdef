"""
Partner advertisements for the dashboard rotation.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.exceptions import NotFoundError
from apps.core.models import Advertisement

logger = logging.getLogger(__name__)


def _get_ad(ad_id) -> Advertisement:
    try:
        return Advertisement.objects.get(pk=int(ad_id))
    except (TypeError, ValueError):
        raise ValidationError({'id': f'Invalid advertisement id: {ad_id!r}'})
    except Advertisement.DoesNotExist:
        raise NotFoundError(f"Advertisement {ad_id} not found")


def list_ads():
    return Advertisement.objects.all()


@transaction.atomic
def create_ad(*, created_by=None, company_name, media_url, ad_type=Advertisement.TYPE_IMAGE,
              title='', cta_text='', target_url='') -> Advertisement:
    """Company name and media URL are required; the CTA label defaults to "Learn More"."""
    company_name = (company_name or '').strip()
    media_url = (media_url or '').strip()
    if not company_name or not media_url:
        raise ValidationError({'__all__': 'company_name and media_url are required'})

    actor = created_by if getattr(created_by, 'is_authenticated', False) else None
    ad = Advertisement(
        company_name=company_name,
        media_url=media_url,
        ad_type=ad_type or Advertisement.TYPE_IMAGE,
        title=(title or '').strip(),
        cta_text=(cta_text or '').strip() or 'Learn More',
        target_url=(target_url or '').strip(),
        created_by=actor,
        updated_by=actor,
    )
    ad.full_clean()
    ad.save()
    logger.info(f"Advertisement {ad.pk} created for {ad.company_name}")
    return ad


def random_active_ad():
    """One active ad picked at random, or None."""
    return Advertisement.objects.filter(is_active=True).order_by('?').first()


@transaction.atomic
def set_active(ad_id, is_active, actor=None) -> Advertisement:
    ad = _get_ad(ad_id)
    ad.is_active = bool(is_active)
    if getattr(actor, 'is_authenticated', False):
        ad.updated_by = actor
    ad.save(update_fields=['is_active', 'updated_by', 'updated_at'])
    return ad


@transaction.atomic
def delete_ad(ad_id) -> None:
    ad = _get_ad(ad_id)
    ad.delete()
    logger.info(f"Advertisement {ad_id} deleted")
