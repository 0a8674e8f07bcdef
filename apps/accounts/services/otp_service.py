"""
Email one-time-password flow for password recovery.

send_otp -> verify_otp -> reset_password. Codes are six digits, live for
OTP_TTL_SECONDS and are single use.
"""

import logging
import secrets

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone
from datetime import timedelta

from apps.accounts.models import PasswordOTP
from apps.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _generate_code():
    return f"{secrets.randbelow(900000) + 100000}"


@transaction.atomic
def send_otp(*, email, now=None):
    """Issue a fresh code for a registered email and mail it."""
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError({"email": "Email required"})

    User = get_user_model()
    if not User.objects.filter(email__iexact=email).exists():
        raise NotFoundError("Email not registered")

    now = now or timezone.now()
    ttl = getattr(settings, "OTP_TTL_SECONDS", 300)

    PasswordOTP.objects.filter(email=email).delete()
    otp = PasswordOTP.objects.create(
        email=email,
        otp=_generate_code(),
        expires_at=now + timedelta(seconds=ttl),
    )

    send_mail(
        subject="Password Reset OTP",
        message=f"Your OTP is {otp.otp}. It expires in {ttl // 60} minutes.",
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[email],
        html_message=(
            f"<h2>Password Reset</h2><p>Your OTP is:</p><h1>{otp.otp}</h1>"
            f"<p>Expires in {ttl // 60} minutes.</p>"
        ),
    )
    logger.info(f"Password reset OTP issued for {email}")
    return otp


def verify_otp(*, email, otp, now=None):
    """Return the matching live code or raise ValidationError."""
    email = (email or "").strip().lower()
    if not email or not otp:
        raise ValidationError({"__all__": "Missing data"})

    record = PasswordOTP.objects.filter(email=email, otp=str(otp).strip()).first()
    if record is None:
        raise ValidationError({"otp": "Invalid OTP"})
    if record.is_expired(now):
        raise ValidationError({"otp": "OTP expired"})
    return record


@transaction.atomic
def reset_password(*, email, otp, password, now=None):
    """Set a new password after re-checking the code, then burn the code."""
    verify_otp(email=email, otp=otp, now=now)
    if not password:
        raise ValidationError({"password": "Password is required"})

    User = get_user_model()
    user = User.objects.filter(email__iexact=email.strip()).first()
    if user is None:
        raise NotFoundError("Email not registered")

    user.set_password(password)
    user.password_last_reset_at = now or timezone.now()
    user.save(update_fields=["password", "password_last_reset_at", "updated_at"])

    PasswordOTP.objects.filter(email=user.email).delete()
    logger.info(f"Password reset completed for {user.email}")
    return user
