from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.exceptions import NotFoundError


def _get_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError(f"User {user_id} not found")


@transaction.atomic
def create_user(*, created_by, email, password, first_name="", last_name="", phone_number="",
                role="user", is_active=True):
    """Create a back-office user.

    Only Admins can create Admin accounts; Managers may create Managers and Users.
    """
    User = get_user_model()

    email = (email or "").strip().lower()
    if not email:
        raise ValidationError({"email": "Email is required."})
    if not password:
        raise ValidationError({"password": "Password is required."})

    valid_roles = {r for (r, _) in User.ROLE_CHOICES}
    if role not in valid_roles:
        raise ValidationError({"role": "Invalid role."})
    if role == User.ROLE_ADMIN and getattr(created_by, "role", None) != User.ROLE_ADMIN:
        raise ValidationError({"role": "Only admins can create admin users."})

    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({"email": "A user with this email already exists."})

    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        first_name=(first_name or "").strip(),
        last_name=(last_name or "").strip(),
        phone_number=(phone_number or "").strip(),
        role=role,
        is_active=bool(is_active),
    )


@transaction.atomic
def update_user(*, actor, user_id, **fields):
    """Update profile fields, role and status of a user.

    Role and status changes are reserved to Admins.
    """
    User = get_user_model()
    user = _get_user(user_id)

    privileged = {"role", "is_active"} & set(fields)
    if privileged and getattr(actor, "role", None) != User.ROLE_ADMIN:
        raise ValidationError({"__all__": "Only admins can change role or status."})

    if "email" in fields:
        email = (fields.pop("email") or "").strip().lower()
        if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise ValidationError({"email": "A user with this email already exists."})
        user.email = email
        user.username = email

    password = fields.pop("password", None)
    if password:
        user.set_password(password)

    for name in ("first_name", "last_name", "phone_number"):
        if name in fields:
            setattr(user, name, (fields[name] or "").strip())
    if "role" in fields:
        user.role = fields["role"]
    if "is_active" in fields:
        user.is_active = bool(fields["is_active"])

    user.full_clean(exclude=["password"])
    user.save()
    return user


@transaction.atomic
def deactivate_user(*, actor, user_id):
    """Set a user Inactive. Accounts are never removed so audit trails stay intact."""
    User = get_user_model()
    if getattr(actor, "role", None) != User.ROLE_ADMIN:
        raise ValidationError({"__all__": "Only admins can deactivate users."})

    user = _get_user(user_id)
    if user.pk == actor.pk:
        raise ValidationError({"__all__": "You cannot deactivate your own account."})

    user.deactivate()
    return user
