"""
Custom User model for the InsureApp back office.

Staff sign in with their email address; every account carries a role
(Admin, Manager, User) and an Active/Inactive status.
"""

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.utils import timezone


class StaffUserManager(UserManager):
    """Manager that keeps username and email in sync for email logins."""

    def create_user(self, username=None, email=None, password=None, **extra_fields):
        username = username or email
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, username=None, email=None, password=None, **extra_fields):
        username = username or email
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)

    def active(self):
        return self.filter(is_active=True)


class User(AbstractUser):
    """
    Back-office user.

    **Business Rules:**
    - Email is unique and is the login identifier
    - Inactive users cannot sign in
    - Only Admins may delete policies or deactivate other users
    """

    ROLE_ADMIN = 'admin'
    ROLE_MANAGER = 'manager'
    ROLE_USER = 'user'

    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_MANAGER, 'Manager'),
        (ROLE_USER, 'User'),
    ]

    STATUS_ACTIVE = 'Active'
    STATUS_INACTIVE = 'Inactive'

    email = models.EmailField(
        unique=True,
        help_text="Login email address"
    )

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_USER,
        db_index=True,
        help_text="Role within the agency"
    )

    phone_number = models.CharField(
        max_length=20,
        blank=True,
        help_text="Contact phone number"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    password_last_reset_at = models.DateTimeField(null=True, blank=True)

    objects = StaffUserManager()

    class Meta:
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='accounts_user_role_active_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name() or self.email} ({self.get_role_display()})"

    @property
    def status(self):
        return self.STATUS_ACTIVE if self.is_active else self.STATUS_INACTIVE

    @property
    def is_admin_role(self):
        return self.role == self.ROLE_ADMIN

    def deactivate(self):
        """Mark the account Inactive; the user can no longer sign in."""
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])


class PasswordOTP(models.Model):
    """
    One-time password emailed for password recovery.

    At most one live code exists per email; issuing a new code replaces it.
    """

    email = models.EmailField(db_index=True)
    otp = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Password OTP'
        verbose_name_plural = 'Password OTPs'
        ordering = ['-created_at']

    def __str__(self):
        return f"OTP for {self.email}"

    def is_expired(self, now=None):
        return self.expires_at < (now or timezone.now())
