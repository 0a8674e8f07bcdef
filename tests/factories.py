"""
Testing factories for InsureApp.
"""

import factory
from factory.django import DjangoModelFactory
from django.contrib.auth import get_user_model
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.core.models import Advertisement, Policy, FollowUp, PolicyHistory
from apps.notifications.models import SmsLog

User = get_user_model()

PASSWORD = "Strong!Pass123"


class UserFactory(DjangoModelFactory):
    """Factory for creating test users."""

    class Meta:
        model = User
        django_get_or_create = ('email',)

    email = factory.Sequence(lambda n: f"user{n}@insureapp.test")
    username = factory.LazyAttribute(lambda obj: obj.email)
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    phone_number = "+250788000000"
    is_active = True
    role = User.ROLE_USER
    password = factory.django.Password(PASSWORD)


class AdminUserFactory(UserFactory):
    role = User.ROLE_ADMIN


class ManagerUserFactory(UserFactory):
    role = User.ROLE_MANAGER


class PolicyFactory(DjangoModelFactory):
    """
    Factory for policies.

    Pass ``days`` to place the expiry relative to today:
    ``PolicyFactory(days=-1)`` is expired, ``PolicyFactory(days=5)`` is in the week bucket.
    """

    class Meta:
        model = Policy

    class Params:
        days = 100

    plate = factory.Sequence(lambda n: f"RAB{n:03d}A")
    owner = factory.Faker('name')
    contact = factory.Sequence(lambda n: f"+25078{n:07d}")
    company = "SORAS"
    expiry_date = factory.LazyAttribute(lambda obj: timezone.localdate() + timedelta(days=obj.days))
    start_date = factory.LazyAttribute(lambda obj: obj.expiry_date - timedelta(days=365))


class FollowUpFactory(DjangoModelFactory):
    class Meta:
        model = FollowUp

    policy = factory.SubFactory(PolicyFactory)
    followup_status = FollowUp.STATUS_PENDING
    notes = ""


class PolicyHistoryFactory(DjangoModelFactory):
    class Meta:
        model = PolicyHistory

    policy = factory.SubFactory(PolicyFactory, days=-10)
    expiry_date = factory.SelfAttribute('policy.expiry_date')
    renewed_date = None


class SmsLogFactory(DjangoModelFactory):
    class Meta:
        model = SmsLog

    phone_number = factory.Sequence(lambda n: f"+25072{n:07d}")
    message = "Your policy for RAB001A expired on 2026-01-01"
    message_id = factory.Sequence(lambda n: f"ATXid_{n}")
    cost = Decimal('15.00')
    delivery_status = SmsLog.STATUS_SUCCESS
    is_read = False


class AdvertisementFactory(DjangoModelFactory):
    class Meta:
        model = Advertisement

    company_name = factory.Faker('company')
    ad_type = Advertisement.TYPE_IMAGE
    media_url = factory.Sequence(lambda n: f"https://cdn.insureapp.test/ads/{n}.jpg")
    title = "Cover your car today"
    is_active = True
