from datetime import timedelta

from django.core import mail
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from apps.accounts.models import PasswordOTP
from apps.accounts.services import otp_service
from apps.core.exceptions import NotFoundError
from tests.factories import UserFactory


class OtpServiceTests(TestCase):
    def setUp(self):
        self.user = UserFactory(email="clerk@insureapp.test")

    def test_send_mails_a_six_digit_code(self):
        otp = otp_service.send_otp(email="Clerk@InsureApp.test")

        self.assertRegex(otp.otp, r"^\d{6}$")
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(otp.otp, mail.outbox[0].body)
        self.assertEqual(mail.outbox[0].to, ["clerk@insureapp.test"])

    def test_new_code_replaces_old(self):
        otp_service.send_otp(email=self.user.email)
        otp_service.send_otp(email=self.user.email)
        self.assertEqual(PasswordOTP.objects.filter(email=self.user.email).count(), 1)

    def test_unknown_email(self):
        with self.assertRaises(NotFoundError):
            otp_service.send_otp(email="nobody@insureapp.test")

    def test_code_expires_after_ttl(self):
        issued = timezone.now()
        otp = otp_service.send_otp(email=self.user.email, now=issued)

        otp_service.verify_otp(email=self.user.email, otp=otp.otp, now=issued + timedelta(minutes=4))
        with self.assertRaises(ValidationError):
            otp_service.verify_otp(email=self.user.email, otp=otp.otp, now=issued + timedelta(minutes=6))

    def test_wrong_code(self):
        otp_service.send_otp(email=self.user.email)
        with self.assertRaises(ValidationError):
            otp_service.verify_otp(email=self.user.email, otp="000000x")

    def test_reset_password_burns_code(self):
        otp = otp_service.send_otp(email=self.user.email)

        otp_service.reset_password(email=self.user.email, otp=otp.otp, password="N3w!Password99")

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("N3w!Password99"))
        self.assertIsNotNone(self.user.password_last_reset_at)
        self.assertFalse(PasswordOTP.objects.filter(email=self.user.email).exists())
        with self.assertRaises(ValidationError):
            otp_service.reset_password(email=self.user.email, otp=otp.otp, password="Other!Pass77")
