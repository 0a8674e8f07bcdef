from django.test import TestCase, override_settings
from django.urls import reverse

from tests.factories import PASSWORD, UserFactory


@override_settings(
    LOGIN_RATE_LIMIT_ATTEMPTS=3,
    LOGIN_RATE_LIMIT_WINDOW_SECONDS=60,
    LOGIN_RATE_LIMIT_BLOCK_SECONDS=300,
)
class LoginRateLimitTests(TestCase):
    def setUp(self):
        self.user = UserFactory(email="agent1@insureapp.test")
        self.login_url = reverse("api:login")

    def _login(self, password):
        return self.client.post(
            self.login_url,
            {"email": "agent1@insureapp.test", "password": password},
            content_type="application/json",
        )

    def test_blocks_after_failed_attempts_and_unblocks_after_success(self):
        for _ in range(3):
            self.assertEqual(self._login("wrong").status_code, 401)

        # Blocked before the credentials are even checked
        resp = self._login(PASSWORD)
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp.json()["status_code"], 429)

    def test_success_resets_the_counter(self):
        for _ in range(2):
            self._login("wrong")
        self.assertEqual(self._login(PASSWORD).status_code, 200)

        self.client.logout()
        for _ in range(2):
            self.assertEqual(self._login("wrong").status_code, 401)
        self.assertEqual(self._login(PASSWORD).status_code, 200)

    def test_other_accounts_are_not_blocked(self):
        UserFactory(email="agent2@insureapp.test")
        for _ in range(3):
            self._login("wrong")

        resp = self.client.post(
            self.login_url,
            {"email": "agent2@insureapp.test", "password": PASSWORD},
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 200)
