from unittest import mock

from django.test import Client, TestCase
from django.urls import reverse

from tests.factories import PolicyFactory, UserFactory


class ApiErrorResponsesTests(TestCase):
    def setUp(self):
        self.user = UserFactory()
        self.client.force_login(self.user)

    def test_unhandled_error_is_generic_500(self):
        with mock.patch(
            "apps.api.views.summary_service.summarize",
            side_effect=RuntimeError("db exploded"),
        ), self.assertLogs("apps.core.error_handlers", level="ERROR"):
            resp = self.client.get(reverse("api:summary"))

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error", "status_code": 500})

    def test_validation_error_shape(self):
        policy = PolicyFactory()
        resp = self.client.post(
            reverse("api:followup"),
            {"policy_id": policy.pk, "followup_status": "later"},
            content_type="application/json",
        )
        body = resp.json()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(body["status_code"], 400)
        self.assertIn("followup_status", body["details"])

    def test_unknown_route_is_json_404(self):
        with self.settings(DEBUG=False):
            resp = self.client.get("/no-such-page/")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["status_code"], 404)


class CsrfTests(TestCase):
    def setUp(self):
        self.user = UserFactory()
        self.csrf_client = Client(enforce_csrf_checks=True)
        self.csrf_client.force_login(self.user)

    def test_session_write_without_token_is_forbidden(self):
        policy = PolicyFactory()
        resp = self.csrf_client.post(
            reverse("api:followup"),
            {"policy_id": policy.pk, "followup_status": "pending"},
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["status_code"], 403)

    def test_reads_do_not_need_a_token(self):
        self.assertEqual(self.csrf_client.get(reverse("api:summary")).status_code, 200)
