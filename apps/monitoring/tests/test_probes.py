from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from tests.factories import PolicyFactory


class ProbeTests(TestCase):
    def test_liveness(self):
        response = self.client.get(reverse("monitoring:liveness"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "alive")

    def test_readiness(self):
        response = self.client.get(reverse("monitoring:readiness"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ready")

    def test_readiness_reports_database_failure(self):
        with mock.patch("apps.monitoring.views._check_database", side_effect=DatabaseError("gone")):
            response = self.client.get(reverse("monitoring:readiness"))
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "not_ready")

    def test_metrics_include_bucket_counts(self):
        PolicyFactory(days=-2)
        PolicyFactory(days=3)

        response = self.client.get(reverse("monitoring:metrics"))

        body = response.content.decode()
        self.assertIn("insureapp_policies_total 2", body)
        self.assertIn('insureapp_policies{bucket="expired"} 1', body)
        self.assertIn('insureapp_policies{bucket="week"} 1', body)
