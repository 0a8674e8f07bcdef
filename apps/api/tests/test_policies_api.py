from datetime import timedelta
from unittest import mock

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.core.models import Policy
from tests.factories import PolicyFactory

pytestmark = pytest.mark.django_db


def _payload(**overrides):
    today = timezone.localdate()
    data = {
        "plate": "RAD123C",
        "owner": "Mugisha Eric",
        "contact": "0788555444",
        "company": "Prime",
        "start_date": today.isoformat(),
        "expiry_date": (today + timedelta(days=365)).isoformat(),
    }
    data.update(overrides)
    return data


class TestPolicyCrud:
    def test_create(self, agent_client):
        response = agent_client.post(reverse("api:policy-list"), _payload(), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["contact"] == "+250788555444"
        assert body["company"] == "PRIME"
        assert body["bucket"] == "active"
        assert body["state"] == "active"
        assert body["followup_status"] == "none"

    def test_create_validation_error(self, agent_client):
        today = timezone.localdate()
        response = agent_client.post(
            reverse("api:policy-list"),
            _payload(expiry_date=(today - timedelta(days=1)).isoformat()),
            format="json",
        )
        assert response.status_code == 400
        assert "expiry_date" in response.json()["details"]

    def test_list_filters_by_bucket_and_company(self, agent_client):
        PolicyFactory(days=-3, company="SORAS")
        PolicyFactory(days=-3, company="RADIANT")
        PolicyFactory(days=50, company="SORAS")

        response = agent_client.get(reverse("api:policy-list"), {"bucket": "expired", "company": "SORAS"})

        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_unknown_bucket_is_400(self, agent_client):
        assert agent_client.get(reverse("api:policy-list"), {"bucket": "later"}).status_code == 400

    def test_update_rejects_dates(self, agent_client):
        policy = PolicyFactory()
        response = agent_client.patch(
            reverse("api:policy-detail", args=[policy.pk]),
            {"expiry_date": "2030-01-01"},
            format="json",
        )
        assert response.status_code == 400
        assert "renew" in response.json()["error"]

    def test_patch_owner(self, agent_client):
        policy = PolicyFactory()
        response = agent_client.patch(
            reverse("api:policy-detail", args=[policy.pk]), {"owner": "New Name"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["owner"] == "New Name"

    def test_missing_policy_is_404(self, agent_client):
        assert agent_client.get(reverse("api:policy-detail", args=[99999])).status_code == 404

    def test_delete_requires_admin(self, agent_client):
        policy = PolicyFactory()
        assert agent_client.delete(reverse("api:policy-detail", args=[policy.pk])).status_code == 403

    def test_admin_deletes(self, admin_client_api):
        policy = PolicyFactory()
        response = admin_client_api.delete(reverse("api:policy-detail", args=[policy.pk]))
        assert response.status_code == 204
        assert not Policy.objects.filter(pk=policy.pk).exists()


class TestRenewApi:
    def test_renew_expired(self, agent_client):
        policy = PolicyFactory(days=-3)
        new_expiry = timezone.localdate() + timedelta(days=365)

        response = agent_client.post(
            reverse("api:policy-renew", args=[policy.pk]), {"expiry_date": new_expiry.isoformat()}, format="json"
        )

        assert response.status_code == 200
        body = response.json()["policy"]
        assert body["expiry_date"] == new_expiry.isoformat()
        assert body["renewed_date"] == timezone.localdate().isoformat()
        assert body["bucket"] == "active"
        assert policy.terms.count() == 1

    def test_renew_active_policy_rejected(self, agent_client):
        policy = PolicyFactory(days=90)
        response = agent_client.post(
            reverse("api:policy-renew", args=[policy.pk]),
            {"expiry_date": (timezone.localdate() + timedelta(days=400)).isoformat()},
            format="json",
        )
        assert response.status_code == 400

    def test_renew_sends_sms_after_commit(self, agent_client, django_capture_on_commit_callbacks):
        policy = PolicyFactory(days=-3)
        with mock.patch("apps.notifications.receivers.send_sms") as send_sms:
            with django_capture_on_commit_callbacks(execute=True):
                agent_client.post(
                    reverse("api:policy-renew", args=[policy.pk]),
                    {"expiry_date": (timezone.localdate() + timedelta(days=30)).isoformat()},
                    format="json",
                )

        send_sms.delay.assert_called_once()
        to, message = send_sms.delay.call_args.args
        assert to == policy.contact
        assert message.startswith("Your policy was renewed until")


class TestImportApi:
    def test_import(self, agent_client):
        today = timezone.localdate()
        response = agent_client.post(
            reverse("api:policy-import-policies"),
            {"policies": [
                {"plate": "RAE1", "owner": "A", "company": "x", "contact": "0788000000",
                 "start_date": today.isoformat(), "expiry_date": (today + timedelta(days=10)).isoformat()},
                {"plate": "RAE2", "owner": "B"},
            ]},
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["inserted"] == 1
        assert body["skipped"] == 1

    def test_empty_import_is_400(self, agent_client):
        response = agent_client.post(reverse("api:policy-import-policies"), {"policies": []}, format="json")
        assert response.status_code == 400


class TestBroadcastApi:
    def test_broadcast_reports_summary(self, agent_client):
        with mock.patch("apps.notifications.services.SmsGateway.send") as send:
            send.side_effect = [{"success": True, "log": None}, {"success": False, "log": None}]
            response = agent_client.post(
                reverse("api:policy-broadcast"),
                {
                    "template": "Hello {owner}, {plate} expires in {days} days",
                    "recipients": [
                        {"contact": "0788000001", "owner": "Alice", "plate": "RAA1", "days": 3},
                        {"contact": "0788000002", "owner": "Bob", "plate": "RAA2", "days": 5},
                    ],
                },
                format="json",
            )

        assert response.status_code == 200
        assert response.json()["summary"] == {"total": 2, "successful": 1, "failed": 1}
        assert send.call_args_list[0].args == ("0788000001", "Hello Alice, RAA1 expires in 3 days")

    def test_broadcast_needs_recipients(self, agent_client):
        response = agent_client.post(
            reverse("api:policy-broadcast"), {"template": "Hi", "recipients": []}, format="json"
        )
        assert response.status_code == 400
