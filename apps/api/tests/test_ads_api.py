import pytest
from django.urls import reverse

from apps.core.models import Advertisement
from tests.factories import AdvertisementFactory

pytestmark = pytest.mark.django_db


class TestAdvertisementApi:
    def test_create_with_media_url(self, agent_client):
        response = agent_client.post(
            reverse("api:advertisement-list"),
            {
                "company_name": "Radiant Insurance",
                "media_url": "https://cdn.insureapp.test/promo.mp4",
                "ad_type": "video",
                "title": "Renew in two minutes",
            },
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["ad_type"] == "video"
        assert body["cta_text"] == "Learn More"
        assert body["is_active"] is True

    @pytest.mark.parametrize("payload", [
        {"company_name": "Radiant"},
        {"media_url": "https://cdn.insureapp.test/a.jpg"},
        {"company_name": "  ", "media_url": "https://cdn.insureapp.test/a.jpg"},
    ])
    def test_company_and_media_required(self, agent_client, payload):
        response = agent_client.post(reverse("api:advertisement-list"), payload, format="json")
        assert response.status_code == 400
        assert Advertisement.objects.count() == 0

    def test_unknown_ad_type_is_400(self, agent_client):
        response = agent_client.post(
            reverse("api:advertisement-list"),
            {"company_name": "Radiant", "media_url": "/ads/a.gif", "ad_type": "banner"},
            format="json",
        )
        assert response.status_code == 400

    def test_list_newest_first(self, agent_client):
        older = AdvertisementFactory()
        newer = AdvertisementFactory()

        rows = agent_client.get(reverse("api:advertisement-list")).json()
        assert [row["id"] for row in rows] == [newer.pk, older.pk]

    def test_random_only_picks_active_ads(self, agent_client):
        active = AdvertisementFactory()
        AdvertisementFactory(is_active=False)

        for _ in range(5):
            assert agent_client.get(reverse("api:advertisement-random")).json()["id"] == active.pk

    def test_random_without_active_ads_is_null(self, agent_client):
        AdvertisementFactory(is_active=False)
        response = agent_client.get(reverse("api:advertisement-random"))
        assert response.status_code == 200
        assert response.json() is None

    def test_toggle_status(self, agent_client):
        ad = AdvertisementFactory()

        response = agent_client.patch(
            reverse("api:advertisement-set-status", args=[ad.pk]), {"is_active": False}, format="json"
        )

        assert response.status_code == 200
        ad.refresh_from_db()
        assert ad.is_active is False

    def test_toggle_unknown_ad_is_404(self, agent_client):
        response = agent_client.patch(
            reverse("api:advertisement-set-status", args=[4242]), {"is_active": True}, format="json"
        )
        assert response.status_code == 404

    def test_delete(self, agent_client):
        ad = AdvertisementFactory()
        response = agent_client.delete(reverse("api:advertisement-detail", args=[ad.pk]))
        assert response.status_code == 200
        assert not Advertisement.objects.filter(pk=ad.pk).exists()

    def test_requires_login(self, api_client):
        assert api_client.get(reverse("api:advertisement-random")).status_code == 401
