import re

import pytest
from django.core import mail
from django.urls import reverse

from apps.accounts.models import User
from tests.factories import PASSWORD, UserFactory

pytestmark = pytest.mark.django_db


class TestSession:
    def test_login_me_logout(self, api_client):
        user = UserFactory(email="desk@insureapp.test", first_name="Aline", last_name="Uwera")

        response = api_client.post(
            reverse("api:login"), {"email": "DESK@insureapp.test", "password": PASSWORD}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == user.email

        me = api_client.get(reverse("api:me"))
        assert me.status_code == 200
        assert me.json()["name"] == "Aline Uwera"

        assert api_client.post(reverse("api:logout")).status_code == 200
        assert api_client.get(reverse("api:me")).status_code == 401

    def test_bad_credentials_are_401(self, api_client):
        UserFactory(email="desk@insureapp.test")
        response = api_client.post(
            reverse("api:login"), {"email": "desk@insureapp.test", "password": "nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"

    def test_deactivated_user_cannot_log_in(self, api_client):
        UserFactory(email="gone@insureapp.test", is_active=False)
        response = api_client.post(
            reverse("api:login"), {"email": "gone@insureapp.test", "password": PASSWORD}, format="json"
        )
        assert response.status_code == 401


class TestPasswordRecovery:
    def test_full_flow(self, api_client):
        user = UserFactory(email="reset@insureapp.test")

        assert api_client.post(reverse("api:send-otp"), {"email": user.email}, format="json").status_code == 200
        code = re.search(r"\b(\d{6})\b", mail.outbox[-1].body).group(1)

        verify = api_client.post(reverse("api:verify-otp"), {"email": user.email, "otp": code}, format="json")
        assert verify.status_code == 200

        reset = api_client.post(
            reverse("api:reset-password"),
            {"email": user.email, "otp": code, "password": "Brand!New2026"},
            format="json",
        )
        assert reset.status_code == 200
        user.refresh_from_db()
        assert user.check_password("Brand!New2026")

    def test_unknown_email_is_404(self, api_client):
        response = api_client.post(reverse("api:send-otp"), {"email": "ghost@insureapp.test"}, format="json")
        assert response.status_code == 404

    def test_wrong_code_is_400(self, api_client):
        user = UserFactory(email="reset@insureapp.test")
        api_client.post(reverse("api:send-otp"), {"email": user.email}, format="json")
        response = api_client.post(reverse("api:verify-otp"), {"email": user.email, "otp": "12345"}, format="json")
        assert response.status_code == 400


class TestUsers:
    def test_list_for_any_staff(self, agent_client):
        response = agent_client.get(reverse("api:user-list"))
        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_agent_cannot_create(self, agent_client):
        response = agent_client.post(
            reverse("api:user-list"), {"email": "new@insureapp.test", "password": "Xy!z12345678"}, format="json"
        )
        assert response.status_code == 403

    def test_manager_creates_user(self, api_client, manager):
        api_client.force_authenticate(manager)
        response = api_client.post(
            reverse("api:user-list"),
            {"email": "New@InsureApp.test", "password": "Xy!z12345678", "first_name": "Eric", "role": "user"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["email"] == "new@insureapp.test"
        assert User.objects.get(email="new@insureapp.test").check_password("Xy!z12345678")

    def test_manager_cannot_create_admin(self, api_client, manager):
        api_client.force_authenticate(manager)
        response = api_client.post(
            reverse("api:user-list"),
            {"email": "boss@insureapp.test", "password": "Xy!z12345678", "role": "admin"},
            format="json",
        )
        assert response.status_code == 400

    def test_delete_deactivates(self, admin_client_api):
        target = UserFactory()
        response = admin_client_api.delete(reverse("api:user-detail", args=[target.pk]))

        assert response.status_code == 200
        assert response.json()["user"]["status"] == User.STATUS_INACTIVE
        target.refresh_from_db()
        assert target.is_active is False

    def test_manager_cannot_delete(self, api_client, manager):
        api_client.force_authenticate(manager)
        target = UserFactory()
        assert api_client.delete(reverse("api:user-detail", args=[target.pk])).status_code == 403
