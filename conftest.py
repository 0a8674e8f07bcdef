import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from tests.factories import AdminUserFactory, ManagerUserFactory, UserFactory


@pytest.fixture(autouse=True)
def _clear_cache():
    # Dashboard aggregates and login counters live in the shared locmem cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def agent(db):
    return UserFactory()


@pytest.fixture
def admin_staff(db):
    return AdminUserFactory()


@pytest.fixture
def manager(db):
    return ManagerUserFactory()


@pytest.fixture
def agent_client(api_client, agent):
    api_client.force_authenticate(agent)
    return api_client


@pytest.fixture
def admin_client_api(api_client, admin_staff):
    api_client.force_authenticate(admin_staff)
    return api_client
