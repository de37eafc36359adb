import pytest

from admin_bootstrap import AdminStatus
from main import create_app
from tests.fakes import FakeAdminClient


@pytest.fixture
def fake_client():
    return FakeAdminClient(users=[
        {"uid": "u1", "email": "ada@example.com", "disabled": False},
        {"uid": "u2", "email": "grace@example.com", "disabled": True},
    ])


@pytest.fixture
def ready_app(fake_client):
    app = create_app(admin=AdminStatus(client=fake_client))
    app.testing = True
    return app


@pytest.fixture
def degraded_app():
    app = create_app(admin=AdminStatus(error="file not found"))
    app.testing = True
    return app
