"""
API test fixtures.

Each test gets its own service container built from the test settings,
with the email transport and Google verifier replaced by fakes.
"""

import pytest
from fastapi.testclient import TestClient

import api.dependencies
from api import app
from api.dependencies import ServiceContainer
from tests.conftest import FakeIdentityVerifier, RecordingTransport


@pytest.fixture
def container(settings) -> ServiceContainer:
    container = ServiceContainer(settings)
    container.override("otp_transport", RecordingTransport())
    container.override("identity_verifier", FakeIdentityVerifier())
    api.dependencies._container = container
    return container


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(app)


def register(client: TestClient, email: str, name: str = "Test User", password: str = "password123"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "name": name, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
