import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(settings, lifecycle):
    from app import create_app

    return TestClient(create_app(settings, lifecycle))


@pytest.fixture()
def admin_headers(settings):
    return {"Authorization": f"Bearer {settings.admin_token}"}


@pytest.fixture()
def created_order(client, submission):
    response = client.post("/orders", json=submission)
    assert response.status_code == 201
    return response.json()
