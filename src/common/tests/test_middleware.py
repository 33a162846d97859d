import pytest
from django.test.client import Client

pytestmark = pytest.mark.django_db


def test_request_id_is_generated(client: Client) -> None:
    response = client.get("/api/healthcheck")

    assert len(response["X-Request-ID"]) == 36


def test_request_id_is_propagated(client: Client) -> None:
    response = client.get("/api/healthcheck", HTTP_X_REQUEST_ID="req-123")

    assert response["X-Request-ID"] == "req-123"
