from unittest import mock

import pytest
from django.test.client import Client
from django.urls import reverse

from assistant.llms import MockAssistant
from events.models import Venue

pytestmark = pytest.mark.django_db


def test_description(user_client: Client) -> None:
    response = user_client.post(
        reverse("api:assistant_description"), data={"title": "Chess Open"}, content_type="application/json"
    )

    assert response.status_code == 200
    assert response.json() == {"description": "Join us for Chess Open."}


def test_review_feedback(user_client: Client) -> None:
    response = user_client.post(
        reverse("api:assistant_review_feedback"),
        data={"event_title": "Chess Open", "action": "approved"},
        content_type="application/json",
    )

    assert response.status_code == 200
    assert response.json()["feedback"].startswith('"Chess Open" is approved.')


def test_recommendations_default_venues(user_client: Client, venue: Venue, small_venue: Venue) -> None:
    response = user_client.post(
        reverse("api:assistant_recommendations"), data={"title": "Chess Open"}, content_type="application/json"
    )

    assert response.status_code == 200
    assert response.json()["suggested_venue"] == "Main Hall"


def test_recommendations_explicit_venues(user_client: Client, venue: Venue) -> None:
    payload = {"title": "Chess Open", "venues": [{"name": "Library", "capacity": 40}]}

    response = user_client.post(
        reverse("api:assistant_recommendations"), data=payload, content_type="application/json"
    )

    assert response.json()["suggested_venue"] == "Library"
    assert response.json()["estimated_attendance"] == "Up to 40"


def test_backend_failure_is_503(user_client: Client) -> None:
    with mock.patch.object(MockAssistant, "generate_description", side_effect=ValueError("empty")):
        response = user_client.post(
            reverse("api:assistant_description"), data={"title": "Chess Open"}, content_type="application/json"
        )

    assert response.status_code == 503


def test_requires_authentication(client: Client) -> None:
    response = client.post(
        reverse("api:assistant_description"), data={"title": "Chess Open"}, content_type="application/json"
    )
    assert response.status_code == 401
