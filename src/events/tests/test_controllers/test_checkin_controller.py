import typing as t
from datetime import timedelta

import pytest
from django.test.client import Client
from django.urls import reverse
from django.utils import timezone

from accounts.models import ClubUser
from events.models import Attendance, CheckInToken, Event
from events.service import checkin_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def token(approved_event: Event, organiser: ClubUser) -> CheckInToken:
    return checkin_service.issue_token(approved_event, organiser)


class TestOrganiserSide:
    def test_issue_token(self, organiser_client: Client, approved_event: Event) -> None:
        response = organiser_client.post(
            reverse("api:issue_check_in_token", kwargs={"event_id": approved_event.pk})
        )

        assert response.status_code == 201
        assert CheckInToken.objects.get(event=approved_event).token == response.json()["token"]

    def test_issue_for_draft_is_400(self, organiser_client: Client, draft_event: Event) -> None:
        response = organiser_client.post(reverse("api:issue_check_in_token", kwargs={"event_id": draft_event.pk}))
        assert response.status_code == 400

    def test_non_organiser_is_403(self, user_client: Client, approved_event: Event) -> None:
        response = user_client.post(reverse("api:issue_check_in_token", kwargs={"event_id": approved_event.pk}))
        assert response.status_code == 403

    def test_current_token(self, organiser_client: Client, approved_event: Event, token: CheckInToken) -> None:
        response = organiser_client.get(reverse("api:current_check_in_token", kwargs={"event_id": approved_event.pk}))

        assert response.status_code == 200
        assert response.json()["id"] == str(token.pk)

    def test_no_current_token_is_204(self, organiser_client: Client, approved_event: Event) -> None:
        response = organiser_client.get(reverse("api:current_check_in_token", kwargs={"event_id": approved_event.pk}))
        assert response.status_code == 204

    def test_current_token_hidden_from_attendees(
        self, user_client: Client, approved_event: Event, token: CheckInToken
    ) -> None:
        response = user_client.get(reverse("api:current_check_in_token", kwargs={"event_id": approved_event.pk}))
        assert response.status_code == 403

    def test_attendance_and_summary(
        self, organiser_client: Client, approved_event: Event, token: CheckInToken, user: ClubUser
    ) -> None:
        checkin_service.check_in(token.token, user=user)
        checkin_service.check_in(token.token, guest_label="Visitor")

        listing = organiser_client.get(reverse("api:list_attendance", kwargs={"event_id": approved_event.pk}))
        summary = organiser_client.get(reverse("api:attendance_summary", kwargs={"event_id": approved_event.pk}))

        assert listing.status_code == 200
        assert listing.json()["count"] == 2
        assert summary.json() == {
            "event_id": str(approved_event.pk),
            "members": 1,
            "guests": 1,
            "total": 2,
            "expected_attendees": 50,
        }


class TestAttendeeSide:
    def test_member_check_in_is_idempotent(self, user_client: Client, token: CheckInToken, user: ClubUser) -> None:
        url = reverse("api:check_in")

        first = user_client.post(url, data={"token": token.token}, content_type="application/json")
        second = user_client.post(url, data={"token": token.token}, content_type="application/json")

        assert first.status_code == 201
        assert first.json()["created"] is True
        assert first.json()["attendance"]["user"]["id"] == str(user.pk)
        assert second.status_code == 200
        assert second.json()["created"] is False
        assert Attendance.objects.count() == 1

    def test_anonymous_guest(self, client: Client, token: CheckInToken) -> None:
        response = client.post(
            reverse("api:check_in"), data={"token": token.token, "guest_label": "Jordan"}, content_type="application/json"
        )

        assert response.status_code == 201
        assert response.json()["attendance"]["is_guest"] is True
        assert response.json()["attendance"]["guest_label"] == "Jordan"

    def test_anonymous_without_label_is_400(self, client: Client, token: CheckInToken) -> None:
        response = client.post(reverse("api:check_in"), data={"token": token.token}, content_type="application/json")

        assert response.status_code == 400
        assert "guest_label" in response.json()["errors"]

    def test_expired_token_is_410(self, user_client: Client, token: CheckInToken) -> None:
        CheckInToken.objects.filter(pk=token.pk).update(expires_at=timezone.now() - timedelta(minutes=1))

        response = user_client.post(reverse("api:check_in"), data={"token": token.token}, content_type="application/json")

        assert response.status_code == 410

    def test_unknown_token_is_410(self, client: Client, approved_event: Event) -> None:
        response = client.get(reverse("api:validate_check_in_token", kwargs={"token": "nope"}))
        assert response.status_code == 410

    def test_validate_token(self, client: Client, token: CheckInToken, approved_event: Event) -> None:
        response = client.get(reverse("api:validate_check_in_token", kwargs={"token": token.token}))

        assert response.status_code == 200
        assert response.json()["title"] == "Approved Showcase"

    def test_invalid_bearer_is_401(self, token: CheckInToken) -> None:
        client = Client(HTTP_AUTHORIZATION="Bearer not-a-jwt")

        response = client.post(reverse("api:check_in"), data={"token": token.token}, content_type="application/json")

        assert response.status_code == 401


def test_guest_labels_are_kept_per_check_in(client: Client, token: CheckInToken) -> None:
    payload: dict[str, t.Any] = {"token": token.token, "guest_label": "Robin"}
    for _ in range(2):
        client.post(reverse("api:check_in"), data=payload, content_type="application/json")

    assert Attendance.objects.filter(guest_label="Robin").count() == 2
