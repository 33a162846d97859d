import typing as t

import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import ClubUser
from events.models import Club, Event, EventTemplate
from events.service import workflow

pytestmark = pytest.mark.django_db


class TestClubs:
    def test_list_active_clubs(self, user_client: Client, club: Club, legacy_club: Club) -> None:
        legacy_club.active = False
        legacy_club.save()

        response = user_client.get(reverse("api:list_clubs"))

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Robotics Club"]
        assert response.json()[0]["approval_flow"] == "multi_level"

    def test_get_club(self, user_client: Client, legacy_club: Club) -> None:
        response = user_client.get(reverse("api:get_club", kwargs={"club_id": legacy_club.pk}))

        assert response.status_code == 200
        assert response.json()["approval_flow"] == "legacy"


class TestTemplates:
    def test_create_list_delete(self, organiser_client: Client, club: Club) -> None:
        create = organiser_client.post(
            reverse("api:create_event_template", kwargs={"club_id": club.pk}),
            data={"name": "Workshop", "title": "Weekly Workshop", "expected_attendees": 25},
            content_type="application/json",
        )
        listing = organiser_client.get(reverse("api:list_event_templates", kwargs={"club_id": club.pk}))
        delete = organiser_client.delete(
            reverse("api:delete_event_template", kwargs={"club_id": club.pk, "template_id": create.json()["id"]})
        )

        assert create.status_code == 201
        assert [tpl["name"] for tpl in listing.json()] == ["Workshop"]
        assert delete.status_code == 204
        assert not EventTemplate.objects.exists()

    def test_duplicate_name_is_400(self, organiser_client: Client, club: Club) -> None:
        url = reverse("api:create_event_template", kwargs={"club_id": club.pk})
        organiser_client.post(url, data={"name": "Workshop"}, content_type="application/json")

        response = organiser_client.post(url, data={"name": "Workshop"}, content_type="application/json")

        assert response.status_code == 400

    def test_outsider_is_403(self, user_client: Client, club: Club) -> None:
        response = user_client.post(
            reverse("api:create_event_template", kwargs={"club_id": club.pk}),
            data={"name": "Workshop"},
            content_type="application/json",
        )

        assert response.status_code == 403


class TestDashboard:
    def test_organiser_dashboard(self, organiser_client: Client, draft_event: Event, club: Club) -> None:
        response = organiser_client.get(reverse("api:dashboard"))

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["my_events"]] == [str(draft_event.pk)]
        assert data["review_queue"] == []
        assert data["status_counts"][0]["club"]["name"] == club.name
        assert data["status_counts"][0]["counts"]["draft"] == 1

    def test_reviewer_dashboard(
        self,
        auth_client: t.Callable[[ClubUser], Client],
        draft_event: Event,
        organiser: ClubUser,
        department_director: ClubUser,
    ) -> None:
        workflow.submit_event(draft_event, organiser)

        response = auth_client(department_director).get(reverse("api:dashboard"))

        assert response.status_code == 200
        assert [e["id"] for e in response.json()["review_queue"]] == [str(draft_event.pk)]
        assert response.json()["status_counts"] == []
