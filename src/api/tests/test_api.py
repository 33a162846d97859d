import orjson
import pytest
from django.conf import settings
from django.core.exceptions import ValidationError
from django.test import RequestFactory
from django.test.client import Client
from django.utils import timezone

from api.exception_handlers import (
    handle_conflict_error,
    handle_django_validation_error,
    handle_general_exception,
    obfuscate,
)
from events.exceptions import StaleStateError, VenueConflictError
from events.service.venue_service import ConflictKind, VenueConflict

pytestmark = pytest.mark.django_db


def test_version(client: Client) -> None:
    response = client.get("/api/version")

    assert response.status_code == 200
    assert response.json() == {"version": settings.VERSION}


def test_healthcheck(client: Client) -> None:
    response = client.get("/api/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestExceptionHandlers:
    @pytest.fixture
    def request_factory(self) -> RequestFactory:
        return RequestFactory()

    def test_field_errors(self, request_factory: RequestFactory) -> None:
        exc = ValidationError({"title": ["Too long."], "end": ["Before start."]})

        response = handle_django_validation_error(request_factory.post("/api/events/"), exc)

        assert response.status_code == 400
        assert orjson.loads(response.content) == {"errors": {"title": ["Too long."], "end": ["Before start."]}}

    def test_plain_message(self, request_factory: RequestFactory) -> None:
        response = handle_django_validation_error(request_factory.post("/api/events/"), ValidationError("Nope."))

        assert orjson.loads(response.content) == {"errors": {"__all__": ["Nope."]}}

    def test_stale_state(self, request_factory: RequestFactory) -> None:
        exc = StaleStateError(["submitted"], "in_review")

        response = handle_conflict_error(request_factory.post("/api/events/x/review"), exc)

        assert response.status_code == 409
        data = orjson.loads(response.content)
        assert data["expected"] == ["submitted"]
        assert data["actual"] == "in_review"

    def test_venue_conflict_lists_bookings(self, request_factory: RequestFactory) -> None:
        now = timezone.now()
        conflict = VenueConflict(kind=ConflictKind.BLACKOUT, start=now, end=now, title="Maintenance")

        response = handle_conflict_error(request_factory.post("/api/events/"), VenueConflictError([conflict]))

        data = orjson.loads(response.content)
        assert data["conflicts"] == [
            {
                "kind": "blackout",
                "start": now.isoformat(),
                "end": now.isoformat(),
                "title": "Maintenance",
                "event_id": None,
                "blackout_id": None,
            }
        ]

    def test_general_exception_is_500(self, request_factory: RequestFactory) -> None:
        request = request_factory.post(
            "/api/events/", data=orjson.dumps({"password": "secret"}), content_type="application/json"
        )
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            response = handle_general_exception(request, e)

        assert response.status_code == 500
        assert orjson.loads(response.content)["detail"] == "Internal Server Error."


def test_obfuscate() -> None:
    data = {"Authorization": "Bearer abc", "title": "Quiz"}

    assert obfuscate(data) == {"Authorization": "********", "title": "Quiz"}
    assert data["Authorization"] == "Bearer abc"
