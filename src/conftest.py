"""Shared fixtures: users with roles, a club, a venue and events in any status."""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts.models import ClubUser, RoleAssignment
from accounts.roles import CLUB_SCOPED_ROLES, AppRole
from events.models import Club, Event, Venue

VALID_ACK = {"safety": True, "compliance": True}


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Run Celery tasks synchronously so their side effects are visible in tests."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> t.Iterator[None]:
    """Start every test with an empty cache; throttles and dashboard counts live there."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def use_mock_assistant(settings: t.Any) -> None:
    settings.EVENT_ASSISTANT_BACKEND = "assistant.llms.MockAssistant"


class ClubUserFactory:
    """Factory for creating ClubUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> ClubUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(10)))
        email = kwargs.pop("email", f"{username}@club.test")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return ClubUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> ClubUser:
        return self.create_user(**kwargs)


@pytest.fixture
def club_user_factory() -> ClubUserFactory:
    return ClubUserFactory()


@pytest.fixture
def user(club_user_factory: ClubUserFactory) -> ClubUser:
    """A user without any role."""
    return club_user_factory()


@pytest.fixture
def club() -> Club:
    return Club.objects.create(name="Robotics Club", approval_flow=Club.ApprovalFlow.MULTI_LEVEL)


@pytest.fixture
def legacy_club() -> Club:
    return Club.objects.create(name="Chess Club", approval_flow=Club.ApprovalFlow.LEGACY)


@pytest.fixture
def venue() -> Venue:
    return Venue.objects.create(name="Main Hall", location="Building A", capacity=200, amenities=["projector"])


@pytest.fixture
def small_venue() -> Venue:
    return Venue.objects.create(name="Seminar Room", location="Building B", capacity=20)


RoleGranter = t.Callable[..., ClubUser]


@pytest.fixture
def grant_role(club_user_factory: ClubUserFactory) -> RoleGranter:
    """Create a user holding ``role``; club-bound roles need ``club``."""

    def _grant(role: str, club: Club | None = None, user: ClubUser | None = None) -> ClubUser:
        user = user or club_user_factory()
        if role in CLUB_SCOPED_ROLES and club is None:
            raise ValueError(f"{role} needs a club")
        RoleAssignment.objects.create(user=user, role=role, club=club)
        return user

    return _grant


@pytest.fixture
def organiser(grant_role: RoleGranter, club: Club) -> ClubUser:
    """Project manager of ``club``: creates events, cannot approve."""
    return grant_role(AppRole.PROJECT_MANAGER, club)


@pytest.fixture
def legacy_organiser(grant_role: RoleGranter, legacy_club: Club) -> ClubUser:
    return grant_role(AppRole.PROJECT_MANAGER, legacy_club)


@pytest.fixture
def system_admin(grant_role: RoleGranter) -> ClubUser:
    return grant_role(AppRole.SYSTEM_ADMIN)


@pytest.fixture
def department_director(grant_role: RoleGranter) -> ClubUser:
    return grant_role(AppRole.DEPARTMENT_DIRECTOR)


@pytest.fixture
def academic_advisor(grant_role: RoleGranter, club: Club) -> ClubUser:
    return grant_role(AppRole.ACADEMIC_ADVISOR, club)


@pytest.fixture
def general_director(grant_role: RoleGranter) -> ClubUser:
    return grant_role(AppRole.GENERAL_DIRECTOR)


@pytest.fixture
def vice_president(grant_role: RoleGranter, club: Club) -> ClubUser:
    return grant_role(AppRole.VICE_PRESIDENT, club)


@pytest.fixture
def president(grant_role: RoleGranter, club: Club) -> ClubUser:
    return grant_role(AppRole.PRESIDENT, club)


@pytest.fixture
def next_week() -> datetime:
    """Noon, local time, seven days from now."""
    same_time_next_week = timezone.now() + timedelta(days=7)
    return timezone.make_aware(
        datetime.combine(timezone.localdate(same_time_next_week), time(hour=12, minute=0)),
        timezone.get_current_timezone(),
    )


EventFactory = t.Callable[..., Event]


@pytest.fixture
def event_factory(club: Club, venue: Venue, organiser: ClubUser, next_week: datetime) -> EventFactory:
    """Create events directly in any status, for arranging a scenario.

    Status changes in the tests themselves go through the workflow.
    """

    def _create(**kwargs: t.Any) -> Event:
        start = kwargs.pop("start", next_week)
        defaults: dict[str, t.Any] = {
            "club": club,
            "venue": venue,
            "created_by": organiser,
            "title": "Robot Fight Night",
            "description": "Bring your robots.",
            "start": start,
            "end": start + timedelta(hours=2),
            "expected_attendees": 50,
            "policy_ack": dict(VALID_ACK),
        }
        defaults.update(kwargs)
        event = Event(**defaults)
        event.save()
        return event

    return _create


@pytest.fixture
def draft_event(event_factory: EventFactory) -> Event:
    return event_factory()


@pytest.fixture
def approved_event(event_factory: EventFactory) -> Event:
    return event_factory(status=Event.EventStatus.APPROVED, title="Approved Showcase")


def client_for(user: ClubUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def auth_client() -> t.Callable[[ClubUser], Client]:
    """Build an API client authenticated as a given user with a JWT bearer token."""
    return client_for


@pytest.fixture
def organiser_client(organiser: ClubUser) -> Client:
    return client_for(organiser)


@pytest.fixture
def user_client(user: ClubUser) -> Client:
    return client_for(user)


@pytest.fixture
def system_admin_client(system_admin: ClubUser) -> Client:
    return client_for(system_admin)
