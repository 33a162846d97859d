import typing as t

import pytest

from accounts.models import RoleAssignment
from common import changes
from events.models import Event, Venue

pytestmark = pytest.mark.django_db


@pytest.fixture
def received() -> t.Iterator[list[tuple[str, str, str]]]:
    messages: list[tuple[str, str, str]] = []
    unsubscribe = changes.subscribe(changes.topic_for(Venue), lambda *args: messages.append(args))
    yield messages
    unsubscribe()


def test_topic_is_table_name() -> None:
    assert changes.topic_for(Event) == "events_event"
    assert changes.topic_for(RoleAssignment) == RoleAssignment._meta.db_table


def test_saves_publish_after_commit(
    received: list[tuple[str, str, str]], django_capture_on_commit_callbacks: t.Any
) -> None:
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        venue = Venue.objects.create(name="Gym", capacity=100)
    assert received == []

    for callback in callbacks:
        callback()

    assert received == [("events_venue", str(venue.pk), "insert")]


def test_update_and_delete(
    received: list[tuple[str, str, str]], venue: Venue, django_capture_on_commit_callbacks: t.Any
) -> None:
    pk = str(venue.pk)
    with django_capture_on_commit_callbacks(execute=True):
        venue.capacity = 150
        venue.save()
        venue.delete()

    assert received == [("events_venue", pk, "update"), ("events_venue", pk, "delete")]


def test_other_topics_are_filtered(
    received: list[tuple[str, str, str]], django_capture_on_commit_callbacks: t.Any
) -> None:
    with django_capture_on_commit_callbacks(execute=True):
        changes.publish("events_event", "123", "update")

    assert received == []


def test_unsubscribe(django_capture_on_commit_callbacks: t.Any) -> None:
    messages: list[tuple[str, str, str]] = []
    unsubscribe = changes.subscribe("events_venue", lambda *args: messages.append(args))
    unsubscribe()

    with django_capture_on_commit_callbacks(execute=True):
        changes.publish("events_venue", "1", "update")

    assert messages == []


def test_handler_errors_do_not_reach_the_publisher(django_capture_on_commit_callbacks: t.Any) -> None:
    def broken(topic: str, pk: str, action: str) -> None:
        raise RuntimeError("subscriber bug")

    unsubscribe = changes.subscribe("events_venue", broken)
    try:
        with django_capture_on_commit_callbacks(execute=True):
            changes.publish("events_venue", "1", "update")
    finally:
        unsubscribe()
