import pytest

from notifications.enums import NotificationType
from notifications.service.templates import TEMPLATES, render


def test_every_type_has_a_template() -> None:
    assert set(TEMPLATES) == set(NotificationType.values)


def test_render_fills_context() -> None:
    title, body = render(NotificationType.EVENT_LEVEL_APPROVED, {"event_title": "Robot Fight Night", "level": 2})

    assert title == "Approval level passed"
    assert body == '"Robot Fight Night" passed approval level 2.'


def test_missing_keys_render_empty() -> None:
    _, body = render(NotificationType.EVENT_SUBMITTED, {"event_title": "Robot Fight Night"})

    assert body == ' submitted "Robot Fight Night" for review.'


def test_comment_is_appended() -> None:
    _, body = render(NotificationType.EVENT_REJECTED, {"event_title": "Quiz", "comment": "Venue too small."})

    assert body.endswith("\n\nVenue too small.")


def test_unknown_type() -> None:
    with pytest.raises(KeyError):
        render("not_a_type", {})
