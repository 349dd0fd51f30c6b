"""Tests for session change notifications."""

from sportstribe_admin.domain.sessions import SessionChange
from sportstribe_admin.services.notifications import SessionChannel
from tests.conftest import START


def _change(event: str = "login") -> SessionChange:
    return SessionChange(
        type=event,  # type: ignore[arg-type]
        subject="admin@x.com",
        reason=event,
        occurred_at=START,
    )


def test_publish_reaches_current_listeners() -> None:
    channel = SessionChannel()
    first: list[SessionChange] = []
    second: list[SessionChange] = []
    channel.subscribe(first.append)
    channel.subscribe(second.append)

    channel.publish(_change())

    assert first == second == [_change()]


def test_late_listeners_miss_earlier_events() -> None:
    channel = SessionChannel()
    channel.publish(_change("login"))
    received: list[SessionChange] = []
    channel.subscribe(received.append)

    channel.publish(_change("logout"))

    assert [change.type for change in received] == ["logout"]


def test_listener_may_unsubscribe_during_delivery() -> None:
    channel = SessionChannel()
    received: list[str] = []
    unsubscribe = None

    def once(change: SessionChange) -> None:
        received.append(change.type)
        assert unsubscribe is not None
        unsubscribe()

    unsubscribe = channel.subscribe(once)
    channel.publish(_change("login"))
    channel.publish(_change("logout"))
    unsubscribe()

    assert received == ["login"]
