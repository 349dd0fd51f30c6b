"""Session change notifications."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from sportstribe_admin.domain.sessions import SessionChange

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionChange], None]


@dataclass
class SessionChannel:
    """Fan-out channel for session changes.

    Delivery is best-effort: only listeners subscribed at publish time are
    called, in no guaranteed order, and past events are never replayed. A
    listener that raises is logged and skipped.
    """

    _listeners: list[SessionListener] = field(default_factory=list)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, change: SessionChange) -> None:
        """Deliver a change to the current listeners."""
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Session listener failed for %s event", change.type)
