"""Change notification fan-out."""

import logging
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)

ChangeListener = Callable[[Optional[Any]], None]


class ChangeEmitter:
    """Observer list for "this part of the tree changed" notifications.

    Listeners receive the changed node, or None when the whole tree may
    have changed.
    """

    def __init__(self):
        self._listeners: List[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def fire(self, node: Optional[Any] = None) -> None:
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(node)
            except Exception:
                logger.exception("Change listener %r failed", listener)
