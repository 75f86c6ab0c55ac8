"""Test fixtures for updatable-tree consumers.

A scripted stand-in for a remote source plus a recorder for change
notifications, so trees can be exercised without a network.
"""

import asyncio
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Union

from ..aio.core import UpdatableNode


Outcome = Union[Sequence[str], BaseException]


class ScriptedSource:
    """Fake remote source keyed by node id.

    Each key is scripted with either the child keys to return or an
    exception to raise. A key can also be held back until release() is
    called, which is how tests keep a fetch in flight.

    Example:
        source = ScriptedSource({"root": ["n1", "n2"]})
        source.hold("root")
        ...
        source.release("root")
    """

    def __init__(self, outcomes: Optional[Dict[str, Outcome]] = None, delay: float = 0.0):
        self.outcomes: Dict[str, Outcome] = dict(outcomes or {})
        self.delay = delay
        self.calls = Counter()
        self.contexts: List[Any] = []
        self._gates: Dict[str, asyncio.Event] = {}

    def script(self, key: str, outcome: Outcome) -> None:
        self.outcomes[key] = outcome

    def hold(self, key: str) -> None:
        """Make fetches of key wait until release(key)."""
        self._gates[key] = asyncio.Event()

    def release(self, key: str) -> None:
        gate = self._gates.pop(key, None)
        if gate is not None:
            gate.set()

    async def fetch(self, key: str, context: Any = None) -> List[str]:
        self.calls[key] += 1
        self.contexts.append(context)

        gate = self._gates.get(key)
        if gate is not None:
            await gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)

        outcome = self.outcomes.get(key, [])
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)


class ScriptedNode(UpdatableNode):
    """Node whose children come from a ScriptedSource.

    Child ids are the scripted keys; children share the parent's source,
    tree and refresh policy unless child_kwargs says otherwise.
    """

    def __init__(self, node_id: str, source: ScriptedSource, child_kwargs: Optional[dict] = None, **kwargs):
        super().__init__(node_id, node_id, **kwargs)
        self.source = source
        self.child_kwargs = child_kwargs or {}
        self.loads = 0

    async def fetch_children(self, context: Any) -> Sequence[UpdatableNode]:
        keys = await self.source.fetch(self.id, context)
        return [ScriptedNode(key, self.source, tree=self.tree, **self.child_kwargs) for key in keys]

    def update_self_after_load(self) -> None:
        self.loads += 1
        self.description = f"{len(self.children)} items" if self.children else "No items"


class NotificationRecorder:
    """Records change notifications fired by a tree.

    Example:
        recorder = NotificationRecorder(tree)
        tree.refresh()
        assert None in recorder.notifications
    """

    def __init__(self, tree: Any):
        self.notifications: List[Any] = []
        self._unsubscribe = tree.subscribe(self.notifications.append)

    def for_node(self, node: Any) -> int:
        """Count notifications naming node."""
        return sum(1 for notified in self.notifications if notified is node)

    def whole_tree(self) -> int:
        """Count "everything changed" notifications."""
        return sum(1 for notified in self.notifications if notified is None)

    def clear(self) -> None:
        self.notifications.clear()

    def close(self) -> None:
        self._unsubscribe()
