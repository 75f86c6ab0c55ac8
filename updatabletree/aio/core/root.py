"""Tree cache root: owns the top-level nodes and the refresh policy."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from ..error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from .events import ChangeEmitter, ChangeListener
from .node import UpdatableNode


logger = logging.getLogger(__name__)


class UpdatableTreeRoot(ABC):
    """Abstract base class for a tree of updatable nodes.

    The root decides when the whole tree must be rebuilt (settings became
    invalid, or a forced reload) and when the existing roots are simply
    refreshed in place. UI layers subscribe() to learn what changed.

    Subclasses must have their settings in place before calling
    super().__init__(), since the initial tree is built there.
    """

    def __init__(self, error_policy: Optional[ErrorPolicy] = None):
        """Initialize tree and build the initial roots if settings allow.

        Args:
            error_policy: How failed fetches are surfaced (defaults to
                ContinueOnErrorsPolicy)
        """
        self.error_policy = error_policy or ContinueOnErrorsPolicy()
        self.context: Any = None
        self._emitter = ChangeEmitter()
        self._roots: List[UpdatableNode] = []

        if not self.verify_settings():
            # An empty root set lets the UI show its "not configured" state
            return
        self.context = self.resolve_context()
        self._roots = list(self.setup_tree())

    @abstractmethod
    def setup_tree(self) -> Sequence[UpdatableNode]:
        """Build the root node sequence."""
        pass

    @abstractmethod
    def verify_settings(self) -> bool:
        """Check that the settings needed to query the remote are present."""
        pass

    def resolve_context(self) -> Any:
        """Resolve the FetchContext for the next refresh cycle.

        Called once per refresh; every fetch in that cycle receives the
        same object.
        """
        return None

    def get_roots(self) -> List[UpdatableNode]:
        return self._roots

    async def get_children(self, node: Optional[UpdatableNode] = None) -> List[UpdatableNode]:
        """Children of node, or the roots when node is None."""
        if node is None:
            return self._roots
        return await node.get_children()

    def refresh(self, force_reload: bool = False) -> None:
        """Refresh the tree from the remote source.

        Invalid settings clear the tree. A forced reload discards every
        root and builds new ones; otherwise existing roots are reloaded in
        place so their children keep their identity.

        Must be called from a running event loop.
        """
        if not self.verify_settings():
            logger.info("Settings incomplete, clearing %d root(s)", len(self._roots))
            self._roots = []
            self.context = None
            self.signal_change()
            return

        self.context = self.resolve_context()

        if force_reload:
            logger.debug("Forced reload, discarding %d root(s)", len(self._roots))
            self._roots = []

        if not self._roots:
            self._roots = list(self.setup_tree())

        for root in self._roots:
            root.reload(True)
        self.signal_change()

    async def wait_until_idle(self) -> None:
        """Wait until no root has a fetch cycle in flight."""
        await asyncio.gather(*(root.wait_for_update() for root in self._roots))

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns its unsubscribe callable."""
        return self._emitter.subscribe(listener)

    def signal_change(self, node: Optional[UpdatableNode] = None) -> None:
        """Notify listeners that node (or, for None, everything) changed."""
        self._emitter.fire(node)

    def report_error(self, error: Exception, node: UpdatableNode) -> None:
        self.error_policy.handle(error, node)


class CallbackTreeRoot(UpdatableTreeRoot):
    """Tree root assembled from plain callables instead of a subclass.

    Example:
        tree = CallbackTreeRoot(
            build=lambda tree: [IssuesNode(tree)],
            verify=settings.is_valid,
            resolve_context=settings.to_context,
        )
    """

    def __init__(
        self,
        build: Callable[['CallbackTreeRoot'], Sequence[UpdatableNode]],
        verify: Callable[[], bool],
        resolve_context: Optional[Callable[[], Any]] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """
        Args:
            build: Receives the tree, returns its root nodes
            verify: Returns True when settings are complete
            resolve_context: Returns the FetchContext for a refresh cycle
            error_policy: How failed fetches are surfaced
        """
        self._build = build
        self._verify = verify
        self._resolve_context = resolve_context
        super().__init__(error_policy)

    def setup_tree(self) -> Sequence[UpdatableNode]:
        return self._build(self)

    def verify_settings(self) -> bool:
        return self._verify()

    def resolve_context(self) -> Any:
        if self._resolve_context is None:
            return None
        return self._resolve_context()
