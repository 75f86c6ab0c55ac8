"""Lazily populated, background-refreshable tree node.

Every node in an updatable tree, root or leaf, is an UpdatableNode. A node
knows how to fetch its own children (delegated to the concrete subclass),
merges each fetch into its cached children by identity, and tells its tree
when something visible changed.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, List, Optional, Sequence

from ...config import RefreshConfig
from ..errors import FetchTimeoutError
from .diff import reconcile_children


logger = logging.getLogger(__name__)


class UpdatableNode(ABC):
    """Abstract base class for cached, lazily populated tree nodes.

    At most one fetch cycle runs per node at a time. Readers arriving while
    a cycle is in flight all wait on the same completion signal instead of
    starting fetches of their own.

    Subclasses implement fetch_children() and update_self_after_load().
    """

    def __init__(
        self,
        label: str,
        node_id: str,
        *,
        eager_expand: Optional[bool] = None,
        timeout_ms: Optional[int] = None,
        config: Optional[RefreshConfig] = None,
        tree: Any = None,
        children: Optional[Sequence['UpdatableNode']] = None,
        description: Optional[str] = None,
    ):
        """Initialize node.

        Args:
            label: Display label, may be rewritten after a fetch
            node_id: Stable key, unique among siblings through time
            eager_expand: Override config.eager_expand
            timeout_ms: Override config.timeout_ms
            config: Refresh policy (defaults to RefreshConfig())
            tree: Owning tree; receives change notifications and errors
            children: Initial children
            description: Secondary display text

        Raises:
            ValueError: If the resolved timeout is not positive
        """
        config = config or RefreshConfig()
        self.label = label
        self.id = node_id
        self.description = description
        self.eager_expand = config.eager_expand if eager_expand is None else eager_expand
        self.timeout_ms = config.timeout_ms if timeout_ms is None else timeout_ms
        problems = RefreshConfig(self.timeout_ms, self.eager_expand).validate()
        if problems:
            raise ValueError(f"Invalid refresh config for {node_id!r}: {'; '.join(problems)}")
        self.tree = tree
        self.children: List[UpdatableNode] = list(children) if children else []

        self._populated = False
        self._cycle: Optional[asyncio.Task] = None
        self._completed: Optional[asyncio.Future] = None
        self._cycle_number = 0

        # Statistics
        self.fetch_count = 0
        self.failure_count = 0
        self.timeout_count = 0

    @property
    def populated(self) -> bool:
        """True once any fetch cycle has completed, successfully or not."""
        return self._populated

    @property
    def updating(self) -> bool:
        """True while a fetch cycle is in flight."""
        return self._cycle is not None

    @abstractmethod
    async def fetch_children(self, context: Any) -> Sequence['UpdatableNode']:
        """Fetch this node's children from the remote source.

        Args:
            context: FetchContext resolved by the tree for this refresh
                cycle, or None for a node without a tree

        Returns:
            The new ordered child sequence

        Raises:
            Any exception to mark the cycle as failed
        """
        pass

    @abstractmethod
    def update_self_after_load(self) -> None:
        """Update label/description from the freshly loaded children."""
        pass

    async def get_children(self) -> List['UpdatableNode']:
        """Return this node's children.

        The first read starts a background fetch. Eager nodes answer with
        whatever is cached right away; others wait for that fetch. Reads
        arriving while a fetch is in flight wait for it to finish. Reads
        of a populated, idle node return the cache without fetching.
        """
        if not self._populated and self._cycle is None:
            self._start_cycle()

        if self._cycle is not None and (self._populated or not self.eager_expand):
            await asyncio.shield(self._completed)
        return self.children

    def reload(self, user_initiated: bool = False) -> Awaitable[None]:
        """Refresh this node in the background.

        Joins the cycle already in flight instead of starting a second one.
        Must be called from a running event loop.

        Args:
            user_initiated: Notify the tree immediately so it can show a
                busy indicator before the fetch completes

        Returns:
            Awaitable that completes with the fetch cycle
        """
        completed = self._start_cycle()
        if user_initiated:
            self._signal_change()
        return asyncio.shield(completed)

    async def wait_for_update(self) -> None:
        """Wait for the in-flight fetch cycle, if there is one."""
        if self._cycle is not None:
            await asyncio.shield(self._completed)

    def get_stats(self) -> dict:
        return {
            'id': self.id,
            'populated': self._populated,
            'updating': self.updating,
            'cycles': self._cycle_number,
            'fetches': self.fetch_count,
            'failures': self.failure_count,
            'timeouts': self.timeout_count,
            'children': len(self.children),
        }

    def _start_cycle(self) -> asyncio.Future:
        if self._cycle is not None:
            return self._completed

        loop = asyncio.get_running_loop()
        self._cycle_number += 1
        self._completed = loop.create_future()
        self._cycle = loop.create_task(self._run_cycle(self._cycle_number, self._completed))
        return self._completed

    async def _run_cycle(self, number: int, completed: asyncio.Future) -> None:
        logger.debug("Fetching children of %r (cycle %d)", self.id, number)
        first_population = not self._populated
        cancelled = False
        try:
            loaded = await self._fetch_with_timeout()
        except asyncio.CancelledError:
            cancelled = True
            raise
        except Exception as error:
            self.failure_count += 1
            logger.warning("Fetching children of %r failed: %s", self.id, error)
            try:
                self._report_error(error)
            except Exception:
                logger.exception("Error policy failed while reporting on %r", self.id)
        else:
            try:
                changed, children = reconcile_children(self.children, loaded)
            except Exception:
                self.failure_count += 1
                logger.exception("Reconciling children of %r failed", self.id)
            else:
                if changed:
                    self.children = children
                logger.debug("Cycle %d of %r done (changed=%s)", number, self.id, changed)
        finally:
            self._cycle = None
            if cancelled:
                completed.cancel()
            else:
                self._populated = True
                completed.set_result(None)

        try:
            self.update_self_after_load()
        except Exception:
            logger.exception("Post-load update of %r failed", self.id)
        # The reader that triggered a blocking first load receives the
        # result directly; notifying as well would render twice.
        if self.eager_expand or not first_population:
            self._signal_change()

    async def _fetch_with_timeout(self) -> List['UpdatableNode']:
        started = time.monotonic()
        deadline = started + self.timeout_ms / 1000
        self.fetch_count += 1
        fetch = asyncio.ensure_future(self.fetch_children(self._context()))

        try:
            while True:
                done, _ = await asyncio.wait({fetch}, timeout=max(deadline - time.monotonic(), 0))
                if done:
                    return list(fetch.result())
                # Never time out before the full duration has elapsed
                if time.monotonic() >= deadline:
                    break
        except asyncio.CancelledError:
            fetch.cancel()
            raise

        self.timeout_count += 1
        fetch.add_done_callback(self._discard_late_result)
        elapsed_ms = (time.monotonic() - started) * 1000
        raise FetchTimeoutError(self.timeout_ms, elapsed_ms, self.id)

    def _discard_late_result(self, fetch: asyncio.Future) -> None:
        if fetch.cancelled():
            return
        error = fetch.exception()
        if error is not None:
            logger.debug("Discarding late failure of timed out fetch for %r: %s", self.id, error)
        else:
            logger.debug("Discarding late result of timed out fetch for %r", self.id)

    def _context(self) -> Any:
        return getattr(self.tree, 'context', None)

    def _signal_change(self) -> None:
        if self.tree is not None:
            self.tree.signal_change(self)

    def _report_error(self, error: Exception) -> None:
        if self.tree is not None:
            self.tree.report_error(error, self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r}, label={self.label!r})"
