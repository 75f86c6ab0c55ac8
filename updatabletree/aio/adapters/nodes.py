"""Concrete node types for remote-backed panels.

These cover the shapes an issue-tracker panel is made of: search roots
whose children come from a query, detail nodes whose rows are known up
front and enriched on load, and leaves.
"""

from typing import Any, Awaitable, Callable, List, Optional, Sequence

from ...config import RefreshConfig
from ..core import UpdatableNode


Fetcher = Callable[[Any], Awaitable[Sequence[Any]]]
ChildBuilder = Callable[[Any, UpdatableNode], UpdatableNode]


class LeafNode(UpdatableNode):
    """Node without children, e.g. a single detail row of an issue."""

    def __init__(
        self,
        label: str,
        node_id: str,
        target_url: Optional[str] = None,
        tooltip: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(label, node_id, **kwargs)
        self.target_url = target_url
        self.tooltip = tooltip

    def is_leaf(self) -> bool:
        return True

    async def fetch_children(self, context: Any) -> Sequence[UpdatableNode]:
        return []

    def update_self_after_load(self) -> None:
        pass


class StaticNode(UpdatableNode):
    """Node whose children are generated when it is created.

    Every fetch returns the same generated rows, so after the first load
    the children never change identity. The optional on_load hook runs
    before each fetch returns and may enrich the rows from the remote
    (for instance turning a "Diff" row into "+10 -2, 3 changed files").
    """

    def __init__(
        self,
        label: str,
        node_id: str,
        generated: Sequence[UpdatableNode],
        on_load: Optional[Callable[['StaticNode', Any], Awaitable[None]]] = None,
        **kwargs,
    ):
        super().__init__(label, node_id, **kwargs)
        self.generated: List[UpdatableNode] = list(generated)
        self.on_load = on_load

    async def fetch_children(self, context: Any) -> Sequence[UpdatableNode]:
        if self.on_load is not None:
            await self.on_load(self, context)
        return self.generated

    def update_self_after_load(self) -> None:
        pass


class QueryNode(UpdatableNode):
    """Node whose children are the results of a remote query.

    The fetcher returns raw descriptors (decoded JSON items, say) and
    build_child turns each one into a node. After every load the
    description shows how many results there are.

    Example:
        prs = QueryNode(
            "My PRs", "id-my-prs",
            fetcher=search_pull_requests,
            build_child=lambda item, parent: PullRequestNode(item, parent.tree),
            noun="open pull requests",
            tree=tree,
        )
    """

    def __init__(
        self,
        label: str,
        node_id: str,
        fetcher: Fetcher,
        build_child: ChildBuilder,
        noun: str = "items",
        config: Optional[RefreshConfig] = None,
        **kwargs,
    ):
        """
        Args:
            fetcher: Async callable receiving the FetchContext
            build_child: Maps (descriptor, parent) to a child node
            noun: Plural used in the description ("3 open pull requests")
            config: Refresh policy (defaults to eager)
        """
        kwargs.setdefault('description', '...')
        super().__init__(label, node_id, config=config or RefreshConfig.eager(), **kwargs)
        self.fetcher = fetcher
        self.build_child = build_child
        self.noun = noun

    async def fetch_children(self, context: Any) -> Sequence[UpdatableNode]:
        descriptors = await self.fetcher(context)
        return [self.build_child(descriptor, self) for descriptor in descriptors]

    def update_self_after_load(self) -> None:
        # Runs after failures too, so the description reflects what is shown
        count = len(self.children)
        self.description = f"{count} {self.noun}" if count else f"No {self.noun}"
