"""Exceptions raised by node fetch cycles."""

from typing import Optional


class FetchError(Exception):
    """A remote fetch for a node failed.

    Concrete nodes wrap transport or server failures in this so policies
    and logs can tell fetch problems apart from programming errors.
    """

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.node_id = node_id


class FetchTimeoutError(FetchError):
    """The fetch did not settle before the node's deadline."""

    def __init__(self, timeout_ms: int, elapsed_ms: float, node_id: Optional[str] = None):
        super().__init__(f"Request timed out after {timeout_ms} ms.", node_id)
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
