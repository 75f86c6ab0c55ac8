"""Configuration system for updatable-tree.

This module defines how users specify refresh behaviour for nodes and the
settings a remote-backed tree needs before it can be built.
"""

from dataclasses import dataclass
from typing import List, Optional


DEFAULT_TIMEOUT_MS = 30000
DEFAULT_API_BASE = "https://api.github.com/"


@dataclass
class RefreshConfig:
    """Per-node refresh policy.

    eager_expand nodes return their (possibly empty) cached children on
    the first read and update asynchronously; blocking nodes suspend the
    first reader until the initial fetch completes.
    """

    timeout_ms: int = DEFAULT_TIMEOUT_MS  # Deadline for one fetch cycle
    eager_expand: bool = False            # Show stale/empty state immediately

    @classmethod
    def eager(cls, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> 'RefreshConfig':
        """Create config for nodes that render before their first fetch."""
        return cls(timeout_ms=timeout_ms, eager_expand=True)

    @classmethod
    def blocking(cls, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> 'RefreshConfig':
        """Create config for nodes whose first read waits for the fetch."""
        return cls(timeout_ms=timeout_ms, eager_expand=False)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.timeout_ms <= 0:
            errors.append("timeout_ms must be positive")
        return errors


@dataclass(frozen=True)
class FetchContext:
    """Immutable context threaded into every fetch of one refresh cycle."""

    api_base: str = DEFAULT_API_BASE
    api_token: str = ""
    username: str = ""


@dataclass
class SourceSettings:
    """Settings needed to query a remote issue tracker.

    This is what a panel checks in verify_settings() before building its
    tree. Missing values are not errors; they produce an empty tree.
    """

    api_base: str = DEFAULT_API_BASE
    api_token: str = ""
    username: str = ""
    label_filter: str = ""
    repo_filter: str = ""            # Comma separated repository names
    require_filter: bool = True      # Need a label or repo filter to build

    def repos(self) -> List[str]:
        """Split the repository filter into names, dropping blanks."""
        return [repo.strip() for repo in self.repo_filter.split(",") if repo.strip()]

    def validate(self) -> List[str]:
        """List what is missing for the tree to be queryable.

        Returns:
            List of problems (empty if the settings are usable)
        """
        errors = []
        if not self.api_token:
            errors.append("api_token is not set")
        if not self.username:
            errors.append("username is not set")
        if self.require_filter and not (self.label_filter or self.repos()):
            errors.append("either label_filter or repo_filter must be set")
        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_context(self, api_base: Optional[str] = None) -> FetchContext:
        """Resolve an immutable fetch context from these settings."""
        return FetchContext(
            api_base=api_base or self.api_base,
            api_token=self.api_token,
            username=self.username,
        )
