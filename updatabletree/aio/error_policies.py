"""
Error handling policies for updatable-tree.

A failed fetch cycle never propagates to readers of the tree. Instead the
node hands the error to the tree's policy, which decides how to surface it
to the user. The node itself always keeps its last-known-good children.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import sys

from .errors import FetchTimeoutError


DEFAULT_MESSAGE_PREFIX = "Error refreshing tree: "


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for surfacing errors
    that occur during a node's fetch cycle.
    """

    @abstractmethod
    def handle(self, error: Exception, node: Any) -> None:
        """
        Handle an error that occurred during a fetch cycle.

        Args:
            error: The exception raised by the fetch (or the timeout)
            node: The node whose fetch cycle failed
        """
        pass

    @staticmethod
    def _record(error: Exception, node: Any) -> dict:
        return {
            'node_id': getattr(node, 'id', None),
            'label': getattr(node, 'label', None),
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'timed_out': isinstance(error, FetchTimeoutError),
        }


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that reports errors to the user and lets the tree carry on.

    Errors are collected for later inspection. When a show_message
    callback is given it receives the user-visible text, which is how a
    UI layer pops up a transient error notification.
    """

    def __init__(
        self,
        verbose: bool = True,
        show_message: Optional[Callable[[str], None]] = None,
        prefix: str = DEFAULT_MESSAGE_PREFIX,
    ):
        """
        Initialize the policy.

        Args:
            verbose: If True, print warnings to stderr when errors occur
            show_message: Optional sink for user-visible error messages
            prefix: Text put in front of each user-visible message
        """
        self.errors = []
        self.verbose = verbose
        self.show_message = show_message
        self.prefix = prefix

    def handle(self, error: Exception, node: Any) -> None:
        record = self._record(error, node)
        self.errors.append(record)

        message = self.format_message(error)
        if self.verbose:
            print(f"\nWARNING: Refresh of '{record['label']}' failed: {error}", file=sys.stderr)
        if self.show_message is not None:
            self.show_message(message)

    def format_message(self, error: Exception) -> str:
        """Build the user-visible text for an error."""
        return self.prefix + (str(error) or type(error).__name__)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'timeouts': sum(1 for e in self.errors if e['timed_out']),
            'failed_nodes': sorted({e['node_id'] for e in self.errors if e['node_id']}),
            'error_types': sorted({e['error_type'] for e in self.errors}),
        }


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without printing, for batch processing
    or tests.
    """

    def __init__(self):
        super().__init__(verbose=False)

    def clear(self) -> None:
        """Forget every collected error."""
        self.errors.clear()
