"""Application layer - Circular dependency detection."""

import threading
from typing import List

from keystone_di.domain import CircularDependencyError, Token


class CircularDependencyDetector:
    """Detects circular dependencies during resolution.

    Uses thread-local storage to track the tokens currently being built.
    When a token is pushed while already on the stack, the chain loops.

    Attributes:
        _local: Thread-local storage for construction stacks.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[Token]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def push(self, token: Token) -> None:
        """Add a token to the construction stack.

        Args:
            token: The token about to be built.

        Raises:
            CircularDependencyError: If the token is already being built.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push(service_a)
            >>> detector.push(service_b)
            >>> detector.push(service_a)  # Raises CircularDependencyError
        """
        stack = self._get_stack()

        # Tokens compare by identity, so a name collision is not a cycle
        if token in stack:
            cycle_start_index = stack.index(token)
            cycle = [entry.name for entry in stack[cycle_start_index:]] + [token.name]
            raise CircularDependencyError(cycle)

        stack.append(token)

    def pop(self) -> None:
        """Remove the most recent token from the construction stack."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    @property
    def depth(self) -> int:
        """Number of tokens currently being built on this thread."""
        return len(self._get_stack())

    def clear(self) -> None:
        """Clear the construction stack of the current thread."""
        if hasattr(self._local, "stack"):
            self._local.stack.clear()
