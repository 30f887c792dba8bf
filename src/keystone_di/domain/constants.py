"""Module-level sentinels shared by the container and its collaborators."""


class _Sentinel:
    __slots__ = ("_label",)

    def __init__(self, label: str) -> None:
        self._label = label

    def __repr__(self) -> str:
        return f"<{self._label}>"

    def __reduce__(self) -> str:
        return self._label


DEFAULT_CONTAINER_NAME = _Sentinel("DEFAULT_CONTAINER_NAME")
"""Name used by the container factory when no container name is given."""

UNKNOWN = _Sentinel("UNKNOWN")
"""Reflected parameter type that could not be determined."""
