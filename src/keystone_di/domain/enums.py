from enum import Enum, IntEnum


class ResolutionKind(IntEnum):
    """Defines the lifetime of a resolved dependency.

    Members are ordered by how long the resolved value lives, which is what
    the captive dependency check compares.

    Attributes:
        TRANSIENT: New instance created on each resolution.
        SCOPED: Single instance per scope, dropped by a scope reset.
        SINGLETON: Single instance for the lifetime of the container.
    """

    TRANSIENT = 2
    SCOPED = 4
    SINGLETON = 8

    def __str__(self) -> str:
        return self.name


class DuplicatePolicy(str, Enum):
    """What to do when a token is registered a second time.

    Attributes:
        THROW: Raise DuplicateDependencyError.
        IGNORE: Keep the first registration and do nothing.
    """

    THROW = "throw"
    IGNORE = "ignore"

    def __str__(self) -> str:
        return self.value
