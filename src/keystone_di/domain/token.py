from typing import Generic, TypeVar

T = TypeVar("T")


class Token(Generic[T]):
    """Reference-identity handle naming a dependency.

    Two tokens created with the same name are different keys. Reuse the same
    Token object wherever the same dependency is meant.

    Example:
        >>> LOGGER = Token[Logger]("Logger")
        >>> container.register_singleton(LOGGER, ConsoleLogger)
        >>> container.resolve(LOGGER)
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __setattr__(self, key, value) -> None:
        if hasattr(self, "_name"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(key, value)

    def __repr__(self) -> str:
        return f"Token({self._name!r})"
