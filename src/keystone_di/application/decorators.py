"""Class decorators that forward into the container API.

Registration decorators place a class into a named container of a
ContainerFactory. `inject` records a manual injection entry in a metadata
registry, standing in for a parameter annotation.

Example:
    >>> CLOCK = Token[Clock]("Clock")
    >>>
    >>> @singleton()
    ... class Logger:
    ...     pass
    >>>
    >>> @scoped()
    ... @inject(1, CLOCK)
    ... class RequestHandler:
    ...     def __init__(self, logger: Logger, clock):
    ...         self.logger = logger
    ...         self.clock = clock
"""

from typing import Callable, Hashable, Optional, Type, TypeVar, Union

from keystone_di.application.container_factory import ContainerFactory
from keystone_di.application.metadata_registry import MetadataRegistry
from keystone_di.domain import DuplicatePolicy, MissingResolutionError, RegisterOptions, ResolutionKind, Token

T = TypeVar("T")

ClassDecorator = Callable[[Type[T]], Type[T]]


def injectable(
    resolution_kind: ResolutionKind,
    container_name: Optional[Hashable] = None,
    *,
    factory: Optional[ContainerFactory] = None,
    on_duplicate: Union[DuplicatePolicy, str] = DuplicatePolicy.THROW,
) -> ClassDecorator:
    """Register the decorated class in a named container.

    Args:
        resolution_kind: Lifetime of the resolved value.
        container_name: Container to register into. None selects the default.
        factory: Factory owning the container. Defaults to the process-wide one.
        on_duplicate: What to do if the class is already registered.

    Returns:
        A class decorator returning the class unchanged.

    Raises:
        MissingResolutionError: If `resolution_kind` is not a ResolutionKind.
    """
    options = RegisterOptions(on_duplicate=on_duplicate)

    def decorator(cls: Type[T]) -> Type[T]:
        if not isinstance(resolution_kind, ResolutionKind):
            raise MissingResolutionError(cls.__name__, resolution_kind)

        container_factory = factory if factory is not None else ContainerFactory.get_instance()
        container_factory.get_container(container_name).register(cls, resolution_kind, options=options)
        return cls

    return decorator


def singleton(
    container_name: Optional[Hashable] = None,
    *,
    factory: Optional[ContainerFactory] = None,
    on_duplicate: Union[DuplicatePolicy, str] = DuplicatePolicy.THROW,
) -> ClassDecorator:
    """Register the decorated class as a SINGLETON."""
    return injectable(ResolutionKind.SINGLETON, container_name, factory=factory, on_duplicate=on_duplicate)


def scoped(
    container_name: Optional[Hashable] = None,
    *,
    factory: Optional[ContainerFactory] = None,
    on_duplicate: Union[DuplicatePolicy, str] = DuplicatePolicy.THROW,
) -> ClassDecorator:
    """Register the decorated class as SCOPED."""
    return injectable(ResolutionKind.SCOPED, container_name, factory=factory, on_duplicate=on_duplicate)


def transient(
    container_name: Optional[Hashable] = None,
    *,
    factory: Optional[ContainerFactory] = None,
    on_duplicate: Union[DuplicatePolicy, str] = DuplicatePolicy.THROW,
) -> ClassDecorator:
    """Register the decorated class as TRANSIENT."""
    return injectable(ResolutionKind.TRANSIENT, container_name, factory=factory, on_duplicate=on_duplicate)


def inject(index: int, token: Token, *, metadata: Optional[MetadataRegistry] = None) -> ClassDecorator:
    """Resolve constructor parameter `index` of the decorated class from `token`.

    Args:
        index: Zero-based constructor parameter position, ``self`` excluded.
        token: Token to resolve for that parameter.
        metadata: Registry to record into. Defaults to the one of the
            process-wide container factory.

    Returns:
        A class decorator returning the class unchanged.
    """

    def decorator(cls: Type[T]) -> Type[T]:
        registry = metadata if metadata is not None else ContainerFactory.get_instance().metadata
        registry.set_manual_injection(cls, index, token)
        return cls

    return decorator
