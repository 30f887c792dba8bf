from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Type, TypeVar, Union

from keystone_di.domain.models import (
    CachedResolvedDependency,
    ContainerConfig,
    RegisteredDependency,
    RegisterOptions,
)
from keystone_di.domain.token import Token

T = TypeVar("T")

Target = Union[Token[T], Type[T]]
Options = Union[RegisterOptions, Mapping[str, Any]]


class IMetadataSource(ABC):
    """Abstract interface for per-recipe constructor metadata."""

    @abstractmethod
    def get_manual_injection_map(self, recipe: Callable[..., Any]) -> Dict[int, Token]:
        """Return the parameter index to Token overrides for a recipe.

        Args:
            recipe: The recipe being constructed.

        Returns:
            Mapping of parameter index to Token. May be empty.
        """

    @abstractmethod
    def get_reflected_parameter_types(self, recipe: Callable[..., Any]) -> List[Any]:
        """Return the ordered constructor parameter types of a recipe.

        Entries that are not concrete classes are the UNKNOWN marker.

        Args:
            recipe: The recipe being constructed.

        Returns:
            One entry per injectable constructor parameter. May be empty.
        """


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register_singleton(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built once per container.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency. Defaults to the class.
            options: Registration options.
        """

    @abstractmethod
    def register_transient(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built on every resolution.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency. Defaults to the class.
            options: Registration options.
        """

    @abstractmethod
    def register_scoped(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built once per scope.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency. Defaults to the class.
            options: Registration options.
        """

    @abstractmethod
    def resolve(self, target: Target) -> Any:
        """Resolve and return a fully constructed instance.

        Args:
            target: A Token, or a class whose implicit token is used.
        """

    @abstractmethod
    def create_dependency_token(self, dependency: Type[T]) -> Token[T]:
        """Return the implicit token of a class, creating it on first use.

        Args:
            dependency: The class to name.
        """

    @abstractmethod
    def reset_scoped_dependencies(self) -> None:
        """Drop every cached SCOPED value, leaving SINGLETON values in place."""

    @property
    @abstractmethod
    def registered_dependencies(self) -> Dict[Token, RegisteredDependency]:
        """Registration table, keyed by token."""

    @property
    @abstractmethod
    def cached_resolved_dependencies(self) -> Dict[Token, CachedResolvedDependency]:
        """Resolved-value cache, keyed by token."""

    @property
    @abstractmethod
    def config(self) -> ContainerConfig:
        """Behaviour switches of the container."""

    @property
    @abstractmethod
    def metadata(self) -> IMetadataSource:
        """Constructor metadata used while building recipes."""


class IDependencyResolver(ABC):
    """Abstract interface for dependency resolution operations."""

    @abstractmethod
    def resolve_dependency(
        self,
        token: Token[T],
        parent_dependency: Optional[RegisteredDependency] = None,
    ) -> T:
        """Resolve a token, checking lifetimes against the dependent being built.

        Args:
            token: The token to resolve.
            parent_dependency: Registration of the dependent currently being
                constructed, if any.

        Returns:
            Instance with all dependencies injected.

        Raises:
            MissingDependencyError: If the token is not registered.
            CaptiveDependencyError: If the parent outlives the dependency.
            InvalidDependencyError: If a constructor parameter cannot be typed.
            CircularDependencyError: If the token is already being constructed.
        """


class IContainerFactory(ABC):
    """Abstract interface for named container lookup."""

    @abstractmethod
    def get_container(self, name: Optional[Hashable] = None) -> IContainer:
        """Return the container with the given name, creating it on first request.

        Args:
            name: Container name. None selects the default container.
        """

