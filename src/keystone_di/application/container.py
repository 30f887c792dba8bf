import inspect
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar, Union

from keystone_di.application.metadata_registry import MetadataRegistry
from keystone_di.application.resolver import DependencyResolver
from keystone_di.domain import (
    CachedResolvedDependency,
    ContainerConfig,
    DuplicateDependencyError,
    DuplicatePolicy,
    IContainer,
    IDependencyResolver,
    Options,
    RegisteredDependency,
    RegisterOptions,
    ResolutionKind,
    Target,
    Token,
    recipe_name,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container(IContainer):
    """Main dependency injection container.

    Pairs tokens with construction recipes and keeps the values resolved for
    SCOPED and SINGLETON registrations. Resolution is delegated to a
    DependencyResolver owned by the container.

    The container does no locking. Register everything during start-up and
    serialize first-time resolutions if several threads share it.

    Attributes:
        _config: Behaviour switches for resolution.
        _metadata: Constructor metadata used to build recipes.
        _registered_dependencies: Registration table keyed by token.
        _cached_resolved_dependencies: Resolved SCOPED/SINGLETON values keyed by token.
        _dependency_tokens: Implicit tokens keyed by qualified class name.
        _resolver: Component building the dependency graph.
    """

    def __init__(
        self,
        config: Optional[ContainerConfig] = None,
        metadata: Optional[MetadataRegistry] = None,
    ) -> None:
        """Initialize an empty container.

        Args:
            config: Behaviour switches. Defaults to all checks enabled.
            metadata: Constructor metadata source. A private registry that
                reflects type hints is created when omitted.
        """
        self._config = config if config is not None else ContainerConfig()
        self._metadata = metadata if metadata is not None else MetadataRegistry()
        self._registered_dependencies: Dict[Token, RegisteredDependency] = {}
        self._cached_resolved_dependencies: Dict[Token, CachedResolvedDependency] = {}
        self._dependency_tokens: Dict[str, Token] = {}
        self._resolver: IDependencyResolver = DependencyResolver(self)

    @property
    def config(self) -> ContainerConfig:
        return self._config

    @property
    def metadata(self) -> MetadataRegistry:
        return self._metadata

    @property
    def registered_dependencies(self) -> Dict[Token, RegisteredDependency]:
        return self._registered_dependencies

    @property
    def cached_resolved_dependencies(self) -> Dict[Token, CachedResolvedDependency]:
        return self._cached_resolved_dependencies

    def register_singleton(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built once and shared for the container's lifetime.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency. Required with a Token;
                defaults to the class itself otherwise. Registration options
                may be passed here instead when registering a bare class.
            options: Registration options, as RegisterOptions or a mapping.

        Raises:
            DuplicateDependencyError: If the token is already registered and
                duplicates are not ignored.

        Example:
            >>> container.register_singleton(Logger)
            >>> container.register_singleton(DATABASE, PostgresDatabase, {"on_duplicate": "ignore"})
        """
        self.register(target, ResolutionKind.SINGLETON, recipe, options)

    def register_transient(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built fresh on every resolution.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency, or registration options.
            options: Registration options, as RegisterOptions or a mapping.

        Raises:
            DuplicateDependencyError: If the token is already registered and
                duplicates are not ignored.
        """
        self.register(target, ResolutionKind.TRANSIENT, recipe, options)

    def register_scoped(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency built once per scope.

        The cached value is dropped by `reset_scoped_dependencies`.

        Args:
            target: A Token, or a class whose implicit token is used.
            recipe: Constructor for the dependency, or registration options.
            options: Registration options, as RegisterOptions or a mapping.

        Raises:
            DuplicateDependencyError: If the token is already registered and
                duplicates are not ignored.
        """
        self.register(target, ResolutionKind.SCOPED, recipe, options)

    def register(
        self,
        target: Target,
        resolution_kind: ResolutionKind,
        recipe: Optional[Union[Callable[..., Any], Options]] = None,
        options: Optional[Options] = None,
    ) -> None:
        """Register a dependency with an explicit resolution kind.

        Args:
            target: A Token, or a class whose implicit token is used.
            resolution_kind: Lifetime of the resolved value.
            recipe: Constructor for the dependency, or registration options.
            options: Registration options, as RegisterOptions or a mapping.

        Raises:
            DuplicateDependencyError: If the token is already registered and
                duplicates are not ignored.
            TypeError: If the target is neither a Token nor a class.
            ValueError: If a Token is registered without a recipe.
        """
        token, constructor, register_options = self._normalize_registration(target, recipe, options)

        if token in self._registered_dependencies:
            if register_options.on_duplicate == DuplicatePolicy.IGNORE:
                logger.debug("Ignoring duplicate registration of %s for token %r", recipe_name(constructor), token)
                return
            raise DuplicateDependencyError(recipe_name(constructor))

        self._registered_dependencies[token] = RegisteredDependency(
            recipe=constructor,
            resolution_kind=resolution_kind,
        )
        logger.debug("Registered %s as %s for token %r", recipe_name(constructor), resolution_kind, token)

    def resolve(self, target: Union[Token[T], Type[T]]) -> T:
        """Resolve and return a fully constructed instance.

        Args:
            target: A Token, or a class whose implicit token is used.

        Returns:
            Instance of the requested dependency with all dependencies injected.

        Raises:
            MissingDependencyError: If the token is not registered.
            CaptiveDependencyError: If a dependent outlives one of its dependencies.
            InvalidDependencyError: If a constructor parameter cannot be typed.
            CircularDependencyError: If the dependency graph loops.

        Example:
            >>> handler = container.resolve(RequestHandler)
        """
        return self._resolver.resolve_dependency(self._as_token(target))

    def create_dependency_token(self, dependency: Type[T]) -> Token[T]:
        """Return the implicit token of a class, creating it on first use.

        Args:
            dependency: The class to name.

        Returns:
            The same Token object for every call with the same class.
        """
        key = _dependency_key(dependency)
        token = self._dependency_tokens.get(key)
        if token is None:
            token = Token(dependency.__name__)
            self._dependency_tokens[key] = token
        return token

    def is_registered(self, target: Target) -> bool:
        """Check whether a Token or class has a registration.

        Args:
            target: A Token, or a class whose implicit token is used.
        """
        return self._as_token(target) in self._registered_dependencies

    def reset_scoped_dependencies(self) -> None:
        """Drop every cached SCOPED value.

        SINGLETON values and the registration table are left untouched.
        Call this at the end of a logical scope, such as a request.
        """
        scoped_tokens = [
            token
            for token, cached in self._cached_resolved_dependencies.items()
            if cached.resolution_kind == ResolutionKind.SCOPED
        ]
        for token in scoped_tokens:
            del self._cached_resolved_dependencies[token]
        logger.debug("Reset %d scoped dependencies", len(scoped_tokens))

    @contextmanager
    def scope(self) -> Iterator["Container"]:
        """Run a block as one scope, resetting scoped values when it exits.

        Example:
            >>> with container.scope() as scoped:
            ...     ctx1 = scoped.resolve(RequestContext)
            ...     ctx2 = scoped.resolve(RequestContext)
            ...     assert ctx1 is ctx2
        """
        try:
            yield self
        finally:
            self.reset_scoped_dependencies()

    def clear(self) -> None:
        """Clear all registrations, cached values and implicit tokens.

        Useful for testing or resetting the container state.
        """
        self._registered_dependencies.clear()
        self._cached_resolved_dependencies.clear()
        self._dependency_tokens.clear()

    def _as_token(self, target: Target) -> Token:
        if isinstance(target, Token):
            return target
        if inspect.isclass(target):
            return self.create_dependency_token(target)
        raise TypeError(f"Expected a Token or a class, got {target!r}")

    def _normalize_registration(
        self,
        target: Target,
        recipe: Optional[Union[Callable[..., Any], Options]],
        options: Optional[Options],
    ) -> Tuple[Token, Callable[..., Any], RegisterOptions]:
        if isinstance(recipe, (RegisterOptions, Mapping)):
            if options is not None:
                raise TypeError("Registration options were given twice")
            recipe, options = None, recipe

        if isinstance(target, Token):
            if recipe is None:
                raise ValueError(f"A recipe is required to register token {target.name!r}")
            token = target
        elif inspect.isclass(target):
            token = self.create_dependency_token(target)
            recipe = target if recipe is None else recipe
        else:
            raise TypeError(f"Expected a Token or a class, got {target!r}")

        if not callable(recipe):
            raise TypeError(f"Recipe for token {token.name!r} must be callable, got {recipe!r}")

        return token, recipe, _as_register_options(options)


def _dependency_key(dependency: Type) -> str:
    return f"{dependency.__module__}.{dependency.__qualname__}"


def _as_register_options(options: Optional[Options]) -> RegisterOptions:
    if options is None:
        return RegisterOptions()
    if isinstance(options, RegisterOptions):
        return options
    return RegisterOptions.model_validate(dict(options))
