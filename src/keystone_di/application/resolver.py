import logging
from typing import Any, Dict, List, Optional, TypeVar

from keystone_di.application.circular_detector import CircularDependencyDetector
from keystone_di.domain import (
    UNKNOWN,
    CachedResolvedDependency,
    CaptiveDependencyError,
    IContainer,
    IDependencyResolver,
    InvalidDependencyError,
    MissingDependencyError,
    RegisteredDependency,
    ResolutionKind,
    Token,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DependencyResolver(IDependencyResolver):
    """Builds object graphs for the tokens registered in one container.

    Each constructor argument is resolved recursively with the dependent's
    registration passed along, so lifetimes are checked at every edge of the
    graph. SCOPED and SINGLETON values are cached on the container, tagged
    with their resolution kind.

    Attributes:
        _container: The container owning the registration table and cache.
        _circular_detector: Tracks tokens under construction.
    """

    def __init__(self, container: IContainer) -> None:
        """Initialize the resolver for a container.

        Args:
            container: The container this resolver serves.
        """
        self._container = container
        self._circular_detector = CircularDependencyDetector()

    def resolve_dependency(self, token: Token[T], parent_dependency: Optional[RegisteredDependency] = None) -> T:
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

        Example:
            >>> resolver = DependencyResolver(container)
            >>> handler = resolver.resolve_dependency(container.create_dependency_token(RequestHandler))
        """
        registered_dependency = self._verify_dependency_presence(token)

        if parent_dependency is not None and self._container.config.check_for_captive_dependencies:
            self._verify_captive_dependency_constraint(registered_dependency, parent_dependency)

        if registered_dependency.resolution_kind == ResolutionKind.TRANSIENT:
            return self._build(token, registered_dependency)

        return self._resolve_cached_dependency(token, registered_dependency)

    def _resolve_cached_dependency(self, token: Token[T], registered_dependency: RegisteredDependency) -> T:
        cache = self._container.cached_resolved_dependencies
        if token in cache:
            return cache[token].value

        resolved = self._build(token, registered_dependency)
        cache[token] = CachedResolvedDependency(
            value=resolved,
            resolution_kind=registered_dependency.resolution_kind,
        )
        return resolved

    def _build(self, token: Token[T], registered_dependency: RegisteredDependency) -> T:
        if not self._container.config.detect_circular_dependencies:
            return self.resolve_dependency_chain(registered_dependency)

        self._circular_detector.push(token)
        try:
            return self.resolve_dependency_chain(registered_dependency)
        finally:
            self._circular_detector.pop()

    def resolve_dependency_chain(self, registered_dependency: RegisteredDependency) -> Any:
        """Construct a recipe after resolving each of its constructor arguments.

        Manual injection entries take precedence over reflected parameter
        types. Arguments are resolved and passed in parameter order.

        Args:
            registered_dependency: The registration to construct.

        Returns:
            The constructed instance.

        Raises:
            InvalidDependencyError: If a parameter has neither a manual
                injection entry nor a concrete reflected type.
        """
        recipe = registered_dependency.recipe
        metadata = self._container.metadata
        injected_tokens = metadata.get_manual_injection_map(recipe)
        parameter_types = metadata.get_reflected_parameter_types(recipe)

        logger.debug(
            "Building %s (%s)",
            registered_dependency.recipe_name,
            registered_dependency.resolution_kind,
        )

        if not injected_tokens and not parameter_types:
            return recipe()

        argument_count = max(max(injected_tokens, default=-1) + 1, len(parameter_types))
        argument_tokens: List[Token] = [
            self._argument_token(index, injected_tokens, parameter_types, registered_dependency)
            for index in range(argument_count)
        ]

        arguments = [
            self.resolve_dependency(argument_token, registered_dependency) for argument_token in argument_tokens
        ]
        return recipe(*arguments)

    def _argument_token(
        self,
        index: int,
        injected_tokens: Dict[int, Token],
        parameter_types: List[Any],
        registered_dependency: RegisteredDependency,
    ) -> Token:
        if index in injected_tokens:
            return injected_tokens[index]

        parameter_type = parameter_types[index] if index < len(parameter_types) else UNKNOWN
        if parameter_type is not UNKNOWN:
            return self._container.create_dependency_token(parameter_type)

        raise InvalidDependencyError(index, registered_dependency.recipe_name)

    def _verify_dependency_presence(self, token: Token) -> RegisteredDependency:
        registered_dependency = self._container.registered_dependencies.get(token)
        if registered_dependency is None:
            raise MissingDependencyError(token.name)
        return registered_dependency

    @staticmethod
    def _verify_captive_dependency_constraint(
        dependency: RegisteredDependency,
        dependent: RegisteredDependency,
    ) -> None:
        # A consumer may only depend on something that lives at least as long
        if dependent.resolution_kind <= dependency.resolution_kind:
            return

        raise CaptiveDependencyError(
            dependent.recipe_name,
            dependent.resolution_kind,
            dependency.recipe_name,
            dependency.resolution_kind,
        )
