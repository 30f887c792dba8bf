from typing import Any, List

from keystone_di.domain.enums import ResolutionKind


class DIException(Exception):
    """Base exception for DI-related errors."""


class MissingDependencyError(DIException):
    """Raised when a token is resolved that was never registered.

    Attributes:
        token_name: Name of the token that has no registration.
    """

    def __init__(self, token_name: str) -> None:
        self.token_name = token_name
        super().__init__(f'Dependency token "{token_name}" not registered with the container')


class DuplicateDependencyError(DIException):
    """Raised when a token is registered twice and duplicates are not ignored.

    Attributes:
        dependency_name: Name of the recipe being registered.
    """

    def __init__(self, dependency_name: str) -> None:
        self.dependency_name = dependency_name
        super().__init__(f'"{dependency_name}" has been already registered!')


class CaptiveDependencyError(DIException):
    """Raised when a longer-lived dependent requires a shorter-lived dependency.

    A transient held by a singleton lives as long as the singleton, which
    silently defeats the transient registration.

    Attributes:
        dependent_name: Name of the recipe holding the dependency.
        dependent_kind: Resolution kind of the dependent.
        dependency_name: Name of the recipe being captured.
        dependency_kind: Resolution kind of the captured dependency.
    """

    def __init__(
        self,
        dependent_name: str,
        dependent_kind: ResolutionKind,
        dependency_name: str,
        dependency_kind: ResolutionKind,
    ) -> None:
        self.dependent_name = dependent_name
        self.dependent_kind = dependent_kind
        self.dependency_name = dependency_name
        self.dependency_kind = dependency_kind
        message = (
            f"Captive dependency detected: {dependent_kind}[{dependent_name}] -> "
            f"{dependency_kind}[{dependency_name}]"
        )
        super().__init__(message)


class InvalidDependencyError(DIException):
    """Raised when a constructor parameter's type cannot be determined.

    This occurs when the parameter has no manual injection entry and its
    reflected type is missing or not a concrete class.

    Attributes:
        index: Position of the parameter in the constructor.
        dependent_name: Name of the recipe being constructed.
    """

    def __init__(self, index: int, dependent_name: str) -> None:
        self.index = index
        self.dependent_name = dependent_name
        super().__init__(f'Invalid dependency at index "{index}" while resolving {dependent_name}')


class CircularDependencyError(DIException):
    """Raised when a dependency requires itself, directly or through others.

    Attributes:
        dependency_chain: Names of the tokens involved, ending with the repeated one.
    """

    def __init__(self, dependency_chain: List[str]) -> None:
        self.dependency_chain = dependency_chain
        super().__init__(f"Circular dependency detected: {' -> '.join(dependency_chain)}")


class MissingResolutionError(DIException):
    """Raised when a class is marked injectable without a valid resolution kind.

    Attributes:
        dependency_name: Name of the decorated class.
        given: The value passed instead of a resolution kind.
    """

    def __init__(self, dependency_name: str, given: Any = None) -> None:
        self.dependency_name = dependency_name
        self.given = given
        super().__init__(
            f'Dependency resolution of "{dependency_name}" must be either "SINGLETON", '
            f'"SCOPED" or "TRANSIENT". {given!r} given!'
        )
