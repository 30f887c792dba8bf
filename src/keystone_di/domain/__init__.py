"""
Domain layer - Core types of the dependency injection runtime.

This layer contains tokens, lifetimes, registration models and the error
taxonomy. It has no dependencies on other layers.
"""

from .constants import DEFAULT_CONTAINER_NAME, UNKNOWN
from .enums import DuplicatePolicy, ResolutionKind
from .exceptions import (
    CaptiveDependencyError,
    CircularDependencyError,
    DIException,
    DuplicateDependencyError,
    InvalidDependencyError,
    MissingDependencyError,
    MissingResolutionError,
)
from .interfaces import IContainer, IContainerFactory, IDependencyResolver, IMetadataSource, Options, Target
from .models import (
    CachedResolvedDependency,
    ContainerConfig,
    RegisteredDependency,
    RegisterOptions,
    recipe_name,
)
from .token import Token

__all__ = [
    # Constants
    "DEFAULT_CONTAINER_NAME",
    "UNKNOWN",
    # Enums
    "ResolutionKind",
    "DuplicatePolicy",
    # Exceptions
    "DIException",
    "MissingDependencyError",
    "DuplicateDependencyError",
    "CaptiveDependencyError",
    "InvalidDependencyError",
    "CircularDependencyError",
    "MissingResolutionError",
    # Interfaces
    "IContainer",
    "IContainerFactory",
    "IDependencyResolver",
    "IMetadataSource",
    "Options",
    "Target",
    # Models
    "RegisteredDependency",
    "CachedResolvedDependency",
    "RegisterOptions",
    "ContainerConfig",
    "recipe_name",
    # Token
    "Token",
]
