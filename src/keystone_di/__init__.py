"""
keystone-di: Token based Dependency Injection container with lifetime checks.

Public API exports for the keystone-di package.
"""

# Application exports
from keystone_di.application.container import Container
from keystone_di.application.container_factory import ContainerFactory
from keystone_di.application.decorators import inject, injectable, scoped, singleton, transient
from keystone_di.application.metadata_registry import MetadataRegistry

# Domain exports
from keystone_di.domain.constants import DEFAULT_CONTAINER_NAME, UNKNOWN
from keystone_di.domain.enums import DuplicatePolicy, ResolutionKind
from keystone_di.domain.exceptions import (
    CaptiveDependencyError,
    CircularDependencyError,
    DIException,
    DuplicateDependencyError,
    InvalidDependencyError,
    MissingDependencyError,
    MissingResolutionError,
)
from keystone_di.domain.models import ContainerConfig, RegisterOptions
from keystone_di.domain.token import Token

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "ContainerFactory",
    "MetadataRegistry",
    "Token",
    # Decorators
    "injectable",
    "singleton",
    "scoped",
    "transient",
    "inject",
    # Configuration
    "ContainerConfig",
    "RegisterOptions",
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
]
