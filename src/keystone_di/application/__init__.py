"""
Application layer - Registration and resolution.

This layer contains the container, its resolver and the components they
collaborate with. It depends only on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .container import Container
from .container_factory import ContainerFactory
from .decorators import inject, injectable, scoped, singleton, transient
from .metadata_registry import MetadataRegistry
from .resolver import DependencyResolver

__all__ = [
    "Container",
    "ContainerFactory",
    "DependencyResolver",
    "MetadataRegistry",
    "CircularDependencyDetector",
    # Decorators
    "injectable",
    "singleton",
    "scoped",
    "transient",
    "inject",
]
