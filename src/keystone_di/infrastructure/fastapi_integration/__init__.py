"""
FastAPI integration module.

Provides helpers and utilities for integrating keystone-di with FastAPI.
"""

from .integration import ScopeResetMiddleware, create_fastapi_dependency

__all__ = [
    "create_fastapi_dependency",
    "ScopeResetMiddleware",
]
