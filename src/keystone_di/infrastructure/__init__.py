"""
Infrastructure layer - External integrations.

This layer contains integrations with external frameworks and tools.
It depends on both Application and Domain layers. Subpackages are imported
explicitly so the FastAPI extra stays optional.
"""

__all__ = [
    "fastapi_integration",
    "testing",
]
