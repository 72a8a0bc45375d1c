"""Core interfaces for dependency injection."""

from .content_provider import IContentProvider

__all__ = [
    "IContentProvider",
]
