"""Common middleware for ClubHub."""

from .request_context import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
