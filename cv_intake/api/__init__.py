"""HTTP API: candidate queries and CV processing."""

from .routes import router

__all__ = ["router"]
