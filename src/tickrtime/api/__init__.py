"""HTTP API routers."""

from tickrtime.api.router import api_router

__all__ = ["api_router"]
