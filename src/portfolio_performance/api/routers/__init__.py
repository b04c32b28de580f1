"""API routers package."""

from portfolio_performance.api.routers.performance import router as performance_router

__all__ = [
    "performance_router",
]
