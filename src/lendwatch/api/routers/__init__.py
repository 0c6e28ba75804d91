"""API routers package."""

from lendwatch.api.routers.lending import router as lending_router
from lendwatch.api.routers.savings import router as savings_router

__all__ = [
    "lending_router",
    "savings_router",
]
