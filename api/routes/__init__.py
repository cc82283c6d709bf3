# api/routes/__init__.py
"""
API route handlers organized by domain.
"""

from api.routes.forms import router as forms_router
from api.routes.health import router as health_router

__all__ = [
    "forms_router",
    "health_router",
]
