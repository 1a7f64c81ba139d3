"""
Admin API module.

Contains endpoints for administrators:
- Event moderation and search
- User management
- Category management
"""

from backend.src.api.admin.events import router as events_router
from backend.src.api.admin.users import router as users_router
from backend.src.api.admin.categories import router as categories_router

__all__ = ["events_router", "users_router", "categories_router"]
