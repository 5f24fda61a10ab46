from .admin import router as admin_router
from .auth import router as auth_router
from .polls import router as polls_router

__all__ = ["admin_router", "auth_router", "polls_router"]
