from notethread.web.routers.accounts import router as accounts_router
from notethread.web.routers.auth import router as auth_router
from notethread.web.routers.comments import router as comments_router
from notethread.web.routers.notes import router as notes_router
from notethread.web.routers.profile import router as profile_router

__all__ = [
    "accounts_router",
    "auth_router",
    "comments_router",
    "notes_router",
    "profile_router",
]
