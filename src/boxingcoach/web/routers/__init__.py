from boxingcoach.web.routers.auth import router as auth_router
from boxingcoach.web.routers.meta import router as meta_router
from boxingcoach.web.routers.training import router as training_router
from boxingcoach.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "meta_router",
    "training_router",
    "users_router",
]
