"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Auth is applied at the include_router level using FastAPI's dependencies
parameter, so every task route requires a valid session cookie without
each handler having to ask for it. Health and auth routers are open; the
/auth/me handler requests the identity itself.
"""

from fastapi import APIRouter, Depends

from tasktrack.api.auth import router as auth_router
from tasktrack.api.health import router as health_router
from tasktrack.api.tasks import router as tasks_router
from tasktrack.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require a valid session cookie
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_auth)
