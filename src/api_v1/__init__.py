from fastapi import APIRouter

from .auth.views import router as auth_router
from .tasks.views import router as tasks_router
from .live.views import router as live_router
from .health.views import router as health_router

router = APIRouter()
router.include_router(router=auth_router, prefix="/auth")
router.include_router(router=tasks_router, prefix="/task")
router.include_router(router=live_router)
router.include_router(router=health_router)
