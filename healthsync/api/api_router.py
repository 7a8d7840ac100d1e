from fastapi import APIRouter

from healthsync.api import api_auth, api_user, api_pairing, api_health_log, api_message, api_checkup, api_realtime

router = APIRouter()

router.include_router(api_auth.router, tags=["authentication"], prefix="/auth")
router.include_router(api_user.router, tags=["user"], prefix="/users")
router.include_router(api_pairing.router, tags=["pairing"], prefix="/pairings")
router.include_router(api_health_log.router, tags=["health-log"], prefix="/health-logs")
router.include_router(api_message.router, tags=["message"], prefix="/messages")
router.include_router(api_checkup.router, tags=["checkup"], prefix="/checkups")
router.include_router(api_realtime.router, tags=["realtime"], prefix="/realtime")
