from fastapi import APIRouter

from app.core import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/")
async def health_check():
    """
    Liveness endpoint; reports the service name.
    """
    return {"success": True, "message": f"{settings.APP_NAME} is running", "data": None}
