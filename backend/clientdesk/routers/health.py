from fastapi import APIRouter

from clientdesk.config import settings

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "table_backend": settings.table_backend,
    }
