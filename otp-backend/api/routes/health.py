"""Health check API endpoints."""
from fastapi import APIRouter

from config import get_settings

router = APIRouter(tags=["health"])


@router.get("/")
def read_root():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": "Phone OTP Auth Backend",
        "version": "1.0.0",
        "cognito_configured": bool(settings.cognito_app_client_id),
    }
