"""Diagnostic echo - confirms routing under /api without touching the database."""

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter()
settings = get_settings()


@router.get("")
async def api_test():
    return {"message": "API is working!", "environment": settings.environment}
