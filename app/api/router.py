"""
API router - aggregates the endpoint modules mounted under /api.
"""

from fastapi import APIRouter

from app.api.endpoints import diagnostics, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(diagnostics.router, prefix="/test", tags=["diagnostics"])
