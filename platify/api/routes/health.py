"""Health check endpoint."""

from typing import Dict

from fastapi import APIRouter

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """
    Liveness check.

    Returns:
        Health status
    """
    return {"status": "healthy"}
