"""Health check endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..services.rooms import RoomRegistry, get_room_registry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(
    session: AsyncSession = Depends(get_session),
    rooms: RoomRegistry = Depends(get_room_registry),
) -> dict:
    """Check database connectivity."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "not ready", "database": str(e)}
    return {"status": "ready", "database": "connected", "connections": rooms.connection_count}
