from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.session import get_session
from eventspotter.core.logging import logger

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check that also verifies the event store answers.

    Returns:
        200 with {"status": "healthy"} or 503 with {"status": "degraded"}
    """
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database probe failed: {e}")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "unreachable"})
    return {"status": "healthy", "database": "ok"}
