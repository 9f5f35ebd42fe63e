from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pymongo.database import Database

from ..dependencies import get_database
from ..utils.logging import logger

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """Health check endpoint"""
    try:
        database.command("ping")
        database_status = "connected"
    except Exception as e:
        logger.log_error("health_database_ping_failed", {"error": str(e)})
        database_status = "unavailable"

    return {
        "status": "healthy",
        "database": database_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
