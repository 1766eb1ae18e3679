"""
==============================================================================
Health Check Endpoints
==============================================================================

Liveness and readiness endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.database import get_db


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session):
        self._db = db

    def check_database(self) -> str:
        """Check database connectivity."""
        try:
            self._db.execute(text("SELECT 1"))
            return "healthy"
        except SQLAlchemyError:
            return "unhealthy"

    def get_readiness(self) -> dict:
        """Ready when the store answers."""
        db_status = self.check_database()
        return {
            "ready": db_status == "healthy",
            "database": db_status,
        }


@router.get("")
async def health_check():
    """Liveness probe: the process is up and serving."""
    return {"status": "OK", "message": "Products API is running"}


@router.get("/ready")
async def readiness_check(db: Session = Depends(get_db)):
    """Readiness probe: 503 while the store is unreachable."""
    controller = HealthController(db)
    readiness = controller.get_readiness()
    return JSONResponse(status_code=200 if readiness["ready"] else 503, content=readiness)
