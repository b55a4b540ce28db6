from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.database import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> dict:
    """Liveness plus a round trip to the database."""
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        return {"status": "unhealthy", "database": "disconnected", "error": str(exc)}
    return {"status": "healthy", "database": "connected"}
