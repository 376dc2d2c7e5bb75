from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asset_hub.database.session import get_db_session

router = APIRouter()


@router.get("/health")
def health(db: Session = Depends(get_db_session)):
    """Liveness plus database connectivity. 503 when the database is unreachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "degraded", "checks": {"database": "error"}},
        )
    return {"status": "ok", "checks": {"database": "ok"}}
