"""Health check endpoint with database and role seed checks."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.models.role import ROLE_NAMES, Role
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health, database connectivity and whether the
    reference roles are present. Used by load balancers and monitoring.
    """
    if not check_db_connected(db):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")

    seeded = db.scalar(
        select(func.count()).select_from(Role).where(Role.name.in_(ROLE_NAMES))
    )
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected",
        roles_seeded=seeded == len(ROLE_NAMES),
    )
