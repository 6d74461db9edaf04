"""Liveness plus storage reachability and the registration policy in force."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coopqueue.core.config import Settings, get_settings
from coopqueue.core.database import check_db_connected, get_db
from coopqueue.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        registration="open" if settings.REGISTRATION_KEY is None else "invite_only",
        session_algorithm=settings.JWT_ALGORITHM,
    )
