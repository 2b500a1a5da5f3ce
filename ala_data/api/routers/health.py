from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from ala_data.api.schemas.health import HealthResponse
from ala_data.domain.services.normalization import format_datetime

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy", timestamp=format_datetime(datetime.now(timezone.utc)))
