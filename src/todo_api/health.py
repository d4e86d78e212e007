from datetime import datetime, timezone

from fastapi import APIRouter

from src.todo_api.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check() -> HealthResponse:
    """Liveness probe. Touches no storage."""
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())
