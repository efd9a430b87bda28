"""Health check route."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from socialauth.config import Settings
from socialauth.domain.service import OAuthStateService, ProviderRegistry

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    git_sha: str
    providers: list[str]
    pending_states: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    registry: FromDishka[ProviderRegistry],
    state_service: FromDishka[OAuthStateService],
) -> HealthResponse:
    """Report liveness, the configured providers and the state store size."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        providers=registry.list_providers(),
        pending_states=len(state_service.repository),
    )
