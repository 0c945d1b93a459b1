"""
Routes for health check and statistics
"""
from fastapi import APIRouter, Depends

from randobot.api.dependencies import AppState, get_app_state, get_resolver
from randobot.api.models import HealthResponse, StatsResponse
from randobot.api.services import HealthService

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(app_state: AppState = Depends(get_app_state)):
    return HealthResponse(**HealthService.check(app_state))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(app_state: AppState = Depends(get_app_state), resolver=Depends(get_resolver)):
    """Site statistics of the loaded store"""
    return StatsResponse(
        site_stats=resolver.store.site_stats.to_dict(),
        data_path=str(app_state.content_manager.data_path),
    )
