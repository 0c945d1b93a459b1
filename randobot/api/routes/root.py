"""
Main routes for the application
"""
from fastapi import APIRouter, Depends

from randobot.api.config import settings
from randobot.api.dependencies import AppState, get_app_state

router = APIRouter()


@router.get("/")
async def root(app_state: AppState = Depends(get_app_state)):
    """Root endpoint with loading status"""
    return {
        "message": "Randobot API",
        "status": "ready" if app_state.is_data_loaded() else "waiting_for_data",
        "version": settings.API_VERSION,
        "example_questions": settings.get_example_questions(),
    }
