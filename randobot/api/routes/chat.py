"""
Routes for chat handling
"""
from typing import List

from fastapi import APIRouter, Depends

from randobot.api.dependencies import AppState, get_app_state, get_resolver
from randobot.api.exceptions import EmptyMessageError
from randobot.api.models import ChatRequest, ChatResponse, HistoryEntry
from randobot.api.services import ChatService

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    app_state: AppState = Depends(get_app_state),
    resolver=Depends(get_resolver),
):
    """Answer one question about the hiking gallery"""
    if not request.message or not request.message.strip():
        raise EmptyMessageError()

    return await ChatService.process_message(app_state, resolver, request.message.strip())


@router.get("/history", response_model=List[HistoryEntry])
async def history(app_state: AppState = Depends(get_app_state)):
    """Trailing window of the latest chat messages"""
    return [HistoryEntry(**entry) for entry in app_state.history]
