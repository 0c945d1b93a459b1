"""
Routes for website indexing
"""
from fastapi import APIRouter, Depends

from randobot.api.dependencies import AppState, get_app_state
from randobot.api.exceptions import MissingUrlError
from randobot.api.models import IndexRequest, IndexResponse
from randobot.api.services import IndexingService

router = APIRouter(prefix="/api", tags=["indexing"])


@router.post("/index-website", response_model=IndexResponse)
async def index_website(request: IndexRequest, app_state: AppState = Depends(get_app_state)):
    """Crawl the site again and replace the document store"""
    if not request.url or not request.url.strip():
        raise MissingUrlError()

    return await IndexingService.index_website(app_state, request.url.strip())
