from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_current_caller, get_news_service
from ..models.common import MessageResponse
from ..models.news import NewsCreate, NewsRecord, NewsUpdate
from ..services.news_service import NewsService
from ..utils.security import Caller

router = APIRouter(prefix="/api/news", tags=["News"])


@router.get("", response_model=List[NewsRecord])
async def list_articles(service: NewsService = Depends(get_news_service)):
    """List all articles, newest first"""
    return service.list_articles()


@router.get("/{article_id}", response_model=NewsRecord)
async def get_article(article_id: str, service: NewsService = Depends(get_news_service)):
    return service.get_article(article_id)


@router.post("", response_model=NewsRecord, status_code=201)
async def create_article(
    article: NewsCreate,
    caller: Caller = Depends(get_current_caller),
    service: NewsService = Depends(get_news_service),
):
    return service.create(article, caller)


@router.put("/{article_id}", response_model=NewsRecord)
async def update_article(
    article_id: str,
    changes: NewsUpdate,
    caller: Caller = Depends(get_current_caller),
    service: NewsService = Depends(get_news_service),
):
    return service.update(article_id, changes, caller)


@router.delete("/{article_id}", response_model=MessageResponse)
async def delete_article(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: NewsService = Depends(get_news_service),
):
    return MessageResponse(message=service.delete(article_id, caller))
