from typing import List

from ..models.news import NewsCreate, NewsRecord, NewsUpdate
from ..utils.errors import ClientInputError
from ..utils.logging import logger
from ..utils.security import Caller
from .collection import CollectionService


class NewsService(CollectionService):
    record_model = NewsRecord
    label = "Article"

    def list_articles(self) -> List[NewsRecord]:
        return self._find_many(sort_field="date")

    def get_article(self, article_id: str) -> NewsRecord:
        return self._find_one(article_id)

    def create(self, article: NewsCreate, caller: Caller) -> NewsRecord:
        caller.require_admin()
        data = article.model_dump(exclude_none=True)
        created = self._insert(NewsRecord(**data))
        logger.log_step("article_created", {"article_id": created.id, "caller": caller.user_id})
        return created

    def update(self, article_id: str, changes: NewsUpdate, caller: Caller) -> NewsRecord:
        caller.require_admin()
        data = changes.model_dump(by_alias=True, exclude_none=True)
        if not data:
            raise ClientInputError("No fields to update.")
        article = self._update(article_id, data)
        logger.log_step("article_updated", {"article_id": article.id, "fields": sorted(data)})
        return article

    def delete(self, article_id: str, caller: Caller) -> str:
        caller.require_admin()
        self._delete(article_id)
        logger.log_step("article_deleted", {"article_id": article_id})
        return "Article deleted successfully."
