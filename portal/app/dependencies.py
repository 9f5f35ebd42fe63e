"""Request-scoped collaborators: database, blob stores, services and caller."""

from pathlib import Path
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from .config import settings
from .services.auth_service import AuthService
from .services.blob_store import BlobStore
from .services.camp_service import CampService
from .services.document_service import DocumentService
from .services.issue_service import IssueService
from .services.news_service import NewsService
from .utils.errors import AuthenticationError
from .utils.mongo import mongo_manager
from .utils.security import Caller, decode_access_token

_bearer_scheme = HTTPBearer(auto_error=False)


def get_database() -> Database:
    return mongo_manager.db


def get_storage_root() -> Path:
    return settings.storage_root_path


def _blob_store(storage_root: Path, folder: str) -> BlobStore:
    return BlobStore(
        storage_root / folder,
        max_bytes=settings.max_upload_bytes,
        chunk_size=settings.UPLOAD_CHUNK_SIZE,
    )


def get_document_service(
    database: Database = Depends(get_database),
    storage_root: Path = Depends(get_storage_root),
) -> DocumentService:
    return DocumentService(
        database[settings.DOCUMENTS_COLLECTION],
        _blob_store(storage_root, "documents"),
    )


def get_issue_service(
    database: Database = Depends(get_database),
    storage_root: Path = Depends(get_storage_root),
) -> IssueService:
    return IssueService(
        database[settings.ISSUES_COLLECTION],
        _blob_store(storage_root, "issues"),
    )


def get_camp_service(database: Database = Depends(get_database)) -> CampService:
    return CampService(database[settings.CAMPS_COLLECTION])


def get_news_service(database: Database = Depends(get_database)) -> NewsService:
    return NewsService(database[settings.NEWS_COLLECTION])


def get_auth_service(database: Database = Depends(get_database)) -> AuthService:
    return AuthService(database[settings.USERS_COLLECTION])


def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> Optional[Caller]:
    """The caller named by the bearer token, or None for anonymous requests."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    if caller is None:
        raise AuthenticationError("Authentication required.")
    return caller
