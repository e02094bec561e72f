from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Path, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from store_ratings.config.settings import get_settings
from store_ratings.core.errors import ValidationError
from store_ratings.db.session import SessionLocal
from store_ratings.services.identity import Principal, resolve_principal

bearer_scheme = HTTPBearer(auto_error=False)

# ids are 32-bit INTEGER columns
ResourceId = Annotated[int, Path(ge=1, le=2**31 - 1)]


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    token = credentials.credentials if credentials is not None else None
    return resolve_principal(db, token)


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> PageParams:
    settings = get_settings()
    limit = limit or settings.default_page_size
    if limit > settings.max_page_size:
        raise ValidationError.for_field("limit", f"Limit must not exceed {settings.max_page_size}")
    return PageParams(page=page, limit=limit)
