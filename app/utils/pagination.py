# app/utils/pagination.py
"""Shared pagination dependency + query helper for list endpoints."""

from typing import Tuple
from fastapi import Query
from app.config import settings
from app.schemas.common import PageParams


def page_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, size=size)


def paginate(query, params: PageParams) -> Tuple[list, int]:
    """Returns (items for the requested page, total row count). `query` must already be ordered."""
    total = query.order_by(None).count()
    items = query.offset(params.offset).limit(params.size).all()
    return items, total
