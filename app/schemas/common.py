# app/schemas/common.py
"""
Response envelope shared by every endpoint.

Success: {"success": true,  "message": ..., "data": ...}
Error:   {"success": false, "code": ..., "message": ..., "details": ...}
"""

from pydantic import BaseModel
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = "OK"
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    code: str
    message: str
    details: Optional[Any] = None


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int


class PageParams(BaseModel):
    page: int = 1
    size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


# Routers return plain dicts; FastAPI validates them against the
# parametrized response_model (e.g. ApiResponse[Page[SpaceOut]]).
def ok(data: Any = None, message: str = "OK") -> dict:
    return {"success": True, "message": message, "data": data}


def page_of(items: list, total: int, params: PageParams) -> dict:
    return {"items": items, "total": total, "page": params.page, "size": params.size}
