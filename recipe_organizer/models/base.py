"""Base models: snake_case in Python, camelCase on the wire"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Request bodies reject unknown fields"""
    model_config = ConfigDict(extra="forbid")


class MessageResponse(CamelModel):
    message: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def slice(cls, items: list, page: int, limit: int):
        """Return the requested page of ``items`` and its pagination block"""
        total = len(items)
        start = (page - 1) * limit
        pagination = cls(
            page=page,
            limit=limit,
            total=total,
            pages=-(-total // limit),
            has_next=start + limit < total,
            has_prev=page > 1,
        )
        return items[start:start + limit], pagination
