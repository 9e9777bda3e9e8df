"""
Shared schema building blocks: camelCase models and the success envelope.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys; accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class APIResponse(CamelModel, Generic[DataT]):
    """Standard success envelope: ``{success, data, message}``."""

    success: bool = True
    data: Optional[DataT] = None
    message: Optional[str] = None


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class PaginationMeta(CamelModel):
    """Pagination block returned next to list data."""

    page: int
    limit: int
    total: int
    has_more: bool
