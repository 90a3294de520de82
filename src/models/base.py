"""Shared pydantic base for API-facing models (camelCase on the wire)."""

from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Snake_case in Python, camelCase in JSON; accepts either on input."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "extra": "ignore",
    }


class Page(ApiModel, Generic[T]):
    """One page of items plus the paging facts."""

    count: int
    total: int
    pages: int
    current_page: int
    items: list[T]
