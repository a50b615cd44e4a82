"""DTOs and API schemas for the Categories app."""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import Field


@dataclass(frozen=True)
class CategoryDTO:
    id: UUID
    user_id: UUID
    name: str
    color: str
    created_at: datetime


class CategoryIn(Schema):
    """
    New category. `color` is an unvalidated display hint (e.g. "#3B82F6");
    only its length is bounded, to the 32-character column.
    """
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., max_length=32)


class CategoryOut(Schema):
    id: UUID
    name: str
    color: str
    created_at: datetime
