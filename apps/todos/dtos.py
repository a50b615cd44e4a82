"""DTOs and API schemas for the Todos app."""
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from django.utils import timezone
from ninja import Schema
from pydantic import Field, field_validator


PriorityLiteral = Literal['low', 'medium', 'high']


def current_millis() -> int:
    """Now, in milliseconds since the Unix epoch (the unit of `deadline`)."""
    return int(timezone.now().timestamp() * 1000)


# =============================================================================
# Data Transfer Objects
# =============================================================================

@dataclass(frozen=True)
class TodoDTO:
    id: UUID
    user_id: UUID
    text: str
    description: Optional[str]
    is_completed: bool
    category: str
    priority: str
    deadline: Optional[int]
    created_at: datetime

    def is_overdue(self, now_ms: Optional[int] = None) -> bool:
        """Past its deadline and still open."""
        if self.deadline is None or self.is_completed:
            return False
        if now_ms is None:
            now_ms = current_millis()
        return self.deadline < now_ms


@dataclass(frozen=True)
class TodoStatsDTO:
    total: int
    completed: int
    overdue: int


@dataclass(frozen=True)
class TodoFilters:
    """
    Optional filters for listing todos.

    Empty strings count as "not given", matching how the query string
    arrives from a cleared filter box.
    """
    category: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None
    search: Optional[str] = None

    @property
    def search_text(self) -> Optional[str]:
        """The search query, or None when absent or whitespace-only."""
        if self.search and self.search.strip():
            return self.search.strip()
        return None

    def narrowing_dimension(self) -> Optional[str]:
        """
        The single filter that drives the primary lookup.

        Precedence: category > priority > completed > None (all todos).
        """
        if self.category:
            return 'category'
        if self.priority:
            return 'priority'
        if self.completed is not None:
            return 'completed'
        return None

    def matches(self, todo) -> bool:
        """True if `todo` satisfies every requested category/priority/completed filter."""
        if self.category and todo.category != self.category:
            return False
        if self.priority and todo.priority != self.priority:
            return False
        if self.completed is not None and todo.is_completed != self.completed:
            return False
        return True


# =============================================================================
# Request Schemas
# =============================================================================

class TodoIn(Schema):
    """New todo. Completion is not accepted; every todo starts open."""
    text: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    category: str = Field(..., max_length=100)
    priority: PriorityLiteral
    deadline: Optional[int] = None


class TodoUpdate(Schema):
    """
    Partial update. Only fields present in the request body are written;
    `description` and `deadline` may be cleared with an explicit null.
    """
    text: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    priority: Optional[PriorityLiteral] = None
    deadline: Optional[int] = None

    @field_validator('text', 'category', 'priority')
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# =============================================================================
# Response Schemas
# =============================================================================

class TodoOut(Schema):
    id: UUID
    text: str
    description: Optional[str] = None
    is_completed: bool
    category: str
    priority: str
    deadline: Optional[int] = None
    created_at: datetime
    is_overdue: bool = False

    @staticmethod
    def resolve_is_overdue(obj) -> bool:
        return obj.is_overdue()


class TodoStatsOut(Schema):
    total: int
    completed: int
    overdue: int
