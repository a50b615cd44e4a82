"""
Todo store.

Every function takes the caller's `user_id` explicitly (None means the
request is unauthenticated). Listing degrades to an empty result for
anonymous callers; writes raise Unauthenticated and run the shared
ownership check before touching an existing todo.
"""
import logging
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Case, QuerySet, Value, When

from apps.core.authorization import get_owned_or_raise, require_user
from .dtos import TodoDTO, TodoFilters, TodoIn, TodoStatsDTO, current_millis
from .models import Todo
from .search import search_todos

logger = logging.getLogger(__name__)

# Fields a partial update may write. Completion is toggle-only.
UPDATABLE_FIELDS = ('text', 'description', 'category', 'priority', 'deadline')


def _to_dto(todo: Todo) -> TodoDTO:
    return TodoDTO(
        id=todo.id,
        user_id=todo.user_id,
        text=todo.text,
        description=todo.description,
        is_completed=todo.is_completed,
        category=todo.category,
        priority=todo.priority,
        deadline=todo.deadline,
        created_at=todo.created_at,
    )


def category_in_use(user_id: UUID, category_name: str) -> bool:
    """
    True if any of the user's todos carries `category_name`.
    Used by the category store to block deletes.
    """
    return Todo.objects.filter(user_id=user_id, category=category_name).exists()


# =============================================================================
# Queries
# =============================================================================

def _primary_lookup(user_id: UUID, filters: TodoFilters) -> QuerySet:
    """Scoped lookup driven by exactly one narrowing dimension, newest first."""
    queryset = Todo.objects.filter(user_id=user_id)
    dimension = filters.narrowing_dimension()

    if dimension == 'category':
        queryset = queryset.filter(category=filters.category)
    elif dimension == 'priority':
        queryset = queryset.filter(priority=filters.priority)
    elif dimension == 'completed':
        queryset = queryset.filter(is_completed=filters.completed)

    return queryset.order_by('-created_at')


def _search(user_id: UUID, filters: TodoFilters) -> List[Todo]:
    # Category and completion narrow the search itself; priority can't,
    # so it is applied to the ranked results.
    queryset = Todo.objects.filter(user_id=user_id)
    if filters.category:
        queryset = queryset.filter(category=filters.category)
    if filters.completed is not None:
        queryset = queryset.filter(is_completed=filters.completed)

    results = search_todos(queryset, filters.search_text)

    if filters.priority:
        results = [todo for todo in results if todo.priority == filters.priority]
    return results


def list_todos(user_id: Optional[UUID], filters: Optional[TodoFilters] = None) -> List[TodoDTO]:
    """
    List the caller's todos.

    With a non-blank search: relevance-ordered text search.
    Otherwise: one-dimension primary lookup, then every requested filter
    as a post-filter, newest first.
    Anonymous callers get an empty list.
    """
    if not user_id:
        return []

    filters = filters or TodoFilters()

    if filters.search_text:
        return [_to_dto(todo) for todo in _search(user_id, filters)]

    return [
        _to_dto(todo)
        for todo in _primary_lookup(user_id, filters)
        if filters.matches(todo)
    ]


def summarize_todos(todos: Iterable[TodoDTO], now_ms: Optional[int] = None) -> TodoStatsDTO:
    """Total, completed and overdue counts for a listing."""
    if now_ms is None:
        now_ms = current_millis()

    total = completed = overdue = 0
    for todo in todos:
        total += 1
        if todo.is_completed:
            completed += 1
        elif todo.is_overdue(now_ms):
            overdue += 1

    return TodoStatsDTO(total=total, completed=completed, overdue=overdue)


# =============================================================================
# Mutations
# =============================================================================

def add_todo(user_id: Optional[UUID], payload: TodoIn) -> TodoDTO:
    """Create a todo for the caller. New todos are always open."""
    user_id = require_user(user_id)

    todo = Todo.objects.create(
        user_id=user_id,
        text=payload.text,
        description=payload.description,
        is_completed=False,
        category=payload.category,
        priority=payload.priority,
        deadline=payload.deadline,
    )

    logger.info(f"User {user_id} created todo {todo.id}")
    return _to_dto(todo)


def update_todo(user_id: Optional[UUID], todo_id: UUID, changes: dict) -> TodoDTO:
    """
    Patch the fields present in `changes`; everything else is left as is.

    Keys outside UPDATABLE_FIELDS (including is_completed) are ignored.
    """
    updates = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}

    with transaction.atomic():
        todo = get_owned_or_raise(Todo, todo_id, user_id)
        if updates:
            # Column-level UPDATE so untouched fields are never rewritten
            Todo.objects.filter(pk=todo.pk).update(**updates)
            todo.refresh_from_db()

    logger.info(f"User {user_id} updated todo {todo_id}: {sorted(updates)}")
    return _to_dto(todo)


def toggle_todo(user_id: Optional[UUID], todo_id: UUID) -> TodoDTO:
    """Flip completion. No other field changes."""
    with transaction.atomic():
        todo = get_owned_or_raise(Todo, todo_id, user_id)
        # Flip in SQL from the stored value; the row lock is a no-op on SQLite
        Todo.objects.filter(pk=todo.pk).update(
            is_completed=Case(When(is_completed=True, then=Value(False)), default=Value(True))
        )
        todo.refresh_from_db()

    logger.info(f"User {user_id} toggled todo {todo_id} to completed={todo.is_completed}")
    return _to_dto(todo)


def remove_todo(user_id: Optional[UUID], todo_id: UUID) -> None:
    with transaction.atomic():
        todo = get_owned_or_raise(Todo, todo_id, user_id)
        todo.delete()

    logger.info(f"User {user_id} deleted todo {todo_id}")
