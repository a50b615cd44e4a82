"""
Todos API endpoints.

Listing and stats are open to anonymous callers (empty results); writes
require a JWT. Domain errors (401/403/404) are rendered by the handler in
config.urls.
"""
from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest
from ninja import Router

from apps.identity.api import get_current_user_id
from .dtos import PriorityLiteral, TodoFilters, TodoIn, TodoOut, TodoStatsOut, TodoUpdate
from . import services

router = Router(tags=["Todos"])


@router.get("", response=List[TodoOut], auth=None)
def list_todos_api(
    request: HttpRequest,
    category: Optional[str] = None,
    priority: Optional[PriorityLiteral] = None,
    completed: Optional[bool] = None,
    search: Optional[str] = None,
):
    """
    List the caller's todos.

    Query Parameters:
    - category: exact category name
    - priority: low | medium | high
    - completed: true | false
    - search: text search over the todo title (relevance ordered)

    Without search, results are newest first.
    """
    filters = TodoFilters(category=category, priority=priority, completed=completed, search=search)
    return services.list_todos(get_current_user_id(request), filters)


@router.get("/stats", response=TodoStatsOut, auth=None)
def todo_stats_api(
    request: HttpRequest,
    category: Optional[str] = None,
    priority: Optional[PriorityLiteral] = None,
    completed: Optional[bool] = None,
    search: Optional[str] = None,
):
    """Total / completed / overdue counts for the same filters as the list."""
    filters = TodoFilters(category=category, priority=priority, completed=completed, search=search)
    todos = services.list_todos(get_current_user_id(request), filters)
    return services.summarize_todos(todos)


@router.post("", response={201: TodoOut}, auth=None)
def add_todo_api(request: HttpRequest, payload: TodoIn):
    """Create a todo. It always starts not completed."""
    return 201, services.add_todo(get_current_user_id(request), payload)


@router.patch("/{todo_id}", response=TodoOut, auth=None)
def update_todo_api(request: HttpRequest, todo_id: UUID, payload: TodoUpdate):
    """Partially update a todo; omitted fields are unchanged."""
    return services.update_todo(
        get_current_user_id(request),
        todo_id,
        payload.dict(exclude_unset=True),
    )


@router.post("/{todo_id}/toggle", response=TodoOut, auth=None)
def toggle_todo_api(request: HttpRequest, todo_id: UUID):
    """Flip a todo between open and completed."""
    return services.toggle_todo(get_current_user_id(request), todo_id)


@router.delete("/{todo_id}", response={204: None}, auth=None)
def remove_todo_api(request: HttpRequest, todo_id: UUID):
    services.remove_todo(get_current_user_id(request), todo_id)
    return 204, None
