"""
Categories API endpoints.

Listing is open to anonymous callers (returns []); writes require a JWT.
Domain errors (401/403/404/409) are rendered by the handler in config.urls.
"""
from typing import List
from uuid import UUID

from django.http import HttpRequest
from ninja import Router

from apps.identity.api import get_current_user_id
from .dtos import CategoryIn, CategoryOut
from . import services

router = Router(tags=["Categories"])


@router.get("", response=List[CategoryOut], auth=None)
def list_categories_api(request: HttpRequest):
    """List the caller's categories."""
    return services.list_categories(get_current_user_id(request))


@router.post("", response={201: CategoryOut}, auth=None)
def add_category_api(request: HttpRequest, payload: CategoryIn):
    """
    Create a category.

    Returns 409 if the caller already has a category with this name.
    """
    category = services.add_category(get_current_user_id(request), payload.name, payload.color)
    return 201, category


@router.post("/defaults", response=List[CategoryOut], auth=None)
def seed_default_categories_api(request: HttpRequest):
    """Add the default categories the caller doesn't have yet."""
    return services.seed_default_categories(get_current_user_id(request))


@router.delete("/{category_id}", response={204: None}, auth=None)
def remove_category_api(request: HttpRequest, category_id: UUID):
    """
    Delete a category.

    Returns 409 while any of the caller's todos still use it.
    """
    services.remove_category(get_current_user_id(request), category_id)
    return 204, None
