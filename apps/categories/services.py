"""
Category store.

Every function takes the caller's `user_id` explicitly (None means the
request is unauthenticated). Listing degrades to an empty result for
anonymous callers; writes raise Unauthenticated.
"""
import logging
from typing import List, Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.core.authorization import get_owned_or_raise, require_user
from apps.core.exceptions import DuplicateName, InUse
from apps.todos.services import category_in_use
from .defaults import DEFAULT_CATEGORIES
from .dtos import CategoryDTO
from .models import Category

logger = logging.getLogger(__name__)


def _to_dto(category: Category) -> CategoryDTO:
    return CategoryDTO(
        id=category.id,
        user_id=category.user_id,
        name=category.name,
        color=category.color,
        created_at=category.created_at,
    )


def list_categories(user_id: Optional[UUID]) -> List[CategoryDTO]:
    """All categories owned by the caller; empty when unauthenticated."""
    if not user_id:
        return []
    return [_to_dto(c) for c in Category.objects.filter(user_id=user_id)]


def add_category(user_id: Optional[UUID], name: str, color: str) -> CategoryDTO:
    """
    Create a category for the caller.

    Names are unique per user (exact, case-sensitive match).

    Raises:
        Unauthenticated: no caller
        DuplicateName: caller already has a category with this name
    """
    user_id = require_user(user_id)

    if Category.objects.filter(user_id=user_id, name=name).exists():
        logger.warning(f"User {user_id} tried to add duplicate category '{name}'")
        raise DuplicateName("Category already exists")

    try:
        with transaction.atomic():
            category = Category.objects.create(user_id=user_id, name=name, color=color)
    except IntegrityError:
        # Unique constraint caught a concurrent insert of the same name
        raise DuplicateName("Category already exists")

    logger.info(f"User {user_id} created category {category.id} ('{name}')")
    return _to_dto(category)


def remove_category(user_id: Optional[UUID], category_id: UUID) -> None:
    """
    Delete one of the caller's categories.

    Deletion is blocked (never cascaded) while any of the caller's todos
    still carries this category's name.

    Raises:
        Unauthenticated, NotFound, Forbidden: see apps.core.authorization
        InUse: todos still reference the category
    """
    with transaction.atomic():
        category = get_owned_or_raise(Category, category_id, user_id)

        if category_in_use(category.user_id, category.name):
            logger.warning(
                f"User {user_id} tried to delete category '{category.name}' still used by todos"
            )
            raise InUse("Cannot delete category that has todos. Move or delete todos first.")

        category.delete()

    logger.info(f"User {user_id} deleted category {category_id}")


def seed_default_categories(user_id: Optional[UUID]) -> List[CategoryDTO]:
    """
    Add the default category set for the caller, skipping names they
    already have. Returns only the categories that were created.
    """
    user_id = require_user(user_id)

    existing = set(Category.objects.filter(user_id=user_id).values_list('name', flat=True))
    created = []

    for default in DEFAULT_CATEGORIES:
        if default['name'] in existing:
            continue
        created.append(add_category(user_id, default['name'], default['color']))

    if created:
        logger.info(f"Seeded {len(created)} default categories for user {user_id}")
    return created
