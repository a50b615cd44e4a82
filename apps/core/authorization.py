"""
Authorization gate shared by every store.

Every mutation on an existing resource follows the same rule:
resolve identity -> load resource -> verify existence -> verify ownership.
`get_owned_or_raise` is that rule, parameterized by model class, so the
category and todo services never re-implement it.
"""
import logging
from typing import Optional, Type, TypeVar
from uuid import UUID

from django.db import models, transaction

from .exceptions import Forbidden, NotFound, Unauthenticated

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=models.Model)


def require_user(user_id: Optional[UUID]) -> UUID:
    """Return the caller's id, or raise Unauthenticated for anonymous writes."""
    if not user_id:
        raise Unauthenticated()
    return user_id


def get_owned_or_raise(
    model: Type[ModelT],
    resource_id: UUID,
    user_id: Optional[UUID],
    label: Optional[str] = None,
) -> ModelT:
    """
    Load `model` by primary key and verify the caller owns it.

    The model must carry a `user_id` owner column. Inside an atomic block
    the row is locked until the surrounding transaction ends.

    Raises:
        Unauthenticated: no caller
        NotFound: no row with that id
        Forbidden: row owned by someone else
    """
    user_id = require_user(user_id)
    label = label or model._meta.verbose_name.title()

    queryset = model.objects.all()
    if transaction.get_connection().in_atomic_block:
        queryset = queryset.select_for_update()

    try:
        instance = queryset.get(pk=resource_id)
    except model.DoesNotExist:
        raise NotFound(f"{label} not found")

    if instance.user_id != user_id:
        logger.warning(
            f"User {user_id} denied access to {label} {resource_id} owned by {instance.user_id}"
        )
        raise Forbidden(f"Not authorized to modify this {label.lower()}")

    return instance
