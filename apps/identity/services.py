"""Services for Identity app."""
import logging
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.core.exceptions import DuplicateName
from .models import User
from .dtos import UserDTO, UserCreate

logger = logging.getLogger(__name__)


def _to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        is_active=user.is_active,
        date_joined=user.date_joined,
    )


def get_user_dto(user_id: UUID) -> Optional[UserDTO]:
    try:
        return _to_dto(User.objects.get(id=user_id))
    except User.DoesNotExist:
        return None


def get_active_user(user_id: UUID) -> Optional[User]:
    try:
        return User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        return None


def create_user(payload: UserCreate) -> UserDTO:
    """Register a new account. Raises DuplicateName if the username is taken."""
    if User.objects.filter(username=payload.username).exists():
        raise DuplicateName("Username already taken")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=payload.username,
                email=payload.email,
                password=payload.password,
                first_name=payload.first_name,
                last_name=payload.last_name,
                is_active=True,
            )
    except IntegrityError:
        # Lost a race with a concurrent registration
        raise DuplicateName("Username already taken")

    logger.info(f"Registered user {user.id} ({user.username})")
    return _to_dto(user)
