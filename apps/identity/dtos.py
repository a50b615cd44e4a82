"""DTOs for Identity app."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ninja import Schema
from pydantic import Field


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    is_active: bool
    date_joined: datetime


class UserCreate(Schema):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=8)
    email: str = ""
    first_name: str = ""
    last_name: str = ""


class LoginSchema(Schema):
    username: str
    password: str


class TokenResponse(Schema):
    success: bool
    user: Optional[UserDTO] = None
    message: Optional[str] = None
