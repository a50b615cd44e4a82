"""
Identity API endpoints with JWT authentication.

Provides registration, login, logout, token refresh and the current-user
endpoint. Tokens travel in httpOnly cookies; API clients may instead send
`Authorization: Bearer <access token>`.
"""
import os
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.contrib.auth import authenticate
from django.http import HttpRequest, HttpResponse
from ninja import Router
from ninja.errors import HttpError

from .models import User
from .dtos import UserDTO, UserCreate, LoginSchema, TokenResponse
from .services import create_user, get_active_user, get_user_dto
from .jwt_auth import (
    create_access_token,
    create_token_pair,
    get_access_token_cookie_settings,
    get_refresh_token_cookie_settings,
    get_user_id_from_token,
)

router = Router(tags=["Identity"])


# =============================================================================
# Helper Functions
# =============================================================================

def _get_access_token(request: HttpRequest) -> Optional[str]:
    token = request.COOKIES.get('access_token')
    if token:
        return token

    header = request.headers.get('Authorization', '')
    scheme, _, value = header.partition(' ')
    if scheme.lower() == 'bearer' and value.strip():
        return value.strip()
    return None


def get_current_user(request: HttpRequest) -> Optional[User]:
    """
    Extract and validate user from the JWT access token.

    Returns User object if valid token, None otherwise.
    """
    access_token = _get_access_token(request)
    if not access_token:
        return None

    user_id = get_user_id_from_token(access_token)
    if not user_id:
        return None

    return get_active_user(user_id)


def get_current_user_id(request: HttpRequest) -> Optional[UUID]:
    """Resolve the caller to a user id, or None when unauthenticated."""
    user = get_current_user(request)
    return user.id if user else None


def require_auth(request: HttpRequest) -> User:
    """
    Require authentication. Raises 401 if not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HttpError(401, "Authentication required")
    return user


def is_production() -> bool:
    """Check if running in production (Lambda or DEBUG=False)."""
    return bool(os.getenv('AWS_LAMBDA_FUNCTION_NAME')) or not settings.DEBUG


def _token_response(user_id: UUID, status: int = 200) -> HttpResponse:
    """Build a JSON response carrying the user and a fresh token pair."""
    access_token, refresh_token = create_token_pair(user_id)

    response = HttpResponse(
        TokenResponse(success=True, user=get_user_dto(user_id)).model_dump_json(),
        content_type='application/json',
        status=status,
    )

    prod = is_production()
    response.set_cookie('access_token', access_token, **get_access_token_cookie_settings(prod))
    response.set_cookie('refresh_token', refresh_token, **get_refresh_token_cookie_settings(prod))
    return response


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response={201: TokenResponse}, auth=None)
def register_user(request: HttpRequest, payload: UserCreate):
    """
    Create an account and sign it in.

    Returns 409 if the username is taken.
    """
    user = create_user(payload)
    return _token_response(user.id, status=201)


@router.post("/login", response=TokenResponse, auth=None)
def login_user(request: HttpRequest, payload: LoginSchema):
    """
    Authenticate user and set JWT tokens in httpOnly cookies.
    """
    user = authenticate(request, username=payload.username, password=payload.password)

    if user is None:
        raise HttpError(401, "Invalid username or password")

    if not user.is_active:
        raise HttpError(401, "Account is disabled")

    return _token_response(user.id)


@router.post("/logout", response=TokenResponse, auth=None)
def logout_user(request: HttpRequest):
    """
    Clear authentication cookies.
    """
    response = HttpResponse(
        TokenResponse(success=True, message="Logged out").model_dump_json(),
        content_type='application/json'
    )
    response.delete_cookie('access_token', path='/')
    response.delete_cookie('refresh_token', path='/')
    return response


@router.post("/refresh", response=TokenResponse, auth=None)
def refresh_token(request: HttpRequest):
    """
    Refresh the access token using the refresh token cookie.
    """
    refresh_token_value = request.COOKIES.get('refresh_token')
    if not refresh_token_value:
        raise HttpError(401, "No refresh token")

    user_id = get_user_id_from_token(refresh_token_value, token_type='refresh')
    user = get_active_user(user_id) if user_id else None
    if not user:
        raise HttpError(401, "Invalid refresh token")

    response = HttpResponse(
        TokenResponse(success=True, user=get_user_dto(user.id)).model_dump_json(),
        content_type='application/json'
    )
    response.set_cookie(
        'access_token',
        create_access_token(user.id),
        **get_access_token_cookie_settings(is_production()),
    )
    return response


@router.get("/me", response=UserDTO, auth=None)
def get_me(request: HttpRequest):
    """
    Get current authenticated user's profile.
    """
    user = require_auth(request)
    return get_user_dto(user.id)
