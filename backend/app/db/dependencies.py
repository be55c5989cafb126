"""FastAPI dependencies for process-wide collaborators."""

from fastapi import Depends, Request

from app.auth import Authenticator
from app.config import Settings
from app.services.errors import AuthenticationRequiredError
from app.services.mapping_store import MappingStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mapping_store(request: Request) -> MappingStore:
    return request.app.state.mapping_store


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_optional_user_id(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
) -> str | None:
    """Resolved identity, or ``None`` for anonymous callers."""

    return authenticator.authenticate(request)


def get_current_user_id(user_id: str | None = Depends(get_optional_user_id)) -> str:
    """Resolved identity; anonymous callers are rejected before the body is used."""

    if user_id is None:
        raise AuthenticationRequiredError()
    return user_id
