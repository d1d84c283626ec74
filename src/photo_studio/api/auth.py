"""Request gates for protected and rate-limited endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from photo_studio.errors import (
    ForbiddenError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from photo_studio.containers import AppContainer


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )


async def require_contact_key(
    request: Request, authorization: str | None = Header(default=None)
) -> None:
    """Ensure contact-form requests carry the configured bearer key."""
    container: AppContainer = request.app.state.container
    api_key = (container.settings.contact_api_key or "").strip()
    if not api_key:
        raise ServiceUnavailableError("Email API is not configured on this server")
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing or invalid Authorization header")
    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise UnauthorizedError("Missing bearer token")
    if token != api_key:
        raise ForbiddenError("Invalid API key")


def client_key(request: Request) -> str:
    """Identify the caller for rate limiting."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.headers.get("x-real-ip") or "unknown"


async def limit_contact_requests(request: Request) -> None:
    """Reject callers that exceed the contact-form rate limit."""
    container: AppContainer = request.app.state.container
    if not container.contact_rate_limiter.hit(client_key(request)):
        raise TooManyRequestsError()
