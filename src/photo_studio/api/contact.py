"""Contact-form endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from photo_studio.api.auth import limit_contact_requests, require_contact_key
from photo_studio.api.schemas import ContactRequest
from photo_studio.domain.contact import ContactMessage

if TYPE_CHECKING:
    from photo_studio.containers import AppContainer

router = APIRouter(prefix="/email", tags=["email"])


@router.post(
    "",
    dependencies=[Depends(limit_contact_requests), Depends(require_contact_key)],
)
async def send_contact_email(
    body: ContactRequest, request: Request
) -> dict[str, object]:
    """Forward a contact-form message to the studio."""
    container: AppContainer = request.app.state.container
    return await container.contact_service.send(
        ContactMessage(
            first_name=body.first_name,
            email=body.email,
            phone_number=body.phone_number,
            category=body.category,
            message=body.message,
        )
    )
