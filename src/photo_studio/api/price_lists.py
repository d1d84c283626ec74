"""Price-list endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from photo_studio.api.auth import require_admin
from photo_studio.api.schemas import (
    CreatedPriceListOut,
    IdsRequest,
    PriceListCreate,
    PriceListOut,
    PriceListWithUrlOut,
)

if TYPE_CHECKING:
    from photo_studio.containers import AppContainer
    from photo_studio.services.price_lists import PriceListService

router = APIRouter(prefix="/pricelist", tags=["pricelist"])


def _service(request: Request) -> PriceListService:
    container: AppContainer = request.app.state.container
    return container.price_list_service


@router.get("", response_model=PriceListWithUrlOut)
async def get_current_price_list(request: Request) -> PriceListWithUrlOut:
    """Return the active price list with a download URL."""
    return PriceListWithUrlOut.from_domain(_service(request).get_current())


@router.get(
    "/history",
    response_model=list[PriceListWithUrlOut],
    dependencies=[Depends(require_admin)],
)
async def price_list_history(request: Request) -> list[PriceListWithUrlOut]:
    """Return every price list, newest first."""
    return [
        PriceListWithUrlOut.from_domain(item) for item in _service(request).get_history()
    ]


@router.post(
    "", response_model=CreatedPriceListOut, dependencies=[Depends(require_admin)]
)
async def create_price_list(
    body: PriceListCreate, request: Request
) -> CreatedPriceListOut:
    """Create and activate a price list; the client uploads the PDF afterwards."""
    created = _service(request).create_and_activate(
        body.name, body.content_type, body.file_size
    )
    return CreatedPriceListOut.from_domain(created)


@router.patch(
    "/{price_list_id}/active",
    response_model=PriceListOut,
    dependencies=[Depends(require_admin)],
)
async def activate_price_list(price_list_id: str, request: Request) -> PriceListOut:
    """Make an existing price list the active one."""
    return PriceListOut.from_record(_service(request).set_active(price_list_id))


@router.delete(
    "/{price_list_id}",
    response_model=PriceListOut,
    dependencies=[Depends(require_admin)],
)
async def delete_price_list(price_list_id: str, request: Request) -> PriceListOut:
    """Delete an inactive price list and its PDF."""
    return PriceListOut.from_record(await _service(request).delete_one(price_list_id))


@router.delete(
    "", response_model=list[PriceListOut], dependencies=[Depends(require_admin)]
)
async def delete_price_lists(body: IdsRequest, request: Request) -> list[PriceListOut]:
    """Delete inactive price lists and their PDFs."""
    deleted = await _service(request).delete_many(body.ids)
    return [PriceListOut.from_record(row) for row in deleted]
