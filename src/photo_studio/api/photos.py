"""Photo catalog endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, status

from photo_studio.api.auth import require_admin
from photo_studio.api.schemas import (
    AdminPhotosOut,
    BatchPublishOut,
    BatchPublishRequest,
    CreatePhotosRequest,
    IdsRequest,
    PhotoOut,
    PhotoPageOut,
    PhotoUpdate,
    PublicPhotoOut,
    UploadTicketOut,
    UploadUrlsRequest,
)
from photo_studio.domain.photos import PhotoCategory
from photo_studio.errors import BadRequestError
from photo_studio.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    get_next_page,
    get_total_pages,
)

if TYPE_CHECKING:
    from photo_studio.containers import AppContainer
    from photo_studio.services.photos import PhotoService

router = APIRouter(prefix="/photos", tags=["photos"])


def _service(request: Request) -> PhotoService:
    container: AppContainer = request.app.state.container
    return container.photo_service


@router.get(
    "/admin", response_model=AdminPhotosOut, dependencies=[Depends(require_admin)]
)
async def list_photos_admin(
    request: Request,
    category: str | None = None,
    published: bool | None = None,
    has_prize: bool | None = Query(default=None, alias="hasPrize"),
) -> AdminPhotosOut:
    """Return every photo, including unpublished and processing ones."""
    photos = _service(request).find_many_admin(
        parse_category(category), published, has_prize
    )
    return AdminPhotosOut(photos=[PublicPhotoOut.from_domain(p) for p in photos])


@router.post(
    "/upload-urls",
    response_model=list[UploadTicketOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_upload_urls(
    body: UploadUrlsRequest, request: Request
) -> list[UploadTicketOut]:
    """Reserve photo ids and return presigned upload URLs."""
    tickets = _service(request).get_batch_upload_urls(
        [file.to_domain() for file in body.files]
    )
    return [UploadTicketOut.from_domain(ticket) for ticket in tickets]


@router.patch(
    "/batch-publish",
    response_model=BatchPublishOut,
    dependencies=[Depends(require_admin)],
)
async def batch_publish(body: BatchPublishRequest, request: Request) -> BatchPublishOut:
    """Publish or unpublish several photos at once."""
    result = _service(request).batch_publish(body.ids, body.published)
    return BatchPublishOut(
        success=result.success,
        count=result.count,
        photos=[PhotoOut.from_record(photo) for photo in result.photos],
    )


@router.get("", response_model=PhotoPageOut)
async def list_photos(
    request: Request,
    category: str | None = None,
    has_prize: bool | None = Query(default=None, alias="hasPrize"),
    page_size: int = Query(
        default=DEFAULT_PAGE_SIZE,
        ge=MIN_PAGE_SIZE,
        le=MAX_PAGE_SIZE,
        alias="pageSize",
    ),
    page: int = Query(default=0, ge=0),
) -> PhotoPageOut:
    """Return a page of published photos."""
    parsed_category = parse_category(category)
    if has_prize and parsed_category is not None:
        raise BadRequestError(
            "Validation failed",
            meta=[
                {
                    "path": "category",
                    "message": "Cannot select a category when hasPrize is true",
                }
            ],
        )
    result = _service(request).find_many(parsed_category, has_prize, page_size, page)
    total_pages = get_total_pages(result.total, page_size)
    return PhotoPageOut(
        total_count=result.total,
        pages=total_pages,
        next_page=get_next_page(page, total_pages),
        data=[PublicPhotoOut.from_domain(photo) for photo in result.photos],
    )


@router.get("/{photo_id}", response_model=PublicPhotoOut)
async def get_photo(photo_id: str, request: Request) -> PublicPhotoOut:
    """Return one published photo."""
    return PublicPhotoOut.from_domain(_service(request).find_one(photo_id))


@router.post(
    "",
    response_model=list[PhotoOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_photos(body: CreatePhotosRequest, request: Request) -> list[PhotoOut]:
    """Insert or update photo metadata."""
    created = _service(request).create_photos([photo.to_domain() for photo in body.photos])
    return [PhotoOut.from_record(photo) for photo in created]


@router.patch(
    "/{photo_id}", response_model=PhotoOut, dependencies=[Depends(require_admin)]
)
async def update_photo(photo_id: str, body: PhotoUpdate, request: Request) -> PhotoOut:
    """Update the metadata fields present in the body."""
    updated = _service(request).update_photo(
        photo_id, body.model_dump(exclude_unset=True)
    )
    return PhotoOut.from_record(updated)


@router.delete(
    "/{photo_id}", response_model=PhotoOut, dependencies=[Depends(require_admin)]
)
async def delete_photo(photo_id: str, request: Request) -> PhotoOut:
    """Delete one photo and its stored files."""
    return PhotoOut.from_record(await _service(request).delete_one(photo_id))


@router.delete(
    "", response_model=list[PhotoOut], dependencies=[Depends(require_admin)]
)
async def delete_photos(body: IdsRequest, request: Request) -> list[PhotoOut]:
    """Delete photos and their stored files."""
    deleted = await _service(request).delete_many(body.ids)
    return [PhotoOut.from_record(photo) for photo in deleted]


def parse_category(raw: str | None) -> PhotoCategory | None:
    """Case-normalize a category name (``barn`` -> ``Barn``)."""
    if raw is None or not raw.strip():
        return None
    normalized = raw.strip().capitalize()
    try:
        return PhotoCategory(normalized)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in PhotoCategory)
        raise BadRequestError(
            "Validation failed",
            meta=[{"path": "category", "message": f"Expected one of: {allowed}"}],
        ) from exc
