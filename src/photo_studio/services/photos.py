"""Photo catalog service."""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from photo_studio.adapters.s3_object_store import ObjectStore
from photo_studio.config import normalize_url
from photo_studio.domain.photos import (
    BatchPublishResult,
    PhotoCategory,
    PhotoDraft,
    PhotoPage,
    PhotoRecord,
    PublicPhoto,
)
from photo_studio.domain.storage import (
    FileDescriptor,
    UploadTicket,
    photo_original_key,
    photo_rendition_key,
    photo_storage_keys,
)
from photo_studio.errors import BadRequestError, NotFoundError, UnprocessableEntityError
from photo_studio.ids import generate_id
from photo_studio.pagination import DEFAULT_PAGE_SIZE, get_page_offset
from photo_studio.services.coordinator import (
    CatalogTransaction,
    DeletionCoordinator,
    StorageCleaner,
    ensure_unique_ids,
)

logger = logging.getLogger(__name__)

PREVIEW_RENDITION = "preview.webp"
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "alt",
        "published",
        "category",
        "has_prize",
        "prize_title",
        "prize_medal",
    }
)


class PhotoTransaction(CatalogTransaction[PhotoRecord], Protocol):
    """Photo row access inside one transaction."""

    def set_published(
        self, ids: list[str], published: bool, updated_at: datetime
    ) -> list[PhotoRecord]:
        """Set the published flag on rows and return them."""

    def insert_placeholders(
        self, entries: list[tuple[str, str]], created_at: datetime
    ) -> None:
        """Insert unpublished, processing rows for (id, storage_key) pairs."""

    def upsert(self, drafts: list[PhotoDraft], updated_at: datetime) -> list[PhotoRecord]:
        """Insert new rows and overwrite metadata of existing ones."""

    def update(
        self, photo_id: str, changes: dict[str, object], updated_at: datetime
    ) -> PhotoRecord | None:
        """Apply column changes to one row, if present."""


class PhotoRepository(Protocol):
    """Persistence interface for photos."""

    def transaction(self) -> AbstractContextManager[PhotoTransaction]:
        """Open a transaction that commits on exit and rolls back on error."""

    def list_published(
        self,
        category: PhotoCategory | None,
        has_prize: bool | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PhotoRecord], int]:
        """Return a page of published, ready photos and the total count."""

    def list_all(
        self,
        category: PhotoCategory | None,
        published: bool | None,
        has_prize: bool | None,
    ) -> list[PhotoRecord]:
        """Return all photos matching the filters, newest first."""

    def get_published(self, photo_id: str) -> PhotoRecord | None:
        """Return a published, ready photo by id."""


@dataclass
class PhotoService:
    """Service for the photo catalog and its stored renditions."""

    repository: PhotoRepository
    object_store: ObjectStore
    cleaner: StorageCleaner
    cdn_domain: str
    presign_expires_in: int = 3600
    _deleter: DeletionCoordinator[PhotoRecord] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._deleter = DeletionCoordinator(
            repository=self.repository,
            cleaner=self.cleaner,
            label="Photo",
            plural_label="Photos",
            keys_for=_keys_for_photo,
            row_id=lambda row: row.id,
        )

    def get_batch_upload_urls(self, files: list[FileDescriptor]) -> list[UploadTicket]:
        """Reserve ids and placeholder rows for a batch of uploads."""
        if not files:
            raise BadRequestError(
                "At least one file is required to generate upload URLs"
            )
        tickets = []
        for file in files:
            photo_id = generate_id()
            storage_key = photo_original_key(photo_id)
            upload_url = self.object_store.presign_put(
                storage_key, file.content_type, self.presign_expires_in
            )
            tickets.append(
                UploadTicket(id=photo_id, storage_key=storage_key, upload_url=upload_url)
            )

        with self.repository.transaction() as tx:
            tx.insert_placeholders(
                [(ticket.id, ticket.storage_key) for ticket in tickets],
                created_at=datetime.now(tz=UTC),
            )
        return tickets

    def create_photos(self, drafts: list[PhotoDraft]) -> list[PhotoRecord]:
        """Insert or update photo metadata in one transaction."""
        if not drafts:
            raise UnprocessableEntityError("At least one photo record is required")
        with self.repository.transaction() as tx:
            return tx.upsert(drafts, updated_at=datetime.now(tz=UTC))

    def update_photo(self, photo_id: str, changes: dict[str, object]) -> PhotoRecord:
        """Update the supplied metadata fields of one photo."""
        if not photo_id or not photo_id.strip():
            raise BadRequestError("Photo ID is required")
        if not changes:
            raise BadRequestError(
                "Update data is required (e.g. title, published, category)"
            )
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise BadRequestError("Unknown photo fields", meta={"fields": unknown})
        if "has_prize" in changes and changes["has_prize"] is None:
            raise BadRequestError("hasPrize cannot be null")
        with self.repository.transaction() as tx:
            updated = tx.update(photo_id, changes, updated_at=datetime.now(tz=UTC))
            if updated is None:
                raise NotFoundError("Photo")
            return updated

    def find_many(
        self,
        category: PhotoCategory | None = None,
        has_prize: bool | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        page: int = 0,
    ) -> PhotoPage:
        """Return a page of photos visible to visitors."""
        rows, total = self.repository.list_published(
            category,
            has_prize,
            limit=page_size,
            offset=get_page_offset(page, page_size),
        )
        return PhotoPage(photos=[self._to_public(row) for row in rows], total=total)

    def find_many_admin(
        self,
        category: PhotoCategory | None = None,
        published: bool | None = None,
        has_prize: bool | None = None,
    ) -> list[PublicPhoto]:
        """Return every photo matching the filters, regardless of status."""
        rows = self.repository.list_all(category, published, has_prize)
        return [self._to_public(row) for row in rows]

    def find_one(self, photo_id: str) -> PublicPhoto:
        """Return a single published photo."""
        if not photo_id or not photo_id.strip():
            raise BadRequestError("Photo ID is required")
        row = self.repository.get_published(photo_id)
        if row is None:
            raise NotFoundError("Photo")
        return self._to_public(row)

    async def delete_one(self, photo_id: str) -> PhotoRecord:
        """Delete one photo and all of its stored files."""
        return await self._deleter.delete_one(photo_id)

    async def delete_many(self, ids: list[str]) -> list[PhotoRecord]:
        """Delete photos and all of their stored files."""
        return await self._deleter.delete_many(ids)

    def batch_publish(self, ids: list[str], published: bool | None) -> BatchPublishResult:
        """Publish or unpublish photos; every id must exist."""
        unique_ids = ensure_unique_ids(ids, "photo")
        if published is None:
            raise BadRequestError(
                "You need to choose if images should be published or unpublished"
            )
        with self.repository.transaction() as tx:
            existing = tx.find_by_ids(unique_ids, for_update=True)
            if len(existing) != len(unique_ids):
                raise NotFoundError(
                    message="One or more photos do not exist",
                    meta={
                        "missingIds": sorted(
                            set(unique_ids) - {row.id for row in existing}
                        )
                    },
                )
            updated = tx.set_published(
                unique_ids, published, updated_at=datetime.now(tz=UTC)
            )
        logger.info(
            "Changed photo visibility",
            extra={"count": len(updated), "published": published},
        )
        return BatchPublishResult(success=True, count=len(updated), photos=updated)

    def image_url(self, photo_id: str) -> str:
        """Return the public CDN URL of a photo's preview rendition."""
        base = normalize_url(self.cdn_domain).rstrip("/")
        return f"{base}/{photo_rendition_key(photo_id, PREVIEW_RENDITION)}"

    def _to_public(self, row: PhotoRecord) -> PublicPhoto:
        return PublicPhoto(
            id=row.id,
            title=row.title,
            alt=row.alt,
            published=row.published,
            category=row.category,
            has_prize=row.has_prize,
            prize_title=row.prize_title,
            prize_medal=row.prize_medal,
            created_at=row.created_at,
            updated_at=row.updated_at,
            image_url=self.image_url(row.id),
        )


def _keys_for_photo(row: PhotoRecord) -> list[str]:
    return list(dict.fromkeys([row.storage_key, *photo_storage_keys(row.id)]))
