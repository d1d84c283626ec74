"""Price-list service.

Exactly one price-list entry is active at a time. Activation always
deactivates every other entry in the same transaction.
"""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from photo_studio.adapters.s3_object_store import ObjectStore
from photo_studio.domain.price_lists import (
    CreatedPriceList,
    PriceListRecord,
    PriceListWithUrl,
)
from photo_studio.domain.storage import price_list_key
from photo_studio.errors import BadRequestError, NotFoundError, UnprocessableEntityError
from photo_studio.ids import generate_id
from photo_studio.services.coordinator import (
    CatalogTransaction,
    DeletionCoordinator,
    StorageCleaner,
)

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class PriceListTransaction(CatalogTransaction[PriceListRecord], Protocol):
    """Price-list row access inside one transaction."""

    def deactivate_all(self, updated_at: datetime) -> None:
        """Mark every entry inactive."""

    def insert(  # noqa: PLR0913
        self,
        price_list_id: str,
        storage_key: str,
        original_name: str,
        file_size: int | None,
        is_active: bool,
        created_at: datetime,
    ) -> PriceListRecord:
        """Insert an entry and return it."""

    def activate(self, price_list_id: str, updated_at: datetime) -> PriceListRecord | None:
        """Mark one entry active and return it, if present."""


class PriceListRepository(Protocol):
    """Persistence interface for price-list entries."""

    def transaction(self) -> AbstractContextManager[PriceListTransaction]:
        """Open a transaction that commits on exit and rolls back on error."""

    def list_all(self) -> list[PriceListRecord]:
        """Return every entry, newest first."""

    def get_active(self) -> PriceListRecord | None:
        """Return the active entry, if any."""


@dataclass
class PriceListService:
    """Service for the downloadable price-list PDF."""

    repository: PriceListRepository
    object_store: ObjectStore
    cleaner: StorageCleaner
    presign_expires_in: int = 3600
    _deleter: DeletionCoordinator[PriceListRecord] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._deleter = DeletionCoordinator(
            repository=self.repository,
            cleaner=self.cleaner,
            label="PriceList",
            plural_label="PriceLists",
            keys_for=lambda row: [row.storage_key],
            row_id=lambda row: row.id,
            guard=_reject_active,
        )

    def create_and_activate(
        self, name: str, content_type: str, file_size: int | None = None
    ) -> CreatedPriceList:
        """Create a new active entry and return an upload URL for its PDF."""
        if not name or not name.strip():
            raise BadRequestError("File name is required")
        if content_type != PDF_CONTENT_TYPE:
            raise BadRequestError("Only PDF files are allowed")

        price_list_id = generate_id()
        storage_key = price_list_key(price_list_id)
        upload_url = self.object_store.presign_put(
            storage_key, content_type, self.presign_expires_in
        )

        now = datetime.now(tz=UTC)
        with self.repository.transaction() as tx:
            tx.deactivate_all(updated_at=now)
            created = tx.insert(
                price_list_id=price_list_id,
                storage_key=storage_key,
                original_name=name,
                file_size=file_size,
                is_active=True,
                created_at=now,
            )
        logger.info("Activated new price list", extra={"price_list_id": created.id})
        return CreatedPriceList(record=created, upload_url=upload_url)

    def set_active(self, price_list_id: str) -> PriceListRecord:
        """Make an existing entry the only active one."""
        if not price_list_id or not price_list_id.strip():
            raise BadRequestError("ID required")
        now = datetime.now(tz=UTC)
        with self.repository.transaction() as tx:
            if not tx.find_by_ids([price_list_id], for_update=True):
                raise NotFoundError("PriceList")
            tx.deactivate_all(updated_at=now)
            activated = tx.activate(price_list_id, updated_at=now)
            if activated is None:
                raise NotFoundError("PriceList")
        return activated

    def get_history(self) -> list[PriceListWithUrl]:
        """Return every entry with a download URL, newest first."""
        return [self._with_url(row) for row in self.repository.list_all()]

    def get_current(self) -> PriceListWithUrl:
        """Return the active entry with a download URL."""
        current = self.repository.get_active()
        if current is None:
            raise NotFoundError("Active PriceList")
        return self._with_url(current)

    async def delete_one(self, price_list_id: str) -> PriceListRecord:
        """Delete one inactive entry and its PDF."""
        return await self._deleter.delete_one(price_list_id)

    async def delete_many(self, ids: list[str]) -> list[PriceListRecord]:
        """Delete inactive entries and their PDFs."""
        return await self._deleter.delete_many(ids)

    def _with_url(self, row: PriceListRecord) -> PriceListWithUrl:
        return PriceListWithUrl(
            record=row,
            file_url=self.object_store.presign_get(
                row.storage_key, self.presign_expires_in
            ),
        )


def _reject_active(rows: list[PriceListRecord]) -> None:
    if any(row.is_active for row in rows):
        raise UnprocessableEntityError("Cannot delete the currently active PriceList")
