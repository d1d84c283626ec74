"""Deletion coordination between the catalog and object storage.

The catalog is the store of record. Rows are removed inside one database
transaction; the objects they point at are removed afterwards, one attempt
per key, and every key that could not be removed is reported back in a
single ``StorageCleanupError``. A failed cleanup never resurrects a row.
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from photo_studio.adapters.s3_object_store import ObjectStore
from photo_studio.errors import (
    BadRequestError,
    NotFoundError,
    StorageCleanupError,
    UnprocessableEntityError,
)

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")
RowT_co = TypeVar("RowT_co", covariant=True)


class CatalogTransaction(Protocol[RowT_co]):
    """Row access available inside one catalog transaction."""

    def find_by_ids(
        self, ids: list[str], for_update: bool = False
    ) -> list[RowT_co]:
        """Return the existing rows among ``ids``, optionally row-locked."""

    def delete_by_ids(self, ids: list[str]) -> list[RowT_co]:
        """Delete rows by id and return what was deleted."""


class TransactionalRepository(Protocol[RowT_co]):
    """Repository that can open a catalog transaction."""

    def transaction(self) -> AbstractContextManager[CatalogTransaction[RowT_co]]:
        """Open a transaction that commits on exit and rolls back on error."""


def ensure_unique_ids(ids: list[str], noun: str) -> list[str]:
    """Reject empty or duplicate id batches before any store access."""
    if not ids:
        raise BadRequestError(f"At least one {noun} ID is required")
    if len(set(ids)) != len(ids):
        raise UnprocessableEntityError(f"Duplicate {noun} IDs are not allowed")
    return list(ids)


@dataclass(frozen=True)
class CleanupReport:
    """Outcome of a storage cleanup pass."""

    attempted: list[str]
    failed: list[str]

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class StorageCleaner:
    """Best-effort removal of storage objects, one independent attempt per key."""

    object_store: ObjectStore
    timeout: float | None = None

    async def purge(self, keys: list[str]) -> CleanupReport:
        """Delete all keys concurrently and report which ones failed."""
        unique_keys = list(dict.fromkeys(keys))
        results = await asyncio.gather(*(self._delete(key) for key in unique_keys))
        failed = [
            key for key, deleted in zip(unique_keys, results, strict=True) if not deleted
        ]
        return CleanupReport(attempted=unique_keys, failed=failed)

    async def _delete(self, key: str) -> bool:
        try:
            await asyncio.wait_for(self.object_store.delete(key), timeout=self.timeout)
        except TimeoutError:
            logger.warning("Storage delete timed out", extra={"storage_key": key})
            return False
        except Exception:
            logger.exception("Storage delete failed", extra={"storage_key": key})
            return False
        return True


@dataclass
class DeletionCoordinator(Generic[RowT]):
    """Runs the delete-then-cleanup protocol for one resource type."""

    repository: TransactionalRepository[RowT]
    cleaner: StorageCleaner
    label: str
    plural_label: str
    keys_for: Callable[[RowT], list[str]]
    row_id: Callable[[RowT], str]
    guard: Callable[[list[RowT]], None] | None = None

    async def delete_many(self, ids: list[str]) -> list[RowT]:
        """Delete every existing row among ``ids`` and clean up their objects.

        Ids that do not exist are skipped as long as at least one matches.
        """
        unique_ids = ensure_unique_ids(ids, self.label.lower())
        with self.repository.transaction() as tx:
            rows = tx.find_by_ids(unique_ids, for_update=True)
            if not rows:
                raise NotFoundError(self.plural_label)
            if self.guard is not None:
                self.guard(rows)
            keys = [key for row in rows for key in self.keys_for(row)]
            deleted = tx.delete_by_ids([self.row_id(row) for row in rows])

        missing = set(unique_ids) - {self.row_id(row) for row in rows}
        if missing:
            logger.warning(
                "Skipped ids that do not exist",
                extra={"resource": self.plural_label, "ids": sorted(missing)},
            )

        report = await self.cleaner.purge(keys)
        if not report.ok:
            raise StorageCleanupError(
                f"{self.plural_label} were removed from the database but some "
                "storage files could not be deleted.",
                report.failed,
            )
        logger.info(
            "Deleted rows",
            extra={"resource": self.plural_label, "count": len(deleted)},
        )
        return deleted

    async def delete_one(self, row_id: str) -> RowT:
        """Delete a single row, reading its storage key inside the transaction."""
        if not row_id or not row_id.strip():
            raise BadRequestError(f"{self.label} ID is required")
        with self.repository.transaction() as tx:
            rows = tx.find_by_ids([row_id], for_update=True)
            if not rows:
                raise NotFoundError(self.label)
            if self.guard is not None:
                self.guard(rows)
            keys = self.keys_for(rows[0])
            deleted = tx.delete_by_ids([row_id])
            if not deleted:
                raise NotFoundError(self.label)

        report = await self.cleaner.purge(keys)
        if not report.ok:
            raise StorageCleanupError(
                f"{self.label} was removed from the database but storage cleanup "
                "failed. You may need to remove the file manually.",
                report.failed,
            )
        return deleted[0]
