"""SQLAlchemy-backed price-list repository."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session, sessionmaker

from photo_studio.adapters.database import PriceListRow
from photo_studio.domain.price_lists import PriceListRecord
from photo_studio.services.price_lists import PriceListRepository, PriceListTransaction


@dataclass
class SqlAlchemyPriceListTransaction(PriceListTransaction):
    """Price-list row access bound to one open session transaction."""

    session: Session

    def find_by_ids(
        self, ids: list[str], for_update: bool = False
    ) -> list[PriceListRecord]:
        return [_to_record(row) for row in self._load(ids, for_update=for_update)]

    def delete_by_ids(self, ids: list[str]) -> list[PriceListRecord]:
        rows = self._load(ids, for_update=True)
        records = [_to_record(row) for row in rows]
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return records

    def deactivate_all(self, updated_at: datetime) -> None:
        self.session.execute(
            update(PriceListRow)
            .where(PriceListRow.is_active.is_(True))
            .values(is_active=False, updated_at=updated_at)
        )

    def insert(  # noqa: PLR0913
        self,
        price_list_id: str,
        storage_key: str,
        original_name: str,
        file_size: int | None,
        is_active: bool,
        created_at: datetime,
    ) -> PriceListRecord:
        row = PriceListRow(
            id=price_list_id,
            s3_key=storage_key,
            original_name=original_name,
            file_size=file_size,
            is_active=is_active,
            created_at=created_at,
            updated_at=created_at,
        )
        self.session.add(row)
        self.session.flush()
        return _to_record(row)

    def activate(self, price_list_id: str, updated_at: datetime) -> PriceListRecord | None:
        row = self.session.get(PriceListRow, price_list_id, with_for_update=True)
        if row is None:
            return None
        row.is_active = True
        row.updated_at = updated_at
        self.session.flush()
        return _to_record(row)

    def _load(self, ids: list[str], for_update: bool = False) -> list[PriceListRow]:
        statement = select(PriceListRow).where(PriceListRow.id.in_(ids))
        if for_update:
            statement = statement.with_for_update()
        rows = self.session.scalars(statement).all()
        order = {price_list_id: index for index, price_list_id in enumerate(ids)}
        return sorted(rows, key=lambda row: order[row.id])


@dataclass
class SqlAlchemyPriceListRepository(PriceListRepository):
    """SQLAlchemy implementation for price-list persistence."""

    session_factory: sessionmaker

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyPriceListTransaction]:
        """Open a transaction that commits on exit and rolls back on error."""
        with self.session_factory.begin() as session:
            yield SqlAlchemyPriceListTransaction(session)

    def list_all(self) -> list[PriceListRecord]:
        """Return every entry, newest first."""
        with self.session_factory() as session:
            rows = session.scalars(
                select(PriceListRow).order_by(
                    PriceListRow.created_at.desc(), PriceListRow.id
                )
            ).all()
            return [_to_record(row) for row in rows]

    def get_active(self) -> PriceListRecord | None:
        """Return the active entry, if any."""
        with self.session_factory() as session:
            row = session.scalars(
                select(PriceListRow).where(PriceListRow.is_active.is_(True)).limit(1)
            ).first()
            return _to_record(row) if row else None


def _to_record(row: PriceListRow) -> PriceListRecord:
    return PriceListRecord(
        id=row.id,
        storage_key=row.s3_key,
        title=row.title,
        alt=row.alt,
        original_name=row.original_name,
        file_size=row.file_size,
        is_active=bool(row.is_active),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
