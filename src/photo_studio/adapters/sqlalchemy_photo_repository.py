"""SQLAlchemy-backed photo repository."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session, sessionmaker

from photo_studio.adapters.database import PhotoRow
from photo_studio.domain.photos import (
    PhotoCategory,
    PhotoDraft,
    PhotoRecord,
    PhotoStatus,
    PrizeMedal,
)
from photo_studio.services.photos import PhotoRepository, PhotoTransaction


@dataclass
class SqlAlchemyPhotoTransaction(PhotoTransaction):
    """Photo row access bound to one open session transaction."""

    session: Session

    def find_by_ids(
        self, ids: list[str], for_update: bool = False
    ) -> list[PhotoRecord]:
        return [_to_record(row) for row in self._load(ids, for_update=for_update)]

    def delete_by_ids(self, ids: list[str]) -> list[PhotoRecord]:
        rows = self._load(ids, for_update=True)
        records = [_to_record(row) for row in rows]
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return records

    def set_published(
        self, ids: list[str], published: bool, updated_at: datetime
    ) -> list[PhotoRecord]:
        rows = self._load(ids, for_update=True)
        for row in rows:
            row.published = published
            row.updated_at = updated_at
        self.session.flush()
        return [_to_record(row) for row in rows]

    def insert_placeholders(
        self, entries: list[tuple[str, str]], created_at: datetime
    ) -> None:
        self.session.add_all(
            [
                PhotoRow(
                    id=photo_id,
                    s3_key=storage_key,
                    published=False,
                    status=PhotoStatus.PROCESSING,
                    has_prize=False,
                    created_at=created_at,
                    updated_at=created_at,
                )
                for photo_id, storage_key in entries
            ]
        )
        self.session.flush()

    def upsert(self, drafts: list[PhotoDraft], updated_at: datetime) -> list[PhotoRecord]:
        existing = {row.id: row for row in self._load([draft.id for draft in drafts])}
        rows = []
        for draft in drafts:
            row = existing.get(draft.id)
            if row is None:
                row = PhotoRow(
                    id=draft.id,
                    s3_key=draft.storage_key,
                    status=PhotoStatus.PROCESSING,
                    created_at=updated_at,
                )
                self.session.add(row)
                existing[draft.id] = row
            row.title = draft.title
            row.alt = draft.alt
            row.published = draft.published
            row.category = draft.category
            row.has_prize = draft.has_prize
            row.prize_title = draft.prize_title
            row.prize_medal = draft.prize_medal
            row.updated_at = updated_at
            rows.append(row)
        self.session.flush()
        return [_to_record(row) for row in rows]

    def update(
        self, photo_id: str, changes: dict[str, object], updated_at: datetime
    ) -> PhotoRecord | None:
        row = self.session.get(PhotoRow, photo_id, with_for_update=True)
        if row is None:
            return None
        for name, value in changes.items():
            setattr(row, name, value)
        row.updated_at = updated_at
        self.session.flush()
        return _to_record(row)

    def _load(self, ids: list[str], for_update: bool = False) -> list[PhotoRow]:
        statement = select(PhotoRow).where(PhotoRow.id.in_(ids))
        if for_update:
            statement = statement.with_for_update()
        rows = self.session.scalars(statement).all()
        order = {photo_id: index for index, photo_id in enumerate(ids)}
        return sorted(rows, key=lambda row: order[row.id])


@dataclass
class SqlAlchemyPhotoRepository(PhotoRepository):
    """SQLAlchemy implementation for photo metadata persistence."""

    session_factory: sessionmaker

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyPhotoTransaction]:
        """Open a transaction that commits on exit and rolls back on error."""
        with self.session_factory.begin() as session:
            yield SqlAlchemyPhotoTransaction(session)

    def list_published(
        self,
        category: PhotoCategory | None,
        has_prize: bool | None,
        limit: int,
        offset: int,
    ) -> tuple[list[PhotoRecord], int]:
        """Return a page of visible photos and the total count."""
        conditions = [
            PhotoRow.published.is_(True),
            PhotoRow.status == PhotoStatus.READY,
            *_filters(category, None, has_prize),
        ]
        with self.session_factory() as session:
            rows = session.scalars(
                select(PhotoRow)
                .where(*conditions)
                .order_by(PhotoRow.created_at.desc(), PhotoRow.id)
                .limit(limit)
                .offset(offset)
            ).all()
            total = session.scalar(
                select(func.count()).select_from(PhotoRow).where(*conditions)
            )
            return [_to_record(row) for row in rows], int(total or 0)

    def list_all(
        self,
        category: PhotoCategory | None,
        published: bool | None,
        has_prize: bool | None,
    ) -> list[PhotoRecord]:
        """Return every photo matching the filters."""
        with self.session_factory() as session:
            rows = session.scalars(
                select(PhotoRow)
                .where(*_filters(category, published, has_prize))
                .order_by(PhotoRow.created_at.desc(), PhotoRow.id)
            ).all()
            return [_to_record(row) for row in rows]

    def get_published(self, photo_id: str) -> PhotoRecord | None:
        """Return a visible photo by id."""
        with self.session_factory() as session:
            row = session.scalars(
                select(PhotoRow).where(
                    PhotoRow.id == photo_id,
                    PhotoRow.published.is_(True),
                    PhotoRow.status == PhotoStatus.READY,
                )
            ).first()
            return _to_record(row) if row else None


def _filters(
    category: PhotoCategory | None,
    published: bool | None,
    has_prize: bool | None,
) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if category is not None:
        conditions.append(PhotoRow.category == category)
    if published is not None:
        conditions.append(PhotoRow.published.is_(published))
    if has_prize is not None:
        conditions.append(PhotoRow.has_prize.is_(has_prize))
    return conditions


def _to_record(row: PhotoRow) -> PhotoRecord:
    return PhotoRecord(
        id=row.id,
        storage_key=row.s3_key,
        title=row.title,
        alt=row.alt,
        published=row.published,
        status=PhotoStatus(row.status),
        category=PhotoCategory(row.category) if row.category else None,
        has_prize=bool(row.has_prize),
        prize_title=row.prize_title,
        prize_medal=PrizeMedal(row.prize_medal) if row.prize_medal else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
