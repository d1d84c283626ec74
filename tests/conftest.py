"""Shared test fixtures."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

import pytest

from photo_studio.adapters.resend_email_client import EmailClient, EmailDeliveryError
from photo_studio.adapters.s3_object_store import ObjectStore
from photo_studio.config import Settings
from photo_studio.containers import AppContainer
from photo_studio.domain.photos import PhotoDraft, PhotoRecord, PhotoStatus
from photo_studio.domain.price_lists import PriceListRecord
from photo_studio.services.contact import ContactService
from photo_studio.services.coordinator import StorageCleaner
from photo_studio.services.photos import (
    PhotoRepository,
    PhotoService,
    PhotoTransaction,
)
from photo_studio.services.price_lists import (
    PriceListRepository,
    PriceListService,
    PriceListTransaction,
)
from photo_studio.services.rate_limit import InMemoryRateLimiter

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryPhotoTransaction(PhotoTransaction):
    """Photo transaction working directly on the repository's rows."""

    rows: dict[str, PhotoRecord]
    locked_reads: list[list[str]] = field(default_factory=list)

    def find_by_ids(
        self, ids: list[str], for_update: bool = False
    ) -> list[PhotoRecord]:
        if for_update:
            self.locked_reads.append(list(ids))
        return [self.rows[photo_id] for photo_id in ids if photo_id in self.rows]

    def delete_by_ids(self, ids: list[str]) -> list[PhotoRecord]:
        return [self.rows.pop(photo_id) for photo_id in ids if photo_id in self.rows]

    def set_published(
        self, ids: list[str], published: bool, updated_at: datetime
    ) -> list[PhotoRecord]:
        for photo_id in ids:
            self.rows[photo_id] = replace(
                self.rows[photo_id], published=published, updated_at=updated_at
            )
        return self.find_by_ids(ids)

    def insert_placeholders(
        self, entries: list[tuple[str, str]], created_at: datetime
    ) -> None:
        for photo_id, storage_key in entries:
            self.rows[photo_id] = PhotoRecord(
                id=photo_id,
                storage_key=storage_key,
                title=None,
                alt=None,
                published=False,
                status=PhotoStatus.PROCESSING,
                category=None,
                has_prize=False,
                prize_title=None,
                prize_medal=None,
                created_at=created_at,
                updated_at=created_at,
            )

    def upsert(self, drafts: list[PhotoDraft], updated_at: datetime) -> list[PhotoRecord]:
        for draft in drafts:
            current = self.rows.get(draft.id)
            self.rows[draft.id] = PhotoRecord(
                id=draft.id,
                storage_key=current.storage_key if current else draft.storage_key,
                title=draft.title,
                alt=draft.alt,
                published=draft.published,
                status=current.status if current else PhotoStatus.PROCESSING,
                category=draft.category,
                has_prize=draft.has_prize,
                prize_title=draft.prize_title,
                prize_medal=draft.prize_medal,
                created_at=current.created_at if current else updated_at,
                updated_at=updated_at,
            )
        return self.find_by_ids([draft.id for draft in drafts])

    def update(
        self, photo_id: str, changes: dict[str, object], updated_at: datetime
    ) -> PhotoRecord | None:
        current = self.rows.get(photo_id)
        if current is None:
            return None
        self.rows[photo_id] = replace(current, **changes, updated_at=updated_at)
        return self.rows[photo_id]


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository with all-or-nothing transactions."""

    rows: dict[str, PhotoRecord] = field(default_factory=dict)
    transactions_opened: int = 0
    locked_reads: list[list[str]] = field(default_factory=list)

    @contextmanager
    def transaction(self) -> Iterator[InMemoryPhotoTransaction]:
        self.transactions_opened += 1
        snapshot = dict(self.rows)
        try:
            yield InMemoryPhotoTransaction(self.rows, self.locked_reads)
        except BaseException:
            self.rows.clear()
            self.rows.update(snapshot)
            raise

    def list_published(self, category, has_prize, limit, offset):  # type: ignore[no-untyped-def]
        rows = [
            row
            for row in self._sorted()
            if row.published and row.status == PhotoStatus.READY
        ]
        rows = _filter_photos(rows, category, None, has_prize)
        return rows[offset : offset + limit], len(rows)

    def list_all(self, category, published, has_prize):  # type: ignore[no-untyped-def]
        return _filter_photos(self._sorted(), category, published, has_prize)

    def get_published(self, photo_id: str) -> PhotoRecord | None:
        row = self.rows.get(photo_id)
        if row and row.published and row.status == PhotoStatus.READY:
            return row
        return None

    def _sorted(self) -> list[PhotoRecord]:
        return sorted(self.rows.values(), key=lambda row: row.created_at, reverse=True)


def _filter_photos(rows, category, published, has_prize):  # type: ignore[no-untyped-def]
    return [
        row
        for row in rows
        if (category is None or row.category == category)
        and (published is None or row.published is published)
        and (has_prize is None or row.has_prize is has_prize)
    ]


@dataclass
class InMemoryPriceListTransaction(PriceListTransaction):
    """Price-list transaction working directly on the repository's rows."""

    rows: dict[str, PriceListRecord]
    locked_reads: list[list[str]] = field(default_factory=list)
    fail_inserts: bool = False

    def find_by_ids(
        self, ids: list[str], for_update: bool = False
    ) -> list[PriceListRecord]:
        if for_update:
            self.locked_reads.append(list(ids))
        return [self.rows[row_id] for row_id in ids if row_id in self.rows]

    def delete_by_ids(self, ids: list[str]) -> list[PriceListRecord]:
        return [self.rows.pop(row_id) for row_id in ids if row_id in self.rows]

    def deactivate_all(self, updated_at: datetime) -> None:
        for row_id, row in list(self.rows.items()):
            if row.is_active:
                self.rows[row_id] = replace(row, is_active=False, updated_at=updated_at)

    def insert(  # noqa: PLR0913
        self,
        price_list_id: str,
        storage_key: str,
        original_name: str,
        file_size: int | None,
        is_active: bool,
        created_at: datetime,
    ) -> PriceListRecord:
        if self.fail_inserts:
            raise RuntimeError("insert failed")
        self.rows[price_list_id] = PriceListRecord(
            id=price_list_id,
            storage_key=storage_key,
            title=None,
            alt=None,
            original_name=original_name,
            file_size=file_size,
            is_active=is_active,
            created_at=created_at,
            updated_at=created_at,
        )
        return self.rows[price_list_id]

    def activate(self, price_list_id: str, updated_at: datetime) -> PriceListRecord | None:
        row = self.rows.get(price_list_id)
        if row is None:
            return None
        self.rows[price_list_id] = replace(row, is_active=True, updated_at=updated_at)
        return self.rows[price_list_id]


@dataclass
class InMemoryPriceListRepository(PriceListRepository):
    """In-memory price-list repository with all-or-nothing transactions."""

    rows: dict[str, PriceListRecord] = field(default_factory=dict)
    transactions_opened: int = 0
    locked_reads: list[list[str]] = field(default_factory=list)
    fail_inserts: bool = False

    @contextmanager
    def transaction(self) -> Iterator[InMemoryPriceListTransaction]:
        self.transactions_opened += 1
        snapshot = dict(self.rows)
        try:
            yield InMemoryPriceListTransaction(
                self.rows, self.locked_reads, self.fail_inserts
            )
        except BaseException:
            self.rows.clear()
            self.rows.update(snapshot)
            raise

    def list_all(self) -> list[PriceListRecord]:
        return sorted(self.rows.values(), key=lambda row: row.created_at, reverse=True)

    def get_active(self) -> PriceListRecord | None:
        return next((row for row in self.rows.values() if row.is_active), None)


@dataclass
class FakeObjectStore(ObjectStore):
    """Object store that records deletes and fails on configured keys."""

    objects: set[str] = field(default_factory=set)
    failing_keys: set[str] = field(default_factory=set)
    delete_calls: list[str] = field(default_factory=list)

    async def delete(self, key: str) -> None:
        self.delete_calls.append(key)
        if key in self.failing_keys:
            raise RuntimeError(f"storage unavailable for {key}")
        self.objects.discard(key)

    def presign_get(self, key: str, expires_in: int) -> str:
        return f"https://bucket.test/{key}?op=get&expires={expires_in}"

    def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        return f"https://bucket.test/{key}?op=put&type={content_type}"


@dataclass
class FakeEmailClient(EmailClient):
    """Email client that records messages instead of sending them."""

    sent: list[dict[str, object]] = field(default_factory=list)
    reject_with: str | None = None

    async def send(
        self, *, sender: str, to: list[str], subject: str, html: str
    ) -> dict[str, object]:
        if self.reject_with is not None:
            raise EmailDeliveryError(self.reject_with)
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})
        return {"id": f"email-{len(self.sent)}"}


def make_photo(photo_id: str, **overrides: object) -> PhotoRecord:
    values: dict[str, object] = {
        "id": photo_id,
        "storage_key": f"photos/{photo_id}/original",
        "title": f"Photo {photo_id}",
        "alt": None,
        "published": True,
        "status": PhotoStatus.READY,
        "category": None,
        "has_prize": False,
        "prize_title": None,
        "prize_medal": None,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    values.update(overrides)
    return PhotoRecord(**values)  # type: ignore[arg-type]


def make_price_list(price_list_id: str, **overrides: object) -> PriceListRecord:
    values: dict[str, object] = {
        "id": price_list_id,
        "storage_key": f"priceList/{price_list_id}.pdf",
        "title": None,
        "alt": None,
        "original_name": f"{price_list_id}.pdf",
        "file_size": 1024,
        "is_active": False,
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    values.update(overrides)
    return PriceListRecord(**values)  # type: ignore[arg-type]


@pytest.fixture
def photo_factory() -> Callable[..., PhotoRecord]:
    return make_photo


@pytest.fixture
def price_list_factory() -> Callable[..., PriceListRecord]:
    return make_price_list


@pytest.fixture
def later() -> Callable[[int], datetime]:
    """Return a timestamp ``minutes`` after the base time."""
    return lambda minutes: BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        admin_token="admin-token",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
        aws_region="eu-north-1",
        aws_bucket_name="studio-bucket",
        cloud_front_url="cdn.fotostudio.no",
        frontend_url="https://fotostudio.no",
        resend_api_key="resend-key",
        resend_email="post@fotostudio.no",
        contact_api_key="contact-key",
        environment="test",
    )


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def price_list_repository() -> InMemoryPriceListRepository:
    return InMemoryPriceListRepository()


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def photo_service(
    photo_repository: InMemoryPhotoRepository, object_store: FakeObjectStore
) -> PhotoService:
    return PhotoService(
        repository=photo_repository,
        object_store=object_store,
        cleaner=StorageCleaner(object_store=object_store, timeout=1.0),
        cdn_domain="cdn.fotostudio.no",
    )


@pytest.fixture
def price_list_service(
    price_list_repository: InMemoryPriceListRepository,
    object_store: FakeObjectStore,
) -> PriceListService:
    return PriceListService(
        repository=price_list_repository,
        object_store=object_store,
        cleaner=StorageCleaner(object_store=object_store, timeout=1.0),
    )


@pytest.fixture
def container(
    settings: Settings,
    object_store: FakeObjectStore,
    photo_service: PhotoService,
    price_list_service: PriceListService,
    email_client: FakeEmailClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        object_store=object_store,
        photo_service=photo_service,
        price_list_service=price_list_service,
        contact_service=ContactService(
            email_client=email_client,
            recipient=settings.resend_email,
            sender=settings.email_from,
        ),
        contact_rate_limiter=InMemoryRateLimiter(
            limit=settings.contact_rate_limit,
            window_seconds=settings.contact_rate_window_seconds,
        ),
        close_resources=close_resources,
    )
