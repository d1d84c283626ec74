"""Domain models for the price list."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PriceListRecord:
    """Represents a price-list row stored in the database."""

    id: str
    storage_key: str
    title: str | None
    alt: str | None
    original_name: str | None
    file_size: int | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PriceListWithUrl:
    """A price-list entry with a presigned download URL."""

    record: PriceListRecord
    file_url: str


@dataclass(frozen=True)
class CreatedPriceList:
    """A freshly activated price-list entry and where to upload its PDF."""

    record: PriceListRecord
    upload_url: str
