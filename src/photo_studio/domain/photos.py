"""Domain models for the photo catalog."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class PhotoStatus(StrEnum):
    """Whether the derived renditions of a photo exist yet."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class PhotoCategory(StrEnum):
    BARN = "Barn"
    FAMILIE = "Familie"
    PORTRETT = "Portrett"
    KONFIRMANT = "Konfirmant"
    BRYLLUP = "Bryllup"
    PRODUKT = "Produkt"
    REKLAME = "Reklame"


class PrizeMedal(StrEnum):
    GULL = "Gull"
    SOLV = "Sølv"
    BRONSE = "Bronse"
    HEDERLIG_OMTALE = "Hederlig omtale"


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a photo row stored in the database."""

    id: str
    storage_key: str
    title: str | None
    alt: str | None
    published: bool | None
    status: PhotoStatus
    category: PhotoCategory | None
    has_prize: bool
    prize_title: str | None
    prize_medal: PrizeMedal | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PhotoDraft:
    """Caller-supplied photo metadata for an upsert."""

    id: str
    storage_key: str
    title: str | None = None
    alt: str | None = None
    published: bool = True
    category: PhotoCategory | None = None
    has_prize: bool = False
    prize_title: str | None = None
    prize_medal: PrizeMedal | None = None


@dataclass(frozen=True)
class PublicPhoto:
    """A photo as shown to visitors, with its CDN rendition URL."""

    id: str
    title: str | None
    alt: str | None
    published: bool | None
    category: PhotoCategory | None
    has_prize: bool
    prize_title: str | None
    prize_medal: PrizeMedal | None
    created_at: datetime
    updated_at: datetime
    image_url: str


@dataclass(frozen=True)
class PhotoPage:
    """A page of public photos with the unpaginated total."""

    photos: list[PublicPhoto]
    total: int


@dataclass(frozen=True)
class BatchPublishResult:
    success: bool
    count: int
    photos: list[PhotoRecord]
