"""Pydantic models for the HTTP API.

Wire names are camelCase; attributes stay snake_case.
"""

from dataclasses import asdict
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from photo_studio.domain.photos import (
    PhotoCategory,
    PhotoDraft,
    PhotoRecord,
    PhotoStatus,
    PrizeMedal,
    PublicPhoto,
)
from photo_studio.domain.price_lists import (
    CreatedPriceList,
    PriceListRecord,
    PriceListWithUrl,
)
from photo_studio.domain.storage import FileDescriptor, UploadTicket

NonEmptyStr = Annotated[str, Field(min_length=1)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True
    )


class ErrorBody(ApiModel):
    status: int
    message: str
    meta: object | None = None


class FileIn(ApiModel):
    name: NonEmptyStr
    content_type: NonEmptyStr = Field(alias="type")

    def to_domain(self) -> FileDescriptor:
        return FileDescriptor(name=self.name, content_type=self.content_type)


class UploadUrlsRequest(ApiModel):
    files: list[FileIn]


class IdsRequest(ApiModel):
    ids: list[NonEmptyStr]


class BatchPublishRequest(IdsRequest):
    published: bool


class PhotoIn(ApiModel):
    id: NonEmptyStr
    storage_key: NonEmptyStr
    title: str | None = None
    alt: str | None = None
    published: bool = True
    category: PhotoCategory | None = None
    has_prize: bool = False
    prize_title: str | None = None
    prize_medal: PrizeMedal | None = None

    def to_domain(self) -> PhotoDraft:
        return PhotoDraft(**self.model_dump())


class CreatePhotosRequest(ApiModel):
    photos: list[PhotoIn]


class PhotoUpdate(ApiModel):
    """Partial update; only fields present in the body are changed."""

    title: str | None = None
    alt: str | None = None
    published: bool | None = None
    category: PhotoCategory | None = None
    has_prize: bool | None = None
    prize_title: str | None = None
    prize_medal: PrizeMedal | None = None


class PriceListCreate(ApiModel):
    name: NonEmptyStr
    content_type: Literal["application/pdf"] = Field(alias="type")
    file_size: int | None = Field(default=None, ge=0)


class ContactRequest(ApiModel):
    first_name: str = Field(min_length=1, alias="firstName")
    email: EmailStr
    phone_number: str = Field(min_length=1, alias="phone_number")
    category: NonEmptyStr
    message: NonEmptyStr

    @field_validator("phone_number", mode="before")
    @classmethod
    def _stringify_phone(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class PhotoOut(ApiModel):
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

    @classmethod
    def from_record(cls, record: PhotoRecord) -> "PhotoOut":
        return cls(**asdict(record))


class PublicPhotoOut(ApiModel):
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

    @classmethod
    def from_domain(cls, photo: PublicPhoto) -> "PublicPhotoOut":
        return cls(**asdict(photo))


class PhotoPageOut(ApiModel):
    total_count: int
    pages: int
    next_page: int | None
    data: list[PublicPhotoOut]


class AdminPhotosOut(ApiModel):
    photos: list[PublicPhotoOut]


class UploadTicketOut(ApiModel):
    id: str
    storage_key: str
    upload_url: str

    @classmethod
    def from_domain(cls, ticket: UploadTicket) -> "UploadTicketOut":
        return cls(**asdict(ticket))


class BatchPublishOut(ApiModel):
    success: bool
    count: int
    photos: list[PhotoOut]


class PriceListOut(ApiModel):
    id: str
    storage_key: str
    title: str | None
    alt: str | None
    original_name: str | None
    file_size: int | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PriceListRecord) -> "PriceListOut":
        return cls(**asdict(record))


class PriceListWithUrlOut(PriceListOut):
    file_url: str

    @classmethod
    def from_domain(cls, item: PriceListWithUrl) -> "PriceListWithUrlOut":
        return cls(**asdict(item.record), file_url=item.file_url)


class CreatedPriceListOut(PriceListOut):
    upload_url: str

    @classmethod
    def from_domain(cls, created: CreatedPriceList) -> "CreatedPriceListOut":
        return cls(**asdict(created.record), upload_url=created.upload_url)
