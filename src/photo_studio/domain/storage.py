"""Object storage key layout and upload tickets."""

from dataclasses import dataclass

PHOTO_RENDITIONS = ("preview.webp", "medium.webp", "large.webp")


def photo_original_key(photo_id: str) -> str:
    """Return the key the original upload of a photo is written to."""
    return f"photos/{photo_id}/original"


def photo_rendition_key(photo_id: str, rendition: str) -> str:
    return f"photos/{photo_id}/{rendition}"


def photo_storage_keys(photo_id: str) -> list[str]:
    """Return every object key a photo may own, original first."""
    return [photo_original_key(photo_id)] + [
        photo_rendition_key(photo_id, rendition) for rendition in PHOTO_RENDITIONS
    ]


def price_list_key(price_list_id: str) -> str:
    return f"priceList/{price_list_id}.pdf"


@dataclass(frozen=True)
class UploadTicket:
    """A reserved id, its storage key and a presigned PUT URL."""

    id: str
    storage_key: str
    upload_url: str


@dataclass(frozen=True)
class FileDescriptor:
    """Client-declared file metadata for an upload request."""

    name: str
    content_type: str
