"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_studio.adapters.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from photo_studio.adapters.resend_email_client import HttpxResendClient
from photo_studio.adapters.s3_object_store import Boto3ObjectStore, ObjectStore
from photo_studio.adapters.sqlalchemy_photo_repository import SqlAlchemyPhotoRepository
from photo_studio.adapters.sqlalchemy_price_list_repository import (
    SqlAlchemyPriceListRepository,
)
from photo_studio.config import Settings
from photo_studio.services.contact import ContactService
from photo_studio.services.coordinator import StorageCleaner
from photo_studio.services.photos import PhotoService
from photo_studio.services.price_lists import PriceListService
from photo_studio.services.rate_limit import InMemoryRateLimiter, RateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    object_store: ObjectStore
    photo_service: PhotoService
    price_list_service: PriceListService
    contact_service: ContactService
    contact_rate_limiter: RateLimiter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    engine = create_db_engine(
        resolved_settings.database_url, resolved_settings.database_pool_size
    )
    if resolved_settings.database_auto_create:
        init_db(engine)
    session_factory = create_session_factory(engine)

    object_store = Boto3ObjectStore.create(
        bucket=resolved_settings.aws_bucket_name,
        region=resolved_settings.aws_region,
        access_key_id=resolved_settings.aws_access_key_id,
        secret_access_key=resolved_settings.aws_secret_access_key,
        endpoint_url=resolved_settings.s3_endpoint_url,
        connect_timeout=resolved_settings.s3_connect_timeout,
        read_timeout=resolved_settings.s3_read_timeout,
        max_attempts=resolved_settings.s3_max_attempts,
    )
    cleaner = StorageCleaner(
        object_store=object_store, timeout=resolved_settings.storage_delete_timeout
    )
    photo_service = PhotoService(
        repository=SqlAlchemyPhotoRepository(session_factory),
        object_store=object_store,
        cleaner=cleaner,
        cdn_domain=resolved_settings.cloud_front_url,
        presign_expires_in=resolved_settings.presign_expires_in,
    )
    price_list_service = PriceListService(
        repository=SqlAlchemyPriceListRepository(session_factory),
        object_store=object_store,
        cleaner=cleaner,
        presign_expires_in=resolved_settings.presign_expires_in,
    )
    email_client = (
        HttpxResendClient.create(resolved_settings.resend_api_key)
        if resolved_settings.resend_api_key
        else None
    )
    contact_service = ContactService(
        email_client=email_client,
        recipient=resolved_settings.resend_email,
        sender=resolved_settings.email_from,
    )
    rate_limiter = InMemoryRateLimiter(
        limit=resolved_settings.contact_rate_limit,
        window_seconds=resolved_settings.contact_rate_window_seconds,
    )

    async def close_resources() -> None:
        if email_client is not None:
            await email_client.close()
        object_store.close()
        engine.dispose()

    return AppContainer(
        settings=resolved_settings,
        object_store=object_store,
        photo_service=photo_service,
        price_list_service=price_list_service,
        contact_service=contact_service,
        contact_rate_limiter=rate_limiter,
        close_resources=close_resources,
    )
