"""Tests for container wiring."""

import asyncio

from photo_studio.adapters.resend_email_client import HttpxResendClient
from photo_studio.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings.model_copy(update={"database_auto_create": True}))

    assert container.photo_service is not None
    assert container.price_list_service.get_history() == []
    assert isinstance(container.contact_service.email_client, HttpxResendClient)
    asyncio.run(container.close_resources())


def test_build_container_without_email_key(settings) -> None:
    container = build_container(settings.model_copy(update={"resend_api_key": None}))

    assert container.contact_service.email_client is None
    asyncio.run(container.close_resources())
