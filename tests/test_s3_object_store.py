"""Tests for the boto3 object store."""

import asyncio
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from photo_studio.adapters.s3_object_store import Boto3ObjectStore


@pytest.fixture
def store() -> Boto3ObjectStore:
    return Boto3ObjectStore.create(
        bucket="studio-bucket",
        region="eu-north-1",
        access_key_id="test-key",
        secret_access_key="test-secret",
    )


def test_delete_removes_object(store: Boto3ObjectStore) -> None:
    with Stubber(store.client) as stubber:
        stubber.add_response(
            "delete_object",
            {},
            {"Bucket": "studio-bucket", "Key": "photos/p1/original"},
        )
        asyncio.run(store.delete("photos/p1/original"))
        stubber.assert_no_pending_responses()


def test_delete_missing_object_is_not_an_error(store: Boto3ObjectStore) -> None:
    with Stubber(store.client) as stubber:
        stubber.add_client_error(
            "delete_object", service_error_code="NoSuchKey", http_status_code=404
        )
        asyncio.run(store.delete("photos/ghost/original"))


def test_delete_propagates_other_errors(store: Boto3ObjectStore) -> None:
    with Stubber(store.client) as stubber:
        stubber.add_client_error(
            "delete_object", service_error_code="AccessDenied", http_status_code=403
        )
        with pytest.raises(ClientError):
            asyncio.run(store.delete("photos/p1/original"))


def test_presign_put_binds_content_type(store: Boto3ObjectStore) -> None:
    url = store.presign_put("photos/p1/original", "image/jpeg", 3600)

    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert parsed.path.endswith("/photos/p1/original")
    assert query["X-Amz-Expires"] == ["3600"]
    assert "content-type" in query["X-Amz-SignedHeaders"][0]


def test_presign_get(store: Boto3ObjectStore) -> None:
    url = store.presign_get("priceList/a.pdf", 600)

    assert "priceList/a.pdf" in url
    assert "X-Amz-Signature=" in url
