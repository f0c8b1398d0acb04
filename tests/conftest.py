"""
Shared fixtures for the payload store tests.
"""

import io
from unittest.mock import MagicMock

import pytest

from payload_store.core.logger import create_logger


@pytest.fixture
def logger():
    """Quiet logger shared by engines built in tests."""
    return create_logger(service="payload-store-tests", level="ERROR")


@pytest.fixture
def s3_client():
    """
    MagicMock S3 client backed by an in-memory object map.

    put_object/get_object/delete_object behave like the real client for the
    arguments the store passes, so calls can be asserted and payloads
    round-tripped.
    """
    objects = {}
    client = MagicMock()
    client.meta.region_name = "us-east-1"
    client.objects = objects

    def put_object(Bucket, Key, Body, ContentType):
        objects[(Bucket, Key)] = (Body, ContentType)
        return {"ETag": '"etag"'}

    def get_object(Bucket, Key):
        body, content_type = objects[(Bucket, Key)]
        return {"Body": io.BytesIO(body), "ContentType": content_type}

    def delete_object(Bucket, Key):
        objects.pop((Bucket, Key), None)
        return {}

    client.put_object.side_effect = put_object
    client.get_object.side_effect = get_object
    client.delete_object.side_effect = delete_object
    return client


def _make_store(name="mock", can_load=False, can_store=False, token=None, payload=None):
    """Build a MagicMock store with fixed capability answers."""
    store = MagicMock()
    store.name = name
    store.can_load.return_value = can_load
    store.can_store.return_value = can_store
    store.store.return_value = token
    store.load.return_value = payload
    store.can_delete.return_value = False
    return store


@pytest.fixture
def make_store():
    """Factory for MagicMock stores: make_store(name, can_load=..., can_store=..., token=..., payload=...)."""
    return _make_store
