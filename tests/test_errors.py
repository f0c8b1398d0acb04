"""
Unit tests for the exception hierarchy.
"""

from payload_store.core.errors import (
    InvalidPathError,
    InvalidReferenceError,
    NoStoreFoundError,
    PayloadStoreError,
    SelectorNotFoundError,
    StoreConfigurationError,
    UnsupportedTypeError,
)


class TestErrors:
    """Tests for error messages and attributes."""

    def test_all_errors_share_base(self):
        for error in (
            NoStoreFoundError("load"),
            SelectorNotFoundError("a.b"),
            UnsupportedTypeError("set"),
            InvalidPathError("a..b"),
            InvalidReferenceError("x"),
            StoreConfigurationError(),
        ):
            assert isinstance(error, PayloadStoreError)

    def test_details_in_message(self):
        error = PayloadStoreError("Something failed", "more context")
        assert str(error) == "Something failed: more context"
        assert str(PayloadStoreError("Something failed")) == "Something failed"

    def test_no_store_found(self):
        error = NoStoreFoundError("store", "items[1]", "byte_size: 10")
        assert error.operation == "store"
        assert error.path == "items[1]"
        assert str(error) == "No store can store payload at 'items[1]': byte_size: 10"

    def test_no_store_found_at_root(self):
        assert str(NoStoreFoundError("load")) == "No store can load payload"

    def test_selector_not_found(self):
        error = SelectorNotFoundError("x.y.z")
        assert error.selector == "x.y.z"
        assert "x.y.z" in str(error)
