"""
Unit tests for the output phase of the offload engine (offloading payloads).
"""

import copy

import pytest

from payload_store.core.config import OffloadConfig
from payload_store.core.errors import (
    NoStoreFoundError,
    SelectorNotFoundError,
    UnsupportedTypeError,
)
from payload_store.core.models import StoreArgs
from payload_store.engine import PayloadOffloadEngine
from payload_store.stores import Base64Store, S3Store
from payload_store.utils.size_utils import calculate_byte_size


def build_engine(stores, logger, store_options=None, load_options=True):
    if store_options is None:
        store_options = {"min_size": "always"}
    config = OffloadConfig(
        stores=stores, load_options=load_options, store_options=store_options, logger=logger
    )
    return PayloadOffloadEngine.from_config(config)


class TestStorePassThrough:
    """Outputs the engine leaves alone without asking any store."""

    @pytest.mark.parametrize("output", [None, 42, True, 1.5, "", [], {}])
    def test_non_measurable_output(self, output, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger)

        assert engine.after(output) == output
        store.can_store.assert_not_called()

    def test_storing_disabled(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options=False)

        assert engine.after({"a": "x" * 1000}) == {"a": "x" * 1000}
        store.can_store.assert_not_called()

    def test_min_size_never(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options={"min_size": "never"})

        assert engine.after(["x" * 10000]) == ["x" * 10000]
        store.can_store.assert_not_called()

    def test_default_threshold_keeps_small_output(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options=True)

        assert engine.after({"a": 1}) == {"a": 1}
        store.can_store.assert_not_called()


class TestSizeGate:
    """Tests for the minimum-size threshold."""

    def test_below_threshold_untouched(self, logger, make_store):
        """A 1024-byte string stays inline under a 2048-byte threshold."""
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options={"min_size": 2048})
        payload = "x" * 1024

        assert engine.after(payload) == payload
        store.can_store.assert_not_called()

    def test_at_or_above_threshold_offloaded(self, logger, make_store):
        """Two copies of the same string cross the threshold."""
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options={"min_size": 2048})
        payload = "x" * 1024

        assert engine.after([payload, payload]) == {"@middy-store": "t"}
        store.store.assert_called_once()

    def test_threshold_is_inclusive(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        output = {"k": "v"}
        size = calculate_byte_size(output)
        engine = build_engine([store], logger, store_options={"min_size": size})

        assert engine.after(output) == {"@middy-store": "t"}

    def test_string_output_offloaded(self, logger, make_store):
        store = make_store(can_store=True, token="s3://bucket/key")
        engine = build_engine([store], logger)

        assert engine.after("hello") == {"@middy-store": "s3://bucket/key"}
        store.store.assert_called_once_with(StoreArgs(payload="hello", byte_size=5))

    def test_empty_string_never_offloaded(self, logger, make_store):
        """The empty string passes through even with min_size 'always'."""
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options={"min_size": "always"})

        assert engine.after("") == ""
        store.can_store.assert_not_called()


class TestSelectors:
    """Tests for choosing which part of the output is offloaded."""

    def test_root_selector(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger)
        output = {"a": 1}

        assert engine.after(output) == {"@middy-store": "t"}
        store.store.assert_called_once_with(
            StoreArgs(payload={"a": 1}, byte_size=calculate_byte_size({"a": 1}))
        )

    def test_single_path(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine([store], logger, store_options={"min_size": 0, "selector": "a.b"})
        output = {"a": {"b": {"c": [1, 2]}}, "keep": True}

        result = engine.after(output)

        assert result is output
        assert result == {"a": {"b": {"@middy-store": "t"}}, "keep": True}
        store.store.assert_called_once_with(
            StoreArgs(payload={"c": [1, 2]}, byte_size=calculate_byte_size({"c": [1, 2]}))
        )

    def test_list_selector(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": ["a", 0]}
        )

        assert engine.after({"a": ["x", "y"]}) == {"a": [{"@middy-store": "t"}, "y"]}

    def test_null_value_at_selector(self, logger, make_store):
        """An existing null is selected and handed to the store check."""
        store = make_store(can_store=False)
        engine = build_engine(
            [store],
            logger,
            store_options={"min_size": 0, "selector": "a", "pass_through": True},
        )

        assert engine.after({"a": None}) == {"a": None}
        store.can_store.assert_called_once_with(StoreArgs(payload=None, byte_size=4))

    def test_wildcard_selector(self, logger, make_store):
        store = make_store(can_store=True)
        store.store.side_effect = ["t0", "t1"]
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "items[*]"}
        )

        result = engine.after({"items": [{"n": 0}, {"n": 1}]})

        assert result == {"items": [{"@middy-store": "t0"}, {"@middy-store": "t1"}]}
        assert [c.args[0].payload for c in store.store.call_args_list] == [{"n": 0}, {"n": 1}]

    def test_wildcard_call_per_element(self, logger, make_store):
        """One store call per array element, order preserved."""
        store = make_store(can_store=True)
        store.store.side_effect = ["rx", "ry", "rz"]
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "a.b[*]"}
        )

        result = engine.after({"a": {"b": ["x", "y", "z"]}})

        assert store.store.call_count == 3
        assert result == {
            "a": {"b": [{"@middy-store": "rx"}, {"@middy-store": "ry"}, {"@middy-store": "rz"}]}
        }

    def test_wildcard_over_empty_array(self, logger, make_store):
        """Zero matches is not an error; nothing is stored."""
        store = make_store(can_store=True, token="t")
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "items[*]"}
        )

        assert engine.after({"items": []}) == {"items": []}
        store.can_store.assert_not_called()

    def test_missing_selector(self, logger, make_store):
        """A missing selector fails even when the output is below min_size."""
        store = make_store(can_store=True, token="t")
        engine = build_engine(
            [store], logger, store_options={"min_size": 10000, "selector": "x.y.z"}
        )

        with pytest.raises(SelectorNotFoundError) as exc_info:
            engine.after({"a": {"b": {"c": [1]}}})

        assert exc_info.value.selector == "x.y.z"
        store.can_store.assert_not_called()
        store.store.assert_not_called()

    def test_missing_wildcard_base(self, logger, make_store):
        store = make_store(can_store=True, token="t")
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "x[*]"}
        )

        with pytest.raises(SelectorNotFoundError):
            engine.after({"a": 1})
        store.store.assert_not_called()

    def test_missing_tail_after_wildcard(self, logger, make_store):
        """An element lacking the tail fails before any element is stored."""
        store = make_store(can_store=True, token="t")
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "items[*].body"}
        )
        output = {"items": [{"body": "x"}, {"other": 1}]}

        with pytest.raises(SelectorNotFoundError) as exc_info:
            engine.after(output)

        assert exc_info.value.selector == "items[*].body"
        assert "items[1].body" in str(exc_info.value)
        store.can_store.assert_not_called()
        store.store.assert_not_called()
        assert output == {"items": [{"body": "x"}, {"other": 1}]}

    def test_wildcard_with_tail_offloads_each_element(self, logger, make_store):
        store = make_store(can_store=True)
        store.store.side_effect = ["t0", "t1"]
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "items[*].body"}
        )

        result = engine.after({"items": [{"id": 1, "body": "a"}, {"id": 2, "body": "b"}]})

        assert result == {
            "items": [
                {"id": 1, "body": {"@middy-store": "t0"}},
                {"id": 2, "body": {"@middy-store": "t1"}},
            ]
        }


class TestStoreDispatch:
    """Tests for store selection and failure handling."""

    def test_first_capable_store_wins(self, logger, make_store):
        declining = make_store("declining", can_store=False)
        first = make_store("first", can_store=True, token="from-first")
        second = make_store("second", can_store=True, token="from-second")
        engine = build_engine([declining, first, second], logger)

        assert engine.after({"a": 1}) == {"@middy-store": "from-first"}
        declining.store.assert_not_called()
        second.can_store.assert_not_called()

    def test_no_store_fails(self, logger, make_store):
        store = make_store(can_store=False)
        engine = build_engine(
            [store],
            logger,
            store_options={"min_size": 0, "selector": "a"},
        )

        with pytest.raises(NoStoreFoundError) as exc_info:
            engine.after({"a": [1, 2]})

        assert exc_info.value.operation == "store"
        assert exc_info.value.path == "a"
        store.store.assert_not_called()

    def test_no_store_pass_through(self, logger, make_store):
        """With pass-through only the rejected element stays inline."""
        store = make_store(token="t")
        store.can_store.side_effect = [False, True]
        engine = build_engine(
            [store],
            logger,
            store_options={"min_size": 0, "selector": "items[*]", "pass_through": True},
        )

        result = engine.after({"items": ["small", "large"]})

        assert result == {"items": ["small", {"@middy-store": "t"}]}

    def test_earlier_rewrites_survive_failure(self, logger, make_store):
        """No rollback: elements offloaded before the failure stay references."""
        store = make_store(token="t")
        store.can_store.side_effect = [True, False]
        engine = build_engine(
            [store], logger, store_options={"min_size": 0, "selector": "items[*]"}
        )
        output = {"items": ["a", "b"]}

        with pytest.raises(NoStoreFoundError):
            engine.after(output)

        assert output == {"items": [{"@middy-store": "t"}, "b"]}

    def test_store_error_propagates(self, logger, make_store):
        store = make_store(can_store=True)
        store.store.side_effect = RuntimeError("put failed")
        engine = build_engine([store], logger)

        with pytest.raises(RuntimeError):
            engine.after({"a": 1})

    def test_unserializable_output(self, logger, make_store):
        engine = build_engine([make_store(can_store=True, token="t")], logger)

        with pytest.raises(UnsupportedTypeError):
            engine.after({"a": {1, 2}})


class TestRoundTrip:
    """Offloading then resolving gives back the original payload."""

    def test_base64_wildcard_round_trip(self, logger):
        original = {"a": {"b": {"c": [{"foo": "bar"}, {"foo": "bar"}]}}}
        engine = build_engine(
            [Base64Store()], logger, store_options={"min_size": 0, "selector": "a.b.c.*"}
        )

        offloaded = engine.after(copy.deepcopy(original))

        for element in offloaded["a"]["b"]["c"]:
            assert element["@middy-store"]["store"] == "base64"
        assert engine.before(offloaded) == original

    def test_s3_root_round_trip(self, logger, s3_client):
        original = {"records": [{"id": i, "body": "x" * 100} for i in range(5)]}
        store = S3Store(bucket="payloads", client=s3_client, logger=logger)
        engine = build_engine([store], logger)

        offloaded = engine.after(copy.deepcopy(original))

        token = offloaded["@middy-store"]
        assert token.startswith("s3://payloads/")
        assert engine.before(offloaded) == original

    def test_store_order_decides_backend(self, logger, s3_client):
        """Base64 only takes objects; strings fall through to S3."""
        s3_store = S3Store(bucket="payloads", client=s3_client, logger=logger)
        engine = build_engine(
            [Base64Store(), s3_store],
            logger,
            store_options={"min_size": 0, "selector": "parts[*]"},
        )

        offloaded = engine.after({"parts": [{"k": "v"}, "text"]})

        assert offloaded["parts"][0]["@middy-store"]["store"] == "base64"
        assert offloaded["parts"][1]["@middy-store"].startswith("s3://payloads/")
        assert engine.before(offloaded) == {"parts": [{"k": "v"}, "text"]}
