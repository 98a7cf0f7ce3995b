"""Tests for structured logging: JSON formatter, context filter and lazy logger."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from storefront.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    LazyLoggerAdapter,
    clear_log_context,
    get_lazy_logger,
    get_log_context,
    set_log_context,
)


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="storefront.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _clean_context():
    clear_log_context()
    yield
    clear_log_context()


class TestJSONFormatter:
    def test_one_json_object_per_record(self):
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "storefront.test"
        assert payload["message"] == "hello world"
        assert payload["timestamp"].endswith("Z")

    def test_extras_and_static_fields(self):
        formatter = JSONFormatter(static={"service": "storefront"})

        payload = json.loads(formatter.format(_record(loader="products", batch_size=3)))

        assert payload["service"] == "storefront"
        assert payload["loader"] == "products"
        assert payload["batch_size"] == 3

    def test_exception_is_single_line(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        output = JSONFormatter().format(record)

        assert "\n" not in output
        assert "ValueError: bad" in json.loads(output)["exception"]

    def test_unserializable_values_fall_back_to_str(self):
        payload = json.loads(JSONFormatter().format(_record(obj=object())))

        assert payload["obj"].startswith("<object object")


class TestLogContext:
    def test_set_get_and_clear(self):
        set_log_context(request_id="abc-123")
        set_log_context(operation="Products")

        assert get_log_context() == {"request_id": "abc-123", "operation": "Products"}

        clear_log_context()
        assert get_log_context() == {}

    def test_filter_injects_without_overwriting(self):
        set_log_context(request_id="abc-123", loader="from-context")
        record = _record(loader="products")

        assert ContextInjectingFilter().filter(record) is True

        assert record.request_id == "abc-123"
        assert record.loader == "products"


class TestLazyLogger:
    def test_callables_not_evaluated_when_disabled(self, caplog):
        calls = []
        logger = get_lazy_logger("storefront.test.lazy")

        with caplog.at_level(logging.INFO, logger="storefront.test.lazy"):
            logger.debug("keys: %s", lambda: calls.append("called"))

        assert calls == []
        assert caplog.records == []

    def test_callables_evaluated_when_enabled(self, caplog):
        logger = get_lazy_logger("storefront.test.lazy")

        with caplog.at_level(logging.DEBUG, logger="storefront.test.lazy"):
            logger.debug("keys: %s", lambda: [1, 2, 3])
            logger.info(lambda: "built lazily")

        assert [r.getMessage() for r in caplog.records] == ["keys: [1, 2, 3]", "built lazily"]

    def test_bound_context_is_merged_into_extra(self, caplog):
        logger = get_lazy_logger("storefront.test.lazy", component="loaders")

        with caplog.at_level(logging.INFO, logger="storefront.test.lazy"):
            logger.info("batched", extra={"loader": "products"})

        (record,) = caplog.records
        assert record.component == "loaders"
        assert record.loader == "products"
        assert isinstance(logger, LazyLoggerAdapter)
