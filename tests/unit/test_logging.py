import json
import logging
import sys

from storefront.core.logging import (
    RequestContextFilter,
    StructuredLogFormatter,
    set_correlation_id,
    set_user_id,
)


def make_record(message="Cart updated", **extra):
    record = logging.LogRecord("storefront.services", logging.INFO, __file__, 12, message, (), None)
    record.__dict__.update(extra)
    return record


def test_structured_entry_carries_request_context_and_extra():
    set_correlation_id("corr-1")
    set_user_id("user-1")
    record = make_record(lines=3)

    RequestContextFilter().filter(record)
    entry = json.loads(StructuredLogFormatter("Storefront API").format(record))

    assert entry["message"] == "Cart updated"
    assert entry["service"] == "Storefront API"
    assert entry["correlation_id"] == "corr-1"
    assert entry["user_id"] == "user-1"
    assert entry["lines"] == 3
    assert entry["timestamp"].endswith("Z")


def test_anonymous_records_leave_out_user():
    set_user_id("")
    record = make_record()

    RequestContextFilter().filter(record)
    entry = json.loads(StructuredLogFormatter("Storefront API").format(record))

    assert "user_id" not in entry


def test_explicit_user_id_is_kept():
    set_user_id("user-1")
    record = make_record(user_id="user-2")

    RequestContextFilter().filter(record)

    assert record.user_id == "user-2"


def test_exception_is_formatted():
    try:
        raise ValueError("bad row")
    except ValueError:
        record = logging.LogRecord("storefront", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    entry = json.loads(StructuredLogFormatter("Storefront API").format(record))

    assert "ValueError: bad row" in entry["exception"]
