import json
import logging
import sys
from decimal import Decimal

from propeval.adapters.logging_utils import JsonLogFormatter, get_logger


def _record(msg="property created", context=None, exc_info=None):
    rec = logging.LogRecord("propeval.test", logging.INFO, __file__, 1, msg, None, exc_info)
    if context is not None:
        rec.context = context
    return rec


def test_context_is_flattened_into_the_line():
    line = JsonLogFormatter(env="test").format(
        _record(context={"property_id": "abc123", "price": Decimal("500000.00")})
    )
    payload = json.loads(line)

    assert payload["message"] == "property created"
    assert payload["level"] == "INFO"
    assert payload["env"] == "test"
    assert payload["property_id"] == "abc123"
    assert payload["price"] == "500000.00"


def test_context_cannot_overwrite_core_keys():
    payload = json.loads(JsonLogFormatter(env="test").format(_record(context={"message": "spoofed"})))
    assert payload["message"] == "property created"


def test_exception_is_included():
    try:
        raise ValueError("ltv must be between 0 and 100")
    except ValueError:
        rec = _record("update failed", exc_info=sys.exc_info())

    payload = json.loads(JsonLogFormatter(env="test").format(rec))
    assert "ValueError: ltv must be between 0 and 100" in payload["exc"]


def test_get_logger_configures_once():
    first = get_logger("propeval.test.once", level="debug")
    second = get_logger("propeval.test.once")

    assert first is second
    assert len(first.handlers) == 1
    assert first.level == logging.DEBUG
    assert first.propagate is False
