"""Tests for the structured log formatter."""
import json
import logging

from holiday_insights.logging_config import LOG_FORMAT, ExtraFormatter, configure_logging


def _record(**extra):
    record = logging.LogRecord("holiday_insights.test", logging.ERROR, __file__, 1, "Nager API call failed", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_fields_appended_as_json():
    formatter = ExtraFormatter("%(levelname)s | %(message)s")

    line = formatter.format(_record(country_code="GB", year=2021, error_kind="UpstreamServerError"))

    message, suffix = line.split(" | ", 2)[1:]
    assert message == "Nager API call failed"
    assert json.loads(suffix) == {"country_code": "GB", "year": 2021, "error_kind": "UpstreamServerError"}


def test_no_suffix_without_extra():
    formatter = ExtraFormatter(LOG_FORMAT)

    assert not formatter.format(_record()).endswith("}")


def test_configure_logging_keeps_existing_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    handler = logging.NullHandler()
    root.addHandler(handler)
    try:
        configure_logging("DEBUG")
        assert root.handlers == before + [handler]
    finally:
        root.removeHandler(handler)
