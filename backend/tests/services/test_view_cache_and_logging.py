"""View cache revisions and JSON log formatting."""

import json
import logging

from app.infrastructure.observability import JSONFormatter
from app.infrastructure.view_cache import ViewCache, get_view_cache


def test_revision_starts_at_zero_and_increments():
    cache = ViewCache()
    assert cache.revision("/dashboard/invoices") == 0
    cache.invalidate("/dashboard/invoices")
    cache.invalidate("/dashboard/invoices")
    assert cache.revision("/dashboard/invoices") == 2


def test_trailing_slash_shares_revision():
    cache = ViewCache()
    cache.invalidate("/dashboard/invoices/")
    assert cache.revision("/dashboard/invoices") == 1


def test_paths_are_independent():
    cache = ViewCache()
    cache.invalidate("/dashboard/invoices")
    assert cache.revision("/dashboard/customers") == 0


def test_etag_tracks_revision():
    cache = ViewCache()
    before = cache.etag("/dashboard/invoices")
    cache.invalidate("/dashboard/invoices")
    assert cache.etag("/dashboard/invoices") != before


def test_get_view_cache_is_process_wide():
    assert get_view_cache() is get_view_cache()


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "app.services.invoice_actions", logging.INFO, __file__, 1,
        "Invoice updated", None, None,
    )
    record.invoice_id = "inv-1"
    record.operation = "update"
    log = json.loads(JSONFormatter().format(record))
    assert log["level"] == "INFO"
    assert log["message"] == "Invoice updated"
    assert log["invoice_id"] == "inv-1"
    assert log["operation"] == "update"
    assert "error_code" not in log
