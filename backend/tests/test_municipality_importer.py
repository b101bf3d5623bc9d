"""Tests for the startup municipality importer (HTTP mocked with httpx.MockTransport)."""
import threading
import time

import httpx
import pytest

from bulky_waste.repositories.municipality_catalog import MunicipalityCatalog
from bulky_waste.services import municipality_importer
from bulky_waste.services.municipality_importer import (
    FALLBACK_MUNICIPALITIES,
    ImportFailed,
    fetch_names,
    import_municipalities,
    run_import,
)

URL = "https://municipalities.example/api"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _json(payload, status_code=200):
    return _client(lambda request: httpx.Response(status_code, json=payload))


class TestFetch:
    def test_returns_list(self):
        assert fetch_names(URL, 1000, _json(["Lisboa", "Porto"])) == ["Lisboa", "Porto"]

    @pytest.mark.parametrize("payload", [{"name": "Lisboa"}, "Lisboa", 42])
    def test_malformed_payload(self, payload):
        with pytest.raises(ImportFailed):
            fetch_names(URL, 1000, _json(payload))

    def test_empty_list(self):
        with pytest.raises(ImportFailed):
            fetch_names(URL, 1000, _json([]))

    def test_non_2xx(self):
        with pytest.raises(ImportFailed) as exc:
            fetch_names(URL, 1000, _json(["Lisboa"], status_code=503))
        assert "503" in str(exc.value)

    def test_invalid_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ImportFailed):
            fetch_names(URL, 1000, client)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(ImportFailed) as exc:
            fetch_names(URL, 250, _client(handler))
        assert "250" in str(exc.value)

    def test_overall_deadline_covers_slow_response(self):
        released = threading.Event()

        def handler(request):
            released.wait(5)
            return httpx.Response(200, json=["Lisboa"])

        started = time.monotonic()
        try:
            with pytest.raises(ImportFailed) as exc:
                fetch_names(URL, 100, _client(handler))
        finally:
            released.set()
        assert time.monotonic() - started < 2
        assert "timed out" in str(exc.value)


class TestImport:
    def test_names_trimmed_and_blank_skipped(self, db):
        client = _json(["  Lisboa ", "", "   ", None, "Porto", "Lisboa"])
        created, existing = import_municipalities(db, URL, 1000, client)
        assert (created, existing) == (2, 1)
        assert MunicipalityCatalog(db).list_all() == ["Lisboa", "Porto"]

    def test_rerun_creates_no_duplicates(self, db):
        import_municipalities(db, URL, 1000, _json(["Lisboa", "Porto"]))
        created, existing = import_municipalities(db, URL, 1000, _json(["Lisboa", "Porto", "Faro"]))
        assert (created, existing) == (1, 2)
        assert sorted(MunicipalityCatalog(db).list_all()) == ["Faro", "Lisboa", "Porto"]

    def test_failure_falls_back_to_builtin_list(self, db):
        created, _ = import_municipalities(db, URL, 1000, _json([], status_code=500))
        names = MunicipalityCatalog(db).list_all()
        assert created == len(set(FALLBACK_MUNICIPALITIES))
        assert "Lisboa" in names and "Porto" in names

    def test_fallback_is_idempotent(self, db):
        import_municipalities(db, URL, 1000, _json([]))
        created, _ = import_municipalities(db, URL, 1000, _json([]))
        assert created == 0
        assert len(MunicipalityCatalog(db).list_all()) == len(set(FALLBACK_MUNICIPALITIES))

    def test_run_import_never_raises(self, session_factory, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(municipality_importer, "import_municipalities", _boom)
        run_import(session_factory, URL, 1000)  # logged, not raised
