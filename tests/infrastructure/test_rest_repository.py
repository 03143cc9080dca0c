from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from regisbags.config import Settings
from regisbags.domain.errors import RepositoryConnectivityError, RepositoryFetchError
from regisbags.infrastructure.repositories.rest_repository import RestIncidentRepository

LIMA = ZoneInfo("America/Lima")
START = datetime(2025, 11, 23, tzinfo=LIMA)
END = datetime(2025, 11, 23, 23, 59, 59, 999999, tzinfo=LIMA)


class _DummyResponse:
    def __init__(self, status_code: int, json_data=None, text: str = "") -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._json_data is None:
            raise ValueError("no json")
        return self._json_data


class _DummyClient:
    def __init__(self, response: _DummyResponse | None = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[dict] = []

    def __enter__(self) -> "_DummyClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def get(self, url: str, params=None, headers=None) -> _DummyResponse:
        self.calls.append({"url": url, "params": params, "headers": headers})
        if self._error is not None:
            raise self._error
        return self._response


@pytest.fixture
def remote_settings() -> Settings:
    return Settings(store_url="https://store.example", store_key="anon-key")


def test_fetch_builds_range_query_and_normalises(monkeypatch, remote_settings):
    rows = [
        {"id": "a", "source": "counter", "codigo": "ABC123", "aerolinea": "latam", "vuelo": "LA800",
         "categorias": ["A"], "fecha_hora": "2025-11-23T10:00:00+00:00", "turno": "BRC-ERC", "firma": True},
        {"id": "b", "source": "siberia", "codigo": "DEF456", "vuelo": "H2500",
         "fecha_hora": "2025-11-23T14:00:00+00:00", "turno": "IRC-KRC", "firma": False},
    ]
    client = _DummyClient(_DummyResponse(200, json_data=rows))
    monkeypatch.setattr(httpx, "Client", lambda timeout: client)

    records = RestIncidentRepository(remote_settings).fetch_records(START, END)

    assert [r.id for r in records] == ["b", "a"]
    assert records[1].airline == "LATAM"
    call = client.calls[0]
    assert call["url"] == "https://store.example/rest/v1/unified_records"
    assert ("fecha_hora", f"gte.{START.isoformat()}") in call["params"]
    assert ("fecha_hora", f"lte.{END.isoformat()}") in call["params"]
    assert ("order", "fecha_hora.desc") in call["params"]
    assert call["headers"]["apikey"] == "anon-key"


def test_connect_error_is_connectivity(monkeypatch, remote_settings):
    client = _DummyClient(error=httpx.ConnectError("connection refused"))
    monkeypatch.setattr(httpx, "Client", lambda timeout: client)

    with pytest.raises(RepositoryConnectivityError):
        RestIncidentRepository(remote_settings).fetch_records(START, END)


def test_timeout_is_connectivity(monkeypatch, remote_settings):
    client = _DummyClient(error=httpx.ReadTimeout("timed out"))
    monkeypatch.setattr(httpx, "Client", lambda timeout: client)

    with pytest.raises(RepositoryConnectivityError):
        RestIncidentRepository(remote_settings).fetch_records(START, END)


def test_http_error_status_is_a_plain_fetch_error(monkeypatch, remote_settings):
    client = _DummyClient(_DummyResponse(500, text="internal error"))
    monkeypatch.setattr(httpx, "Client", lambda timeout: client)

    with pytest.raises(RepositoryFetchError) as excinfo:
        RestIncidentRepository(remote_settings).fetch_records(START, END)

    assert not isinstance(excinfo.value, RepositoryConnectivityError)
    assert "status=500" in str(excinfo.value)


@pytest.mark.parametrize("payload", [None, {"rows": []}, ["not-a-row"]])
def test_unexpected_payload_is_a_fetch_error(monkeypatch, remote_settings, payload):
    client = _DummyClient(_DummyResponse(200, json_data=payload))
    monkeypatch.setattr(httpx, "Client", lambda timeout: client)

    with pytest.raises(RepositoryFetchError):
        RestIncidentRepository(remote_settings).fetch_records(START, END)


def test_missing_store_url_is_rejected():
    with pytest.raises(RepositoryFetchError):
        RestIncidentRepository(Settings())
