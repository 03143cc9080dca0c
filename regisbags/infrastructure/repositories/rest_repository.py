"""Record repository backed by the hosted record store's REST interface."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

import httpx

from regisbags.config import SETTINGS, Settings
from regisbags.domain.errors import RepositoryConnectivityError, RepositoryFetchError
from regisbags.domain.models import IncidentRecord
from regisbags.domain.repositories import IncidentRepository
from regisbags.infrastructure.parsing.normalize import rows_to_records

logger = logging.getLogger(__name__)


def store_headers(api_key: str) -> dict[str, str]:
    return {
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }


class RestIncidentRepository(IncidentRepository):
    """Queries ``/rest/v1/<table>`` for rows whose ``fecha_hora`` is in range."""

    def __init__(self, settings: Settings = SETTINGS) -> None:
        if not settings.store_url:
            raise RepositoryFetchError("REGISBAGS_STORE_URL is not configured")
        self._settings = settings
        self._endpoint = f"{settings.store_url}/rest/v1/{settings.records_table}"

    def fetch_records(self, start: datetime, end: datetime) -> Sequence[IncidentRecord]:
        params = [
            ("select", "*"),
            ("fecha_hora", f"gte.{start.isoformat()}"),
            ("fecha_hora", f"lte.{end.isoformat()}"),
            ("order", "fecha_hora.desc"),
        ]
        try:
            with httpx.Client(timeout=self._settings.request_timeout) as client:
                response = client.get(self._endpoint, params=params, headers=store_headers(self._settings.store_key))
        except httpx.TransportError as exc:
            logger.error("Record store unreachable: %s", exc)
            raise RepositoryConnectivityError(f"Record store unreachable: {exc}") from exc

        if not response.is_success:
            logger.error("Record store returned status=%s: %s", response.status_code, response.text[:200])
            raise RepositoryFetchError(f"Record store error status={response.status_code}")
        try:
            rows = response.json()
        except ValueError as exc:
            raise RepositoryFetchError("Record store returned a non-JSON payload") from exc
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise RepositoryFetchError("Record store payload is not a list of rows")

        records = rows_to_records(rows, self._settings)
        logger.debug("Fetched %d records from %s", len(records), self._settings.records_table)
        return records
