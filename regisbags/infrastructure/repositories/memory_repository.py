"""In-memory record repository, used for demos, tests and already-loaded data."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Sequence

from regisbags.config import SETTINGS, Settings
from regisbags.domain.models import IncidentRecord
from regisbags.domain.repositories import IncidentRepository
from regisbags.infrastructure.parsing.normalize import newest_first
from regisbags.infrastructure.parsing.utils import localize


class InMemoryIncidentRepository(IncidentRepository):
    def __init__(self, records: Iterable[IncidentRecord] = (), settings: Settings = SETTINGS) -> None:
        self._timezone = settings.timezone
        self._records = [self._localized(record) for record in records]

    def _localized(self, record: IncidentRecord) -> IncidentRecord:
        """Bring every stored timestamp into the station zone."""
        tz = self._timezone
        return replace(
            record,
            timestamp=localize(record.timestamp, tz),
            created_at=localize(record.created_at, tz) if record.created_at else None,
            updated_at=localize(record.updated_at, tz) if record.updated_at else None,
        )

    def add(self, record: IncidentRecord) -> None:
        self._records.append(self._localized(record))

    def fetch_records(self, start: datetime, end: datetime) -> Sequence[IncidentRecord]:
        return newest_first(record for record in self._records if start <= record.timestamp <= end)
