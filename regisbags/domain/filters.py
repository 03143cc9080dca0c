"""Record filtering used by the dashboard and the Counter/Siberia listings."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable

from .models import IncidentRecord, Source


@dataclass(slots=True, frozen=True)
class RecordFilter:
    """Optional criteria; ``None`` leaves a dimension unfiltered.

    ``signed`` keeps only signed records when True and only unsigned ones when
    False. ``date_from``/``date_to`` are inclusive local calendar dates.
    """

    airline: str | None = None
    shift: str | None = None
    source: Source | None = None
    signed: bool | None = None
    date_from: date | None = None
    date_to: date | None = None
    query: str | None = None

    def matches(self, record: IncidentRecord, tz: tzinfo | None = None) -> bool:
        if self.airline and (record.airline or "").upper() != self.airline.upper():
            return False
        if self.shift and record.shift != self.shift:
            return False
        if self.source is not None and record.source is not self.source:
            return False
        if self.signed is not None and record.signed != self.signed:
            return False
        if self.date_from or self.date_to:
            moment = record.timestamp.astimezone(tz) if tz is not None else record.timestamp
            day = moment.date()
            if self.date_from and day < self.date_from:
                return False
            if self.date_to and day > self.date_to:
                return False
        if self.query:
            needle = self.query.strip().lower()
            haystack = (record.code, record.flight, record.airline, record.observation)
            if needle and not any(needle in value.lower() for value in haystack if value):
                return False
        return True

    def apply(self, records: Iterable[IncidentRecord], tz: tzinfo | None = None) -> list[IncidentRecord]:
        return [record for record in records if self.matches(record, tz)]
