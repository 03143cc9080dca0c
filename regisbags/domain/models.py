"""Domain models for the damaged-baggage reporting pipeline.

These dataclasses capture the canonical schema for incident records after the
repository adapters have normalised whatever shape the record store returned.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .errors import InvalidPeriodValue


class Source(str, Enum):
    """Intake point an incident was recorded at."""

    COUNTER = "counter"
    SIBERIA = "siberia"


class PeriodType(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class ShiftDefinition:
    code: str
    label: str

    @property
    def display_name(self) -> str:
        return f"{self.code} ({self.label})"


@dataclass(frozen=True)
class CategoryDefinition:
    code: str
    label: str

    @property
    def display_name(self) -> str:
        return f"Categoría {self.code}"


@dataclass(frozen=True)
class IncidentRecord:
    """A single damaged-baggage incident as recorded at Counter or Siberia."""

    id: str
    source: Source
    code: str
    timestamp: datetime
    signed: bool = False
    airline: str | None = None
    flight: str | None = None
    categories: tuple[str, ...] = ()
    observation: str | None = None
    user: str | None = None
    shift: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_counter(self) -> bool:
        return self.source is Source.COUNTER

    @property
    def is_critical(self) -> bool:
        # Unsigned incidents are the ones that still need a sign-off.
        return not self.signed


@dataclass(frozen=True)
class PeriodSpec:
    """A reporting period selection such as ``week`` / ``2025-W47``."""

    period_type: PeriodType
    value: str

    @classmethod
    def parse(cls, period_type: str | PeriodType, value: str) -> "PeriodSpec":
        if isinstance(period_type, PeriodType):
            resolved = period_type
        else:
            try:
                resolved = PeriodType(str(period_type).strip().lower())
            except ValueError as exc:
                raise InvalidPeriodValue(str(period_type), value, "unknown period type") from exc
        return cls(period_type=resolved, value=str(value).strip())


@dataclass(frozen=True)
class DateRange:
    """Inclusive time range; both ends are timezone-aware."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end
