"""Domain-level results produced by aggregation and report assembly."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Sequence

from .models import DateRange, PeriodSpec


@dataclass(frozen=True)
class SourceCounts:
    counter: int = 0
    siberia: int = 0


@dataclass(frozen=True)
class TopAirline:
    name: str
    count: int


@dataclass(frozen=True)
class TopCategory:
    code: str
    label: str
    count: int


@dataclass(frozen=True)
class BreakdownEntry:
    """One bar/slice of a chart: a display name and its count."""

    name: str
    value: int


@dataclass(frozen=True)
class FlightDamage:
    flight: str
    damages: int
    airline: str | None = None


@dataclass(frozen=True)
class ShiftAirlineRow:
    """Cross-tab row: Counter damages per known airline within one shift."""

    shift: str
    label: str
    counts: tuple[tuple[str, int], ...]

    def count(self, airline: str) -> int:
        for name, value in self.counts:
            if name == airline:
                return value
        return 0

    @property
    def total(self) -> int:
        return sum(value for _, value in self.counts)


@dataclass(frozen=True)
class ShiftSourceRow:
    shift: str
    counter: int
    siberia: int


@dataclass(frozen=True)
class TrendPoint:
    day: date
    counter: int
    siberia: int

    @property
    def total(self) -> int:
        return self.counter + self.siberia


@dataclass(frozen=True)
class AggregateStats:
    total: int
    by_source: SourceCounts
    signed_count: int
    unsigned_count: int
    signature_rate: int
    top_airline: TopAirline | None
    top_category: TopCategory | None
    shift_counts: Mapping[str, int]
    dominant_shift: str | None
    by_airline: Sequence[BreakdownEntry] = field(default_factory=tuple)
    by_category: Sequence[BreakdownEntry] = field(default_factory=tuple)
    top_flights: Sequence[FlightDamage] = field(default_factory=tuple)
    by_shift_and_airline: Sequence[ShiftAirlineRow] = field(default_factory=tuple)
    by_shift: Sequence[BreakdownEntry] = field(default_factory=tuple)
    shift_comparison: Sequence[ShiftSourceRow] = field(default_factory=tuple)
    daily_trend: Sequence[TrendPoint] = field(default_factory=tuple)

    @property
    def has_data(self) -> bool:
        return self.total > 0

    @property
    def top_flight(self) -> FlightDamage | None:
        return self.top_flights[0] if self.top_flights else None

    def share_of_total(self, value: int) -> float:
        """Percentage of ``value`` over the total, 0.0 for an empty period."""
        if not self.total:
            return 0.0
        return value / self.total * 100


@dataclass(frozen=True)
class Report:
    period: PeriodSpec
    period_label: str
    date_range: DateRange
    stats: AggregateStats
    generated_at: datetime

    @property
    def key(self) -> tuple[PeriodSpec, datetime]:
        """Identifies one generated report; artifacts rendered from it are valid only for this key."""
        return (self.period, self.generated_at)

    def is_for(self, period: PeriodSpec) -> bool:
        return self.period == period
