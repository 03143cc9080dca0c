"""Domain services implementing the aggregation rules."""
from __future__ import annotations

from datetime import date, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Sequence

from regisbags.config import DAMAGE_CATEGORIES, KNOWN_AIRLINES, PRIMARY_SHIFTS, Settings

from .models import CategoryDefinition, DateRange, IncidentRecord, ShiftDefinition, Source
from .results import (
    AggregateStats,
    BreakdownEntry,
    FlightDamage,
    ShiftAirlineRow,
    ShiftSourceRow,
    SourceCounts,
    TopAirline,
    TopCategory,
    TrendPoint,
)


def signature_rate(signed: int, total: int) -> int:
    """Whole percentage of signed records, rounding halves up."""
    if total <= 0:
        return 0
    rate = Decimal(signed) * 100 / Decimal(total)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def filter_in_range(records: Iterable[IncidentRecord], date_range: DateRange) -> list[IncidentRecord]:
    return [record for record in records if date_range.contains(record.timestamp)]


def partition_by_signature(
    records: Iterable[IncidentRecord],
) -> tuple[list[IncidentRecord], list[IncidentRecord]]:
    """Split records into (unsigned, signed), keeping input order in both."""
    critical: list[IncidentRecord] = []
    normal: list[IncidentRecord] = []
    for record in records:
        (critical if record.is_critical else normal).append(record)
    return critical, normal


def _first_max(counts: Mapping[str, int]) -> tuple[str, int] | None:
    # dicts keep insertion order, so the earliest key wins a tie.
    best: tuple[str, int] | None = None
    for key, count in counts.items():
        if best is None or count > best[1]:
            best = (key, count)
    return best


def _ranked(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    # sorted() is stable: equal counts stay in first-seen order.
    return sorted(counts.items(), key=lambda item: -item[1])


class IncidentAggregator:
    """Computes the statistics shown on the dashboard and in every export.

    The aggregator holds configuration only; every call to :meth:`aggregate`
    builds its tallies from scratch.
    """

    def __init__(
        self,
        shifts: Sequence[ShiftDefinition] = PRIMARY_SHIFTS,
        airlines: Sequence[str] = KNOWN_AIRLINES,
        categories: Sequence[CategoryDefinition] = DAMAGE_CATEGORIES,
        top_flights_limit: int = 5,
        timezone: tzinfo | None = None,
    ) -> None:
        self._shifts = tuple(shifts)
        self._airlines = tuple(airlines)
        self._categories = {category.code: category for category in categories}
        self._top_flights_limit = top_flights_limit
        self._timezone = timezone

    @classmethod
    def from_settings(cls, settings: Settings) -> "IncidentAggregator":
        return cls(
            shifts=settings.shifts,
            airlines=settings.airlines,
            categories=settings.categories,
            top_flights_limit=settings.top_flights_limit,
            timezone=settings.timezone,
        )

    def aggregate(self, records: Sequence[IncidentRecord]) -> AggregateStats:
        total = len(records)
        counter = sum(1 for record in records if record.source is Source.COUNTER)
        siberia = sum(1 for record in records if record.source is Source.SIBERIA)
        signed = sum(1 for record in records if record.signed)

        airline_counts = self._airline_counts(records)
        category_counts = self._category_counts(records)
        shift_counts = self._shift_counts(records)

        return AggregateStats(
            total=total,
            by_source=SourceCounts(counter=counter, siberia=siberia),
            signed_count=signed,
            unsigned_count=total - signed,
            signature_rate=signature_rate(signed, total),
            top_airline=self._top_airline(airline_counts),
            top_category=self._top_category(category_counts),
            shift_counts=shift_counts,
            dominant_shift=self._dominant_shift(shift_counts),
            by_airline=tuple(BreakdownEntry(name, value) for name, value in _ranked(airline_counts)),
            by_category=tuple(
                BreakdownEntry(self._category_name(code), value) for code, value in _ranked(category_counts)
            ),
            top_flights=self._top_flights(records),
            by_shift_and_airline=self._shift_airline_matrix(records),
            by_shift=tuple(BreakdownEntry(code, count) for code, count in shift_counts.items()),
            shift_comparison=self._shift_comparison(records),
            daily_trend=self._daily_trend(records),
        )

    @staticmethod
    def _airline_counts(records: Sequence[IncidentRecord]) -> dict[str, int]:
        counts: dict[str, int] = {}
        for record in records:
            if record.is_counter and record.airline:
                counts[record.airline] = counts.get(record.airline, 0) + 1
        return counts

    @staticmethod
    def _category_counts(records: Sequence[IncidentRecord]) -> dict[str, int]:
        counts: dict[str, int] = {}
        for record in records:
            if not record.is_counter:
                continue
            for code in record.categories:
                counts[code] = counts.get(code, 0) + 1
        return counts

    def _shift_counts(self, records: Sequence[IncidentRecord]) -> dict[str, int]:
        counts = {shift.code: 0 for shift in self._shifts}
        for record in records:
            if record.shift in counts:
                counts[record.shift] += 1
        return counts

    @staticmethod
    def _top_airline(counts: Mapping[str, int]) -> TopAirline | None:
        best = _first_max(counts)
        if best is None:
            return None
        return TopAirline(name=best[0], count=best[1])

    def _top_category(self, counts: Mapping[str, int]) -> TopCategory | None:
        best = _first_max(counts)
        if best is None:
            return None
        code, count = best
        category = self._categories.get(code)
        return TopCategory(code=code, label=category.label if category else code, count=count)

    def _dominant_shift(self, counts: Mapping[str, int]) -> str | None:
        # Shift table order is the preference order on ties.
        best = _first_max(counts)
        return best[0] if best else None

    def _category_name(self, code: str) -> str:
        category = self._categories.get(code)
        return category.display_name if category else f"Categoría {code}"

    def _top_flights(self, records: Sequence[IncidentRecord]) -> tuple[FlightDamage, ...]:
        counts: dict[str, int] = {}
        airlines: dict[str, str] = {}
        for record in records:
            if not record.flight:
                continue
            counts[record.flight] = counts.get(record.flight, 0) + 1
            if record.is_counter and record.airline and record.flight not in airlines:
                airlines[record.flight] = record.airline
        ranked = _ranked(counts)[: max(self._top_flights_limit, 0)]
        return tuple(
            FlightDamage(flight=flight, damages=damages, airline=airlines.get(flight))
            for flight, damages in ranked
        )

    def _shift_airline_matrix(self, records: Sequence[IncidentRecord]) -> tuple[ShiftAirlineRow, ...]:
        matrix = {shift.code: {airline: 0 for airline in self._airlines} for shift in self._shifts}
        for record in records:
            if not record.is_counter or record.shift not in matrix:
                continue
            row = matrix[record.shift]
            if record.airline in row:
                row[record.airline] += 1
        return tuple(
            ShiftAirlineRow(
                shift=shift.code,
                label=shift.display_name,
                counts=tuple(matrix[shift.code].items()),
            )
            for shift in self._shifts
        )

    def _shift_comparison(self, records: Sequence[IncidentRecord]) -> tuple[ShiftSourceRow, ...]:
        tally = {shift.code: [0, 0] for shift in self._shifts}
        for record in records:
            if record.shift not in tally:
                continue
            tally[record.shift][0 if record.is_counter else 1] += 1
        return tuple(
            ShiftSourceRow(shift=code, counter=counter, siberia=siberia)
            for code, (counter, siberia) in tally.items()
        )

    def _daily_trend(self, records: Sequence[IncidentRecord]) -> tuple[TrendPoint, ...]:
        tally: dict[date, list[int]] = {}
        for record in records:
            moment = record.timestamp
            if self._timezone is not None:
                # naive stamps are already wall-clock time in the station zone
                if moment.tzinfo is None:
                    moment = moment.replace(tzinfo=self._timezone)
                else:
                    moment = moment.astimezone(self._timezone)
            counts = tally.setdefault(moment.date(), [0, 0])
            counts[0 if record.is_counter else 1] += 1
        return tuple(
            TrendPoint(day=day, counter=counter, siberia=siberia)
            for day, (counter, siberia) in sorted(tally.items())
        )
