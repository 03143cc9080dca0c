"""Assembly of display-ready reports from aggregated statistics."""
from __future__ import annotations

from datetime import datetime

from .models import DateRange, PeriodSpec, PeriodType
from .periods import period_days
from .results import AggregateStats, Report

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def format_period_label(period: PeriodSpec) -> str:
    """Render ``period`` the way the station reads it, e.g. ``semana 47, 2025``."""
    first, _ = period_days(period)
    if period.period_type is PeriodType.DAY:
        return f"{first.day} de {MONTH_NAMES[first.month - 1]} de {first.year}"
    if period.period_type is PeriodType.WEEK:
        year, week = period.value.split("-W")
        return f"semana {int(week)}, {int(year)}"
    if period.period_type is PeriodType.MONTH:
        return f"{MONTH_NAMES[first.month - 1].capitalize()} {first.year}"
    return str(first.year)


class ReportAssembler:
    def assemble(
        self,
        period: PeriodSpec,
        date_range: DateRange,
        stats: AggregateStats,
        generated_at: datetime,
    ) -> Report:
        return Report(
            period=period,
            period_label=format_period_label(period),
            date_range=date_range,
            stats=stats,
            generated_at=generated_at,
        )
