"""Application services orchestrating the report workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Callable

from regisbags.config import SETTINGS, Settings
from regisbags.domain.assembler import ReportAssembler
from regisbags.domain.models import PeriodSpec
from regisbags.domain.periods import resolve_period
from regisbags.domain.repositories import IncidentRepository
from regisbags.domain.services import IncidentAggregator, filter_in_range

from .dto import ReportResponse

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReportContext:
    repository: IncidentRepository
    aggregator: IncidentAggregator
    assembler: ReportAssembler
    timezone: tzinfo
    clock: Callable[[], datetime] | None = None

    @classmethod
    def from_settings(
        cls,
        repository: IncidentRepository,
        settings: Settings = SETTINGS,
        clock: Callable[[], datetime] | None = None,
    ) -> "ReportContext":
        return cls(
            repository=repository,
            aggregator=IncidentAggregator.from_settings(settings),
            assembler=ReportAssembler(),
            timezone=settings.timezone,
            clock=clock,
        )

    def now(self) -> datetime:
        if self.clock is not None:
            return self.clock()
        return datetime.now(self.timezone)


class GenerateReportUseCase:
    def __init__(self, context: ReportContext) -> None:
        self._context = context

    def execute(self, period: PeriodSpec | tuple[str, str]) -> ReportResponse:
        if not isinstance(period, PeriodSpec):
            period = PeriodSpec.parse(*period)
        date_range = resolve_period(period, self._context.timezone)
        logger.info(
            "Generating %s report for %s (%s .. %s)",
            period.period_type.value,
            period.value,
            date_range.start.isoformat(),
            date_range.end.isoformat(),
        )

        fetched = self._context.repository.fetch_records(date_range.start, date_range.end)
        records = filter_in_range(fetched, date_range)
        if len(records) != len(fetched):
            logger.warning("Dropped %d records outside %s", len(fetched) - len(records), period.value)

        stats = self._context.aggregator.aggregate(records)
        report = self._context.assembler.assemble(period, date_range, stats, self._context.now())
        logger.info("Report %s: %d records, signature rate %d%%", report.period_label, stats.total, stats.signature_rate)
        return ReportResponse(report=report, records=tuple(records))
