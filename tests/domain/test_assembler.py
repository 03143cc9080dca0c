from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from regisbags.domain.assembler import ReportAssembler, format_period_label
from regisbags.domain.models import PeriodSpec
from regisbags.domain.periods import resolve_period
from regisbags.domain.services import IncidentAggregator


@pytest.mark.parametrize(
    "kind, value, label",
    [
        ("day", "2025-11-23", "23 de noviembre de 2025"),
        ("day", "2025-01-05", "5 de enero de 2025"),
        ("week", "2025-W47", "semana 47, 2025"),
        ("week", "2025-W01", "semana 1, 2025"),
        ("month", "2025-11", "Noviembre 2025"),
        ("year", "2025", "2025"),
    ],
)
def test_period_labels(kind: str, value: str, label: str):
    assert format_period_label(PeriodSpec.parse(kind, value)) == label


def test_assemble_carries_inputs_through():
    period = PeriodSpec.parse("day", "2025-11-23")
    date_range = resolve_period(period, ZoneInfo("America/Lima"))
    stats = IncidentAggregator().aggregate([])
    generated_at = datetime(2025, 11, 23, 20, 0, tzinfo=timezone.utc)

    report = ReportAssembler().assemble(period, date_range, stats, generated_at)

    assert report.period is period
    assert report.period_label == "23 de noviembre de 2025"
    assert report.date_range == date_range
    assert report.stats is stats
    assert report.generated_at == generated_at


def test_report_identity_tracks_period_and_generation_time():
    tz = ZoneInfo("America/Lima")
    assembler = ReportAssembler()
    stats = IncidentAggregator().aggregate([])

    def build(kind, value, generated_at):
        period = PeriodSpec.parse(kind, value)
        return assembler.assemble(period, resolve_period(period, tz), stats, generated_at)

    first = build("day", "2025-11-23", datetime(2025, 11, 23, 20, 0, tzinfo=tz))
    refreshed = build("day", "2025-11-23", datetime(2025, 11, 23, 20, 0, 10, tzinfo=tz))
    same = build("day", "2025-11-23", datetime(2025, 11, 23, 20, 0, tzinfo=tz))

    assert first.key == same.key
    assert first.key != refreshed.key
    assert first.is_for(PeriodSpec.parse("DAY", " 2025-11-23 "))
    assert not first.is_for(PeriodSpec.parse("week", "2025-W47"))


def test_same_value_under_another_period_type_is_a_different_report():
    tz = ZoneInfo("America/Lima")
    period = PeriodSpec.parse("year", "2025")
    report = ReportAssembler().assemble(
        period, resolve_period(period, tz), IncidentAggregator().aggregate([]), datetime(2025, 11, 23, tzinfo=tz)
    )

    assert report.is_for(PeriodSpec.parse("year", "2025"))
    assert not report.is_for(PeriodSpec.parse("month", "2025"))
