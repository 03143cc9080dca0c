from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from conftest import make_record

from regisbags.application.use_cases import GenerateReportUseCase, ReportContext
from regisbags.domain.errors import InvalidPeriodValue, RepositoryConnectivityError
from regisbags.domain.models import PeriodSpec, Source
from regisbags.infrastructure.repositories.memory_repository import InMemoryIncidentRepository

LIMA = ZoneInfo("America/Lima")
FIXED_NOW = datetime(2025, 11, 23, 21, 30, tzinfo=LIMA)


class RecordingRepository:
    def __init__(self, records=()) -> None:
        self.records = list(records)
        self.calls: list[tuple[datetime, datetime]] = []

    def fetch_records(self, start, end):
        self.calls.append((start, end))
        return self.records


class FailingRepository:
    def fetch_records(self, start, end):
        raise RepositoryConnectivityError("store unreachable")


def build_use_case(repository, settings) -> GenerateReportUseCase:
    return GenerateReportUseCase(ReportContext.from_settings(repository, settings, clock=lambda: FIXED_NOW))


def test_day_report_for_station_sample(seed_records, settings):
    outside = make_record("4", airline="SKY", timestamp=datetime(2025, 11, 24, 12, 0, tzinfo=timezone.utc))
    repository = InMemoryIncidentRepository([*seed_records, outside])

    response = build_use_case(repository, settings).execute(("day", "2025-11-23"))

    stats = response.report.stats
    assert stats.total == 3
    assert stats.by_source.counter == 2
    assert stats.by_source.siberia == 1
    assert stats.signed_count == 2
    assert stats.signature_rate == 67
    assert (stats.top_airline.name, stats.top_airline.count) == ("LATAM", 2)
    assert (stats.top_category.code, stats.top_category.label, stats.top_category.count) == ("A", "Asa rota", 2)
    assert stats.dominant_shift == "IRC-KRC"
    assert dict(stats.shift_counts) == {"BRC-ERC": 1, "IRC-KRC": 2}
    assert response.report.period_label == "23 de noviembre de 2025"
    assert response.report.generated_at == FIXED_NOW
    assert [r.id for r in response.records] == ["3", "2", "1"]


def test_period_boundaries_follow_station_timezone(settings):
    records = [
        # 22:00 in Lima on the 23rd
        make_record("late", timestamp=datetime(2025, 11, 24, 3, 0, tzinfo=timezone.utc)),
        # 00:00 in Lima on the 24th
        make_record("next", timestamp=datetime(2025, 11, 24, 5, 0, tzinfo=timezone.utc)),
        make_record("edge", timestamp=datetime(2025, 11, 23, 23, 59, 59, 999999, tzinfo=LIMA)),
    ]

    response = build_use_case(InMemoryIncidentRepository(records), settings).execute(("day", "2025-11-23"))

    assert {r.id for r in response.records} == {"late", "edge"}


def test_records_outside_range_are_filtered_again(seed_records, settings):
    stray = make_record("9", source=Source.SIBERIA, timestamp=datetime(2025, 12, 1, tzinfo=timezone.utc))
    repository = RecordingRepository([*seed_records, stray])

    response = build_use_case(repository, settings).execute(PeriodSpec.parse("week", "2025-W47"))

    assert response.report.stats.total == 3
    start, end = repository.calls[0]
    assert start == datetime(2025, 11, 17, tzinfo=LIMA)
    assert end.date().isoformat() == "2025-11-23"


def test_empty_period_is_not_an_error(settings):
    response = build_use_case(InMemoryIncidentRepository(), settings).execute(("year", "2024"))

    assert response.report.stats.total == 0
    assert response.records == ()


def test_invalid_period_fails_before_fetching(settings):
    repository = RecordingRepository()

    with pytest.raises(InvalidPeriodValue):
        build_use_case(repository, settings).execute(("month", "2025-13"))

    assert repository.calls == []


def test_repository_errors_propagate(settings):
    with pytest.raises(RepositoryConnectivityError):
        build_use_case(FailingRepository(), settings).execute(("day", "2025-11-23"))


def test_default_clock_uses_configured_timezone(settings):
    context = ReportContext.from_settings(InMemoryIncidentRepository(), settings)

    response = GenerateReportUseCase(context).execute(("day", "2025-11-23"))

    assert response.report.generated_at.tzinfo == settings.timezone


def test_naive_record_timestamps_are_station_local(settings):
    records = [
        make_record("naive", timestamp=datetime(2025, 11, 23, 22, 0), created_at=datetime(2025, 11, 23, 22, 5)),
        make_record("aware", timestamp=datetime(2025, 11, 23, 15, 0, tzinfo=timezone.utc)),
        make_record("after", timestamp=datetime(2025, 11, 24, 0, 30)),
    ]
    repository = InMemoryIncidentRepository(records, settings=settings)

    response = build_use_case(repository, settings).execute(("day", "2025-11-23"))

    assert [r.id for r in response.records] == ["naive", "aware"]
    naive = response.records[0]
    assert naive.timestamp == datetime(2025, 11, 23, 22, 0, tzinfo=LIMA)
    assert naive.created_at.tzinfo == LIMA
    assert response.records[1].timestamp.tzinfo == LIMA
    assert [(p.day, p.total) for p in response.report.stats.daily_trend] == [(date(2025, 11, 23), 2)]
