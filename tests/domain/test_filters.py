from datetime import date
from zoneinfo import ZoneInfo

from regisbags.domain.filters import RecordFilter
from regisbags.domain.models import Source

LIMA = ZoneInfo("America/Lima")


def ids(records) -> list[str]:
    return [r.id for r in records]


def test_empty_filter_keeps_everything_in_order(seed_records):
    assert ids(RecordFilter().apply(seed_records)) == ["3", "2", "1"]


def test_airline_filter_ignores_case(seed_records):
    assert ids(RecordFilter(airline="latam").apply(seed_records)) == ["3", "1"]


def test_signature_filter(seed_records):
    assert ids(RecordFilter(signed=False).apply(seed_records)) == ["2"]
    assert ids(RecordFilter(signed=True).apply(seed_records)) == ["3", "1"]


def test_source_and_shift_filters(seed_records):
    assert ids(RecordFilter(source=Source.SIBERIA).apply(seed_records)) == ["2"]
    assert ids(RecordFilter(shift="IRC-KRC").apply(seed_records)) == ["3", "2"]
    assert ids(RecordFilter(shift="IRC-KRC", source=Source.COUNTER).apply(seed_records)) == ["3"]


def test_query_matches_code_flight_airline_and_observation(seed_records):
    assert ids(RecordFilter(query="rota").apply(seed_records)) == ["3", "2"]
    assert ids(RecordFilter(query="h25").apply(seed_records)) == ["2"]
    assert ids(RecordFilter(query="abc").apply(seed_records)) == ["1"]
    assert ids(RecordFilter(query="sky").apply(seed_records)) == ["2"]
    assert ids(RecordFilter(query="nada").apply(seed_records)) == []


def test_date_bounds_use_local_dates(seed_records):
    assert ids(RecordFilter(date_from=date(2025, 11, 23), date_to=date(2025, 11, 23)).apply(seed_records, LIMA)) == [
        "3",
        "2",
        "1",
    ]
    assert RecordFilter(date_from=date(2025, 11, 24)).apply(seed_records, LIMA) == []
    assert RecordFilter(date_to=date(2025, 11, 22)).apply(seed_records, LIMA) == []
