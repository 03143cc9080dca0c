from datetime import datetime, timezone

import pytest

from regisbags.config import Settings
from regisbags.domain.models import IncidentRecord, Source


def make_record(
    record_id: str,
    source: Source = Source.COUNTER,
    code: str = "ABC123",
    timestamp: datetime = datetime(2025, 11, 23, 10, 0, tzinfo=timezone.utc),
    signed: bool = False,
    **fields,
) -> IncidentRecord:
    return IncidentRecord(id=record_id, source=source, code=code, timestamp=timestamp, signed=signed, **fields)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def seed_records() -> list[IncidentRecord]:
    """The three-record station sample, newest first."""
    return [
        make_record(
            "3",
            code="GHI789",
            airline="LATAM",
            flight="LA801",
            categories=("A",),
            observation="Asa completamente rota",
            timestamp=datetime(2025, 11, 23, 16, 0, tzinfo=timezone.utc),
            user="Pedro López",
            shift="IRC-KRC",
            signed=True,
        ),
        make_record(
            "2",
            source=Source.SIBERIA,
            code="DEF456",
            airline="SKY",
            flight="H2500",
            categories=("C",),
            observation="Rueda rota",
            timestamp=datetime(2025, 11, 23, 14, 0, tzinfo=timezone.utc),
            user="María García",
            shift="IRC-KRC",
            signed=False,
        ),
        make_record(
            "1",
            code="ABC123",
            airline="LATAM",
            flight="LA800",
            categories=("A", "B"),
            observation="Maleta dañada en asa",
            timestamp=datetime(2025, 11, 23, 10, 0, tzinfo=timezone.utc),
            user="Juan Pérez",
            shift="BRC-ERC",
            signed=True,
        ),
    ]
