from datetime import datetime
from io import BytesIO
from pathlib import Path
from zoneinfo import ZoneInfo

import pandas as pd
import pytest

from regisbags.domain.errors import RepositoryFetchError
from regisbags.infrastructure.repositories.tabular_repository import TabularIncidentRepository

LIMA = ZoneInfo("America/Lima")
DAY_START = datetime(2025, 11, 23, tzinfo=LIMA)
DAY_END = datetime(2025, 11, 23, 23, 59, 59, 999999, tzinfo=LIMA)

EXPORT_ROWS = [
    {
        "id": "1",
        "source": "counter",
        "codigo": "ABC123",
        "aerolinea": "LATAM",
        "vuelo": "LA800",
        "categorias": "A,B",
        "observacion": "Maleta dañada en asa",
        "fecha_hora": "2025-11-23T10:00:00Z",
        "usuario": "Juan Pérez",
        "turno": "BRC-ERC",
        "firma": "true",
    },
    {
        "id": "2",
        "source": "siberia",
        "codigo": "DEF456",
        "aerolinea": "",
        "vuelo": "H2500",
        "categorias": "",
        "observacion": "Rueda rota",
        "fecha_hora": "2025-11-23T14:00:00Z",
        "usuario": "María García",
        "turno": "IRC-KRC",
        "firma": "false",
    },
    {
        "id": "3",
        "source": "counter",
        "codigo": "XYZ000",
        "aerolinea": "Sky",
        "vuelo": "H2300",
        "categorias": "C",
        "observacion": "",
        "fecha_hora": "2025-11-25T14:00:00Z",
        "usuario": "Pedro López",
        "turno": "IRC-KRC",
        "firma": "false",
    },
]


def write_csv(path: Path) -> Path:
    pd.DataFrame(EXPORT_ROWS).to_csv(path, index=False)
    return path


def test_csv_export_filtered_to_range(tmp_path: Path, settings):
    repo = TabularIncidentRepository(write_csv(tmp_path / "unified_records.csv"), settings=settings)

    records = repo.fetch_records(DAY_START, DAY_END)

    assert [r.id for r in records] == ["2", "1"]
    assert records[0].airline is None
    assert records[0].categories == ()
    assert records[1].categories == ("A", "B")
    assert records[1].signed is True


def test_csv_bytes_with_file_name(tmp_path: Path, settings):
    data = write_csv(tmp_path / "export.csv").read_bytes()
    repo = TabularIncidentRepository(data, file_name="export.csv", settings=settings)

    assert len(repo.fetch_records(DAY_START, datetime(2025, 11, 30, tzinfo=LIMA))) == 3


def test_xlsx_export(tmp_path: Path, settings):
    path = tmp_path / "unified_records.xlsx"
    pd.DataFrame(EXPORT_ROWS).to_excel(path, index=False, engine="openpyxl")

    records = TabularIncidentRepository(path, settings=settings).fetch_records(DAY_START, DAY_END)

    assert [r.code for r in records] == ["DEF456", "ABC123"]
    assert records[1].timestamp == datetime(2025, 11, 23, 5, 0, tzinfo=LIMA)


def test_uploaded_workbook_buffer(tmp_path: Path, settings):
    buf = BytesIO()
    pd.DataFrame(EXPORT_ROWS).to_excel(buf, index=False, engine="openpyxl")

    repo = TabularIncidentRepository(BytesIO(buf.getvalue()), file_name="Registros.XLSX", settings=settings)

    assert len(repo.fetch_records(DAY_START, DAY_END)) == 2


def test_unreadable_workbook_raises_fetch_error(settings):
    repo = TabularIncidentRepository(b"definitely not a workbook", file_name="broken.xlsx", settings=settings)

    with pytest.raises(RepositoryFetchError):
        repo.fetch_records(DAY_START, DAY_END)


def test_empty_csv_raises_fetch_error(settings):
    repo = TabularIncidentRepository(b"", file_name="empty.csv", settings=settings)

    with pytest.raises(RepositoryFetchError):
        repo.fetch_records(DAY_START, DAY_END)


def test_rows_without_timestamp_raise_fetch_error(tmp_path: Path, settings):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{k: v for k, v in EXPORT_ROWS[0].items() if k != "fecha_hora"}]).to_csv(path, index=False)

    with pytest.raises(RepositoryFetchError):
        TabularIncidentRepository(path, settings=settings).fetch_records(DAY_START, DAY_END)


def test_missing_file_raises_fetch_error(tmp_path: Path, settings):
    with pytest.raises(RepositoryFetchError):
        TabularIncidentRepository(tmp_path / "missing.csv", settings=settings)
