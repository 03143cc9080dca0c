"""Per-record exports: CSV rows and report file naming."""
from __future__ import annotations

import csv
import io
from datetime import datetime, tzinfo
from typing import Sequence

from regisbags.domain.models import IncidentRecord

CSV_COLUMNS = ["code", "flight", "observation", "shift", "priority"]

HIGH_PRIORITY = "HIGH"
MEDIUM_PRIORITY = "MEDIUM"


def priority_of(record: IncidentRecord) -> str:
    return MEDIUM_PRIORITY if record.signed else HIGH_PRIORITY


def report_file_name(generated_at: datetime, prefix: str = "REP_CUS_MALETAS", tz: tzinfo | None = None) -> str:
    """``<prefix>_YYYYMMDD`` for the local generation date, without extension."""
    local = generated_at.astimezone(tz) if tz is not None else generated_at
    return f"{prefix}_{local:%Y%m%d}"


def records_to_rows(records: Sequence[IncidentRecord]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for record in records:
        rows.append(
            {
                "code": record.code,
                "flight": record.flight or "",
                "observation": record.observation or "",
                "shift": record.shift or "",
                "priority": priority_of(record),
            }
        )
    return rows


def render_csv(records: Sequence[IncidentRecord]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    writer.writerows(records_to_rows(records))
    return buffer.getvalue().encode("utf-8")
