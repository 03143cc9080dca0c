"""Excel workbook export of a report and its records."""
from __future__ import annotations

from io import BytesIO
from typing import Sequence

import pandas as pd

from regisbags.domain.models import IncidentRecord
from regisbags.domain.results import Report
from regisbags.presentation.formatting import format_generated_at
from regisbags.presentation.records_export import priority_of

RECORD_COLUMNS = [
    "id",
    "source",
    "code",
    "airline",
    "flight",
    "categories",
    "observation",
    "timestamp",
    "user",
    "shift",
    "signed",
    "priority",
]

CRITICAL_FILL = "#FDECEA"


def _col_idx_to_excel(idx: int) -> str:
    letters = ""
    idx += 1
    while idx:
        idx, remainder = divmod(idx - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def summary_frame(report: Report) -> pd.DataFrame:
    stats = report.stats
    top_airline = stats.top_airline
    top_category = stats.top_category
    rows = [
        ("Periodo", report.period_label),
        ("Generado", format_generated_at(report.generated_at)),
        ("Total", stats.total),
        ("Counter", stats.by_source.counter),
        ("Siberia", stats.by_source.siberia),
        ("Con firma", stats.signed_count),
        ("Sin firma", stats.unsigned_count),
        ("Tasa de firmas (%)", stats.signature_rate),
        ("Turno dominante", stats.dominant_shift or ""),
        ("Aerolínea con más daños", f"{top_airline.name} ({top_airline.count})" if top_airline else ""),
        ("Daño más frecuente", f"{top_category.label} ({top_category.count})" if top_category else ""),
    ]
    rows += [(f"Turno {shift}", count) for shift, count in stats.shift_counts.items()]
    return pd.DataFrame(rows, columns=["indicador", "valor"])


def records_frame(records: Sequence[IncidentRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": r.id,
                "source": r.source.value,
                "code": r.code,
                "airline": r.airline or "",
                "flight": r.flight or "",
                "categories": ",".join(r.categories),
                "observation": r.observation or "",
                "timestamp": r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                "user": r.user or "",
                "shift": r.shift or "",
                "signed": r.signed,
                "priority": priority_of(r),
            }
            for r in records
        ],
        columns=RECORD_COLUMNS,
    )


def build_report_workbook(report: Report, records: Sequence[IncidentRecord]) -> bytes:
    stats = report.stats
    airlines = pd.DataFrame([(e.name, e.value) for e in stats.by_airline], columns=["aerolinea", "cantidad"])
    categories = pd.DataFrame([(e.name, e.value) for e in stats.by_category], columns=["categoria", "cantidad"])
    flights = pd.DataFrame(
        [(f.flight, f.airline or "", f.damages) for f in stats.top_flights],
        columns=["vuelo", "aerolinea", "danos"],
    )
    export_records = records_frame(records)

    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        summary_frame(report).to_excel(writer, sheet_name="resumen", index=False)
        airlines.to_excel(writer, sheet_name="aerolineas", index=False)
        categories.to_excel(writer, sheet_name="categorias", index=False)
        flights.to_excel(writer, sheet_name="vuelos", index=False)
        sheet = "registros"
        export_records.to_excel(writer, sheet_name=sheet, index=False)
        if not export_records.empty:
            workbook = writer.book
            worksheet = writer.sheets[sheet]
            critical = workbook.add_format({"bg_color": CRITICAL_FILL})
            priority_letter = _col_idx_to_excel(export_records.columns.get_loc("priority"))
            worksheet.conditional_format(
                1,
                0,
                len(export_records),
                len(RECORD_COLUMNS) - 1,
                {"type": "formula", "criteria": f'=${priority_letter}2="HIGH"', "format": critical},
            )
    buf.seek(0)
    return buf.getvalue()
