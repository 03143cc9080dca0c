"""Printable report document, rendered to PDF with WeasyPrint."""
from __future__ import annotations

import logging
from html import escape
from typing import Iterable, Sequence

from regisbags.domain.models import IncidentRecord
from regisbags.domain.results import Report
from regisbags.domain.services import partition_by_signature
from regisbags.presentation.formatting import format_generated_at, format_share

logger = logging.getLogger(__name__)

DOCUMENT_STYLE = """
@page { size: A4; margin: 14mm; }
body { font-family: Helvetica, Arial, sans-serif; font-size: 9pt; color: #222222; }
h1 { font-size: 18pt; margin-bottom: 4px; }
h2 { font-size: 12pt; margin-top: 18px; }
h2.critical { color: #c62828; }
.meta { color: #555555; }
table { width: 100%; border-collapse: collapse; margin-top: 6px; }
th { background-color: #f5f5f5; text-align: left; }
th, td { border: 1px solid #dddddd; padding: 4px 6px; }
tr.critical td { background-color: #fdecea; }
.num { text-align: right; }
footer { margin-top: 24px; font-size: 8pt; color: #555555; }
"""

RECORD_HEADERS = ("Código", "Vuelo", "Observación", "Turno")


def _table(headers: Iterable[str], rows: Iterable[Iterable[object]], row_class: str = "") -> str:
    head = "".join(f"<th>{escape(str(header))}</th>" for header in headers)
    class_attr = f' class="{row_class}"' if row_class else ""
    body = "".join(
        f"<tr{class_attr}>" + "".join(f"<td>{escape(str(value))}</td>" for value in row) + "</tr>"
        for row in rows
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def _record_rows(records: Sequence[IncidentRecord]) -> list[tuple[str, str, str, str]]:
    return [
        (record.code, record.flight or "", record.observation or "", record.shift or "")
        for record in records
    ]


def render_report_html(report: Report, records: Sequence[IncidentRecord], station: str = "Cusco") -> str:
    stats = report.stats
    critical, signed = partition_by_signature(records)

    summary = _table(
        ("Indicador", "Valor"),
        [
            ("Total de maletas registradas", stats.total),
            ("Counter", stats.by_source.counter),
            ("Siberia", stats.by_source.siberia),
            ("Con firma", stats.signed_count),
            ("Casos críticos (sin firma)", stats.unsigned_count),
            ("Tasa de firmas", f"{stats.signature_rate}%"),
            ("Turno dominante", stats.dominant_shift or "-"),
        ],
    )
    sections = [f"<h2>Resumen</h2>{summary}"]

    if stats.by_airline:
        rows = [(entry.name, entry.value, format_share(stats, entry.value)) for entry in stats.by_airline]
        sections.append("<h2>Daños por aerolínea</h2>" + _table(("Aerolínea", "Cantidad", "Porcentaje"), rows))
    if stats.by_category:
        rows = [(entry.name, entry.value, format_share(stats, entry.value)) for entry in stats.by_category]
        sections.append("<h2>Daños por categoría</h2>" + _table(("Categoría", "Cantidad", "Porcentaje"), rows))
    if stats.by_shift_and_airline:
        airlines = [name for name, _ in stats.by_shift_and_airline[0].counts]
        rows = [[row.label, *(value for _, value in row.counts)] for row in stats.by_shift_and_airline]
        sections.append("<h2>Turno por aerolínea</h2>" + _table(("Turno", *airlines), rows))
    if stats.top_flights:
        rows = [(flight.flight, flight.airline or "-", flight.damages) for flight in stats.top_flights]
        sections.append("<h2>Vuelos con más daños</h2>" + _table(("Vuelo", "Aerolínea", "Daños"), rows))
    if critical:
        sections.append(
            '<h2 class="critical">Maletas registradas sin firma</h2>'
            + _table(RECORD_HEADERS, _record_rows(critical), row_class="critical")
        )
    if signed:
        sections.append("<h2>Maletas registradas con firma</h2>" + _table(RECORD_HEADERS, _record_rows(signed)))

    date_range = report.date_range
    return f"""<!DOCTYPE html>
<html lang="es">
<head><meta charset="UTF-8"><title>Reporte de maletas dañadas - {escape(report.period_label)}</title>
<style>{DOCUMENT_STYLE}</style></head>
<body>
<h1>REPORTE DE MALETAS DAÑADAS</h1>
<p class="meta">Periodo: {escape(report.period_label)}
({date_range.start:%d/%m/%Y %H:%M} &ndash; {date_range.end:%d/%m/%Y %H:%M})</p>
{"".join(sections)}
<footer>
<p>Reporte generado por la estación {escape(station)}</p>
<p>Fecha y hora de generación: {format_generated_at(report.generated_at)}</p>
</footer>
</body>
</html>"""


def render_pdf(report: Report, records: Sequence[IncidentRecord], station: str = "Cusco") -> bytes:
    from weasyprint import HTML

    document = render_report_html(report, records, station)
    pdf = HTML(string=document).write_pdf()
    logger.info("Rendered PDF for %s (%d bytes)", report.period_label, len(pdf))
    return pdf
