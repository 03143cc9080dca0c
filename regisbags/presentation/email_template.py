"""HTML and plain-text bodies for the emailed damage report."""
from __future__ import annotations

from html import escape

from regisbags.domain.results import Report
from regisbags.presentation.formatting import dominant_shift_count, format_generated_at, format_share

FOOTER = "RegisBags - Sistema de Registro de Maletas Dañadas"

EMAIL_STYLE = """
body { margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f5f5f5; color: #333333; }
.container { max-width: 600px; margin: 0 auto; background-color: #ffffff; }
.header { background: #667eea; padding: 30px 20px; text-align: center; color: #ffffff; }
.content { padding: 30px 20px; }
.section-title { font-size: 20px; border-bottom: 2px solid #667eea; padding-bottom: 10px; }
.stat-cell { padding: 15px; border: 1px solid #e5e7eb; background-color: #f9fafb; width: 50%; }
.stat-value { font-size: 24px; font-weight: 700; }
.table { width: 100%; border-collapse: collapse; }
.table th { background-color: #667eea; color: #ffffff; padding: 12px; text-align: left; }
.table td { padding: 12px; border-bottom: 1px solid #e5e7eb; }
.highlight-box { background-color: #d1fae5; border-left: 4px solid #10b981; padding: 12px; }
.highlight-box.warning { background-color: #fef3c7; border-left-color: #f59e0b; }
.footer { padding: 20px; text-align: center; font-size: 12px; color: #6b7280; }
"""


def default_subject(report: Report) -> str:
    return f"Reporte de Daños - {report.period_label}"


def _target_box(rate: int, target: int) -> str:
    if rate >= target:
        return (
            '<div class="highlight-box"><p><strong>Objetivo cumplido:</strong> '
            f"La tasa de firmas supera el {target}%</p></div>"
        )
    return (
        '<div class="highlight-box warning"><p><strong>Atención:</strong> '
        f"La tasa de firmas está por debajo del objetivo ({target}%)</p></div>"
    )


def _breakdown_table(title: str, column: str, entries, report: Report) -> str:
    stats = report.stats
    body = "".join(
        f"<tr><td>{escape(entry.name)}</td>"
        f'<td style="text-align: right;">{entry.value}</td>'
        f'<td style="text-align: right;">{format_share(stats, entry.value)}</td></tr>'
        for entry in entries
    )
    return (
        f'<h2 class="section-title">{title}</h2>'
        f'<table class="table"><thead><tr><th>{column}</th><th>Cantidad</th><th>Porcentaje</th></tr></thead>'
        f"<tbody>{body}</tbody></table>"
    )


def render_email_html(report: Report, signature_target: int = 80) -> str:
    stats = report.stats
    label = escape(report.period_label)
    dominant = escape(stats.dominant_shift or "-")

    highlights = []
    if stats.top_airline:
        highlights.append(
            f"<p><strong>Aerolínea con más daños:</strong> {escape(stats.top_airline.name)} "
            f"({stats.top_airline.count} casos)</p>"
        )
    if stats.top_category:
        highlights.append(
            f"<p><strong>Tipo de daño más frecuente:</strong> {escape(stats.top_category.label)} "
            f"({stats.top_category.count} casos)</p>"
        )

    flights = ""
    if stats.top_flights:
        rows = "".join(
            f"<tr><td><strong>{index}. {escape(flight.flight)}</strong></td>"
            f'<td style="text-align: right;">{flight.damages}</td></tr>'
            for index, flight in enumerate(stats.top_flights, start=1)
        )
        flights = (
            f'<h2 class="section-title">Vuelos con Más Daños (Top {len(stats.top_flights)})</h2>'
            f'<table class="table"><thead><tr><th>Vuelo</th><th>Daños</th></tr></thead><tbody>{rows}</tbody></table>'
        )

    return f"""<!DOCTYPE html>
<html lang="es">
<head>
<meta charset="UTF-8">
<title>Reporte de Daños - {label}</title>
<style>{EMAIL_STYLE}</style>
</head>
<body>
<div class="container">
<div class="header"><h1>Reporte de Daños</h1><p>{label}</p></div>
<div class="content">
<h2 class="section-title">Resumen Ejecutivo</h2>
<table class="table">
<tr>
<td class="stat-cell">Total de Daños<div class="stat-value">{stats.total}</div>Registros totales</td>
<td class="stat-cell">Tasa de Firmas<div class="stat-value">{stats.signature_rate}%</div>{stats.signed_count}/{stats.total} firmados</td>
</tr>
<tr>
<td class="stat-cell">Casos Severos<div class="stat-value">{stats.by_source.siberia}</div>Con fotografía</td>
<td class="stat-cell">Turno Dominante<div class="stat-value">{dominant}</div>{dominant_shift_count(stats)} registros</td>
</tr>
</table>
{_target_box(stats.signature_rate, signature_target)}
<h2 class="section-title">Indicadores Principales</h2>
{"".join(highlights)}
{_breakdown_table("Daños por Aerolínea", "Aerolínea", stats.by_airline, report)}
{_breakdown_table("Daños por Categoría", "Categoría", stats.by_category, report)}
{flights}
</div>
<div class="footer">
<p><strong>RegisBags</strong> - Sistema de Registro de Maletas Dañadas</p>
<p>Generado el {format_generated_at(report.generated_at)}</p>
<p>Este es un correo automático. Por favor no responder a este mensaje.</p>
</div>
</div>
</body>
</html>"""


def render_email_text(report: Report, signature_target: int = 80) -> str:
    stats = report.stats
    lines = [
        f"REPORTE DE DAÑOS - {report.period_label}",
        "=" * 50,
        "",
        "RESUMEN EJECUTIVO",
        "-----------------",
        f"Total de Daños: {stats.total}",
        f"Tasa de Firmas: {stats.signature_rate}% ({stats.signed_count}/{stats.total})",
        f"Casos Severos: {stats.by_source.siberia}",
        f"Turno Dominante: {stats.dominant_shift or '-'} ({dominant_shift_count(stats)} registros)",
    ]
    if stats.signature_rate >= signature_target:
        lines.append(f"Objetivo cumplido: la tasa de firmas supera el {signature_target}%")
    else:
        lines.append(f"Atención: la tasa de firmas está por debajo del objetivo ({signature_target}%)")
    lines.append("")
    if stats.top_airline:
        lines.append(f"Aerolínea con más daños: {stats.top_airline.name} ({stats.top_airline.count} casos)")
    if stats.top_category:
        lines.append(f"Tipo de daño más frecuente: {stats.top_category.label} ({stats.top_category.count} casos)")

    lines += ["", "DAÑOS POR AEROLÍNEA", "-------------------"]
    lines += [f"{entry.name}: {entry.value} ({format_share(stats, entry.value)})" for entry in stats.by_airline]
    lines += ["", "DAÑOS POR CATEGORÍA", "-------------------"]
    lines += [f"{entry.name}: {entry.value} ({format_share(stats, entry.value)})" for entry in stats.by_category]

    if stats.top_flights:
        lines += ["", f"VUELOS CON MÁS DAÑOS (TOP {len(stats.top_flights)})", "-----------------------------"]
        lines += [
            f"{index}. {flight.flight}: {flight.damages} daños"
            for index, flight in enumerate(stats.top_flights, start=1)
        ]

    lines += ["", "---", FOOTER, f"Generado el {format_generated_at(report.generated_at)}"]
    return "\n".join(lines)
