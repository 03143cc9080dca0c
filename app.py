"""Streamlit dashboard for the damaged-baggage reports."""
from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Sequence

import pandas as pd
import streamlit as st

from regisbags import GenerateReportUseCase, ReportContext, TabularIncidentRepository
from regisbags.application.delivery import SendReportEmailUseCase
from regisbags.application.dto import ReportResponse
from regisbags.application.refresh import ReportRefresher
from regisbags.config import SETTINGS
from regisbags.domain.errors import RegisbagsError, RepositoryConnectivityError
from regisbags.domain.filters import RecordFilter
from regisbags.domain.models import IncidentRecord, PeriodSpec, Source
from regisbags.infrastructure.delivery.edge_function_mailer import EdgeFunctionMailer
from regisbags.infrastructure.repositories.rest_repository import RestIncidentRepository
from regisbags.observability import setup_logging
from regisbags.presentation.email_template import render_email_html
from regisbags.presentation.pdf_report import render_pdf, render_report_html
from regisbags.presentation.records_export import priority_of, render_csv, report_file_name
from regisbags.presentation.xlsx_export import build_report_workbook

MONTHS = ["Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio", "Julio", "Agosto",
          "Septiembre", "Octubre", "Noviembre", "Diciembre"]

setup_logging(SETTINGS.log_level, SETTINGS.json_logs)
st.set_page_config(page_title="RegisBags", layout="wide")
st.title("RegisBags - Maletas Dañadas")


def records_to_dataframe(records: Sequence[IncidentRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "fecha": r.timestamp.astimezone(SETTINGS.timezone).strftime("%d/%m/%Y %H:%M"),
                "origen": r.source.value,
                "codigo": r.code,
                "aerolinea": r.airline or "",
                "vuelo": r.flight or "",
                "categorias": ", ".join(r.categories),
                "observacion": r.observation or "",
                "turno": r.shift or "",
                "usuario": r.user or "",
                "firma": r.signed,
                "prioridad": priority_of(r),
            }
            for r in records
        ]
    )


def select_period() -> tuple[str, str]:
    period_type = st.sidebar.selectbox(
        "Periodo",
        ["day", "week", "month", "year"],
        format_func=lambda kind: {"day": "Día", "week": "Semana", "month": "Mes", "year": "Año"}[kind],
    )
    today = datetime.now(SETTINGS.timezone).date()
    if period_type == "day":
        picked = st.sidebar.date_input("Fecha", value=today)
        return period_type, picked.isoformat()
    if period_type == "week":
        picked = st.sidebar.date_input("Cualquier día de la semana", value=today)
        iso_year, iso_week, _ = picked.isocalendar()
        return period_type, f"{iso_year}-W{iso_week:02d}"
    year = int(st.sidebar.number_input("Año", min_value=2000, max_value=2100, value=today.year, step=1))
    if period_type == "month":
        month = st.sidebar.selectbox("Mes", range(1, 13), index=today.month - 1, format_func=lambda m: MONTHS[m - 1])
        return period_type, f"{year}-{month:02d}"
    return period_type, str(year)


def build_context() -> ReportContext | None:
    options = ["Archivo"] + (["Base de datos"] if SETTINGS.store_url else [])
    origin = st.sidebar.radio("Origen de registros", options)
    if origin == "Base de datos":
        return ReportContext.from_settings(RestIncidentRepository(SETTINGS), SETTINGS)
    upload = st.sidebar.file_uploader("Exportación de registros", type=["csv", "xlsx", "xls"])
    if upload is None:
        return None
    repository = TabularIncidentRepository(BytesIO(upload.getvalue()), file_name=upload.name)
    return ReportContext.from_settings(repository, SETTINGS)


def select_filter(records: Sequence[IncidentRecord]) -> RecordFilter:
    airlines = sorted({r.airline for r in records if r.airline})
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        airline = st.selectbox("Aerolínea", ["Todas", *airlines])
    with col2:
        shift = st.selectbox("Turno", ["Todos", *SETTINGS.shift_codes])
    with col3:
        source = st.selectbox("Origen", ["Todos", Source.COUNTER.value, Source.SIBERIA.value])
    with col4:
        signature = st.selectbox("Firma", ["Todas", "Con firma", "Sin firma"])
    query = st.text_input("Buscar código, vuelo, aerolínea u observación")
    return RecordFilter(
        airline=None if airline == "Todas" else airline,
        shift=None if shift == "Todos" else shift,
        source=None if source == "Todos" else Source(source),
        signed={"Con firma": True, "Sin firma": False}.get(signature),
        query=query or None,
    )


def show_stats(response: ReportResponse) -> None:
    report = response.report
    stats = report.stats
    st.subheader(report.period_label)
    st.caption(f"Actualizado {report.generated_at:%d/%m/%Y %H:%M:%S}")

    cols = st.columns(5)
    cols[0].metric("Total", stats.total)
    cols[1].metric("Counter", stats.by_source.counter)
    cols[2].metric("Siberia", stats.by_source.siberia)
    cols[3].metric("Tasa de firmas", f"{stats.signature_rate}%", f"{stats.signed_count}/{stats.total}")
    cols[4].metric("Turno dominante", stats.dominant_shift or "-")
    if stats.top_airline:
        st.write(f"Aerolínea con más daños: **{stats.top_airline.name}** ({stats.top_airline.count})")
    if stats.top_category:
        st.write(f"Tipo de daño más frecuente: **{stats.top_category.label}** ({stats.top_category.count})")
    if not stats.has_data:
        st.info("No hay maletas dañadas registradas en este periodo.")
        return

    left, right = st.columns(2)
    with left:
        st.markdown("**Daños por aerolínea**")
        st.bar_chart(pd.DataFrame([(e.name, e.value) for e in stats.by_airline], columns=["aerolinea", "daños"]).set_index("aerolinea"))
        st.markdown("**Turno por aerolínea**")
        st.dataframe(pd.DataFrame({row.label: dict(row.counts) for row in stats.by_shift_and_airline}).T)
    with right:
        st.markdown("**Daños por categoría**")
        st.bar_chart(pd.DataFrame([(e.name, e.value) for e in stats.by_category], columns=["categoria", "daños"]).set_index("categoria"))
        st.markdown("**Vuelos con más daños**")
        st.dataframe(pd.DataFrame([(f.flight, f.airline or "", f.damages) for f in stats.top_flights], columns=["vuelo", "aerolinea", "daños"]))

    st.markdown("**Tendencia diaria**")
    trend = pd.DataFrame([(p.day, p.counter, p.siberia) for p in stats.daily_trend], columns=["dia", "counter", "siberia"])
    st.line_chart(trend.set_index("dia"))


def show_exports(response: ReportResponse) -> None:
    report, records = response.report, response.records
    name = report_file_name(report.generated_at, SETTINGS.report_file_prefix, SETTINGS.timezone)
    cols = st.columns(4)
    cols[0].download_button("Exportar CSV", data=render_csv(records), file_name=f"{name}.csv", mime="text/csv")
    cols[1].download_button(
        "Exportar Excel",
        data=build_report_workbook(report, records),
        file_name=f"{name}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    cols[2].download_button(
        "Exportar HTML",
        data=render_report_html(report, records, SETTINGS.station_name).encode("utf-8"),
        file_name=f"{name}.html",
        mime="text/html",
    )
    pdf_key = report.key
    if cols[3].button("Generar PDF"):
        try:
            st.session_state["pdf"] = {"key": pdf_key, "data": render_pdf(report, records, SETTINGS.station_name)}
        except OSError as exc:
            st.session_state.pop("pdf", None)
            st.error(f"No se pudo generar el PDF: {exc}")
    cached = st.session_state.get("pdf")
    if cached and cached["key"] == pdf_key:
        st.download_button("Descargar PDF", data=cached["data"], file_name=f"{name}.pdf", mime="application/pdf")


def show_email(response: ReportResponse) -> None:
    with st.expander("Enviar reporte por correo"):
        presets = {label: email for label, email in SETTINGS.preset_recipients}
        choice = st.selectbox("Destinatario", ["Otro", *presets])
        recipient = presets.get(choice) or st.text_input("Correo")
        st.html(render_email_html(response.report, SETTINGS.signature_target))
        if st.button("Enviar", disabled=not SETTINGS.store_url):
            try:
                use_case = SendReportEmailUseCase(EdgeFunctionMailer(SETTINGS), SETTINGS.signature_target)
                payload = use_case.execute(response, recipient)
            except RegisbagsError as exc:
                st.error(str(exc))
            else:
                st.success(f"Reporte enviado a {payload.to}")


if "refresher" not in st.session_state:
    st.session_state["refresher"] = ReportRefresher()

period = select_period()
context = build_context()

if context is None:
    st.info("Sube una exportación de registros o configura REGISBAGS_STORE_URL.")
else:
    run_every = SETTINGS.refresh_seconds if isinstance(context.repository, RestIncidentRepository) else None

    @st.fragment(run_every=run_every)
    def dashboard() -> None:
        refresher: ReportRefresher[ReportResponse] = st.session_state["refresher"]
        try:
            refresher.refresh(lambda: GenerateReportUseCase(context).execute(period))
        except RepositoryConnectivityError as exc:
            st.error(f"{exc}. Verifica tu conexión e inténtalo de nuevo.")
        except RegisbagsError as exc:
            st.error(str(exc))

        response = refresher.current
        if response is None:
            return
        if not response.report.is_for(PeriodSpec.parse(*period)):
            st.warning("Mostrando el último reporte disponible.")
        show_stats(response)
        record_filter = select_filter(response.records)
        filtered = record_filter.apply(response.records, SETTINGS.timezone)
        st.caption(f"{len(filtered)} de {len(response.records)} registros")
        st.dataframe(records_to_dataframe(filtered), hide_index=True, use_container_width=True)
        show_exports(response)
        show_email(response)

    dashboard()
