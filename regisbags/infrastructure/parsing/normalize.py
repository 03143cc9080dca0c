"""Normalisation of raw record-store rows into canonical incident records."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from regisbags.config import SETTINGS, Settings
from regisbags.domain.errors import RepositoryFetchError
from regisbags.domain.models import IncidentRecord, Source
from regisbags.infrastructure.parsing.utils import (
    clean_text,
    is_blank,
    normalize_airline,
    parse_bool,
    parse_timestamp,
    split_categories,
)

logger = logging.getLogger(__name__)

# Record-store column names first, then the canonical English field names.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "source": ("source", "origen"),
    "code": ("codigo", "code"),
    "airline": ("aerolinea", "airline"),
    "flight": ("vuelo", "flight"),
    "categories": ("categorias", "categories"),
    "observation": ("observacion", "observation"),
    "timestamp": ("fecha_hora", "timestamp"),
    "user": ("usuario", "user"),
    "shift": ("turno", "shift"),
    "signed": ("firma", "signed"),
    "image_url": ("imagen_url", "image_url"),
    "created_at": ("created_at",),
    "updated_at": ("updated_at",),
}


def _field(row: Mapping[str, Any], name: str) -> Any:
    for column in COLUMN_ALIASES[name]:
        if column in row and not is_blank(row[column]):
            return row[column]
    return None


def _categories(raw: object, known: Sequence[str], row_id: str) -> tuple[str, ...]:
    codes: list[str] = []
    for code in split_categories(raw):
        if code not in known:
            logger.warning("Dropping unknown damage category %r on record %s", code, row_id)
            continue
        if code not in codes:
            codes.append(code)
    return tuple(codes)


def row_to_record(row: Mapping[str, Any], settings: Settings = SETTINGS, fallback_id: str = "") -> IncidentRecord:
    """Validate one raw row; raises ``RepositoryFetchError`` if it is malformed."""
    row_id = clean_text(_field(row, "id")) or fallback_id
    try:
        source = Source(str(_field(row, "source") or "").strip().lower())
    except ValueError as exc:
        raise RepositoryFetchError(f"Record {row_id}: unknown source {_field(row, 'source')!r}") from exc

    code = clean_text(_field(row, "code"))
    if code is None:
        raise RepositoryFetchError(f"Record {row_id}: missing baggage code")

    tz = settings.timezone
    try:
        timestamp = parse_timestamp(_field(row, "timestamp"), tz)
        created_at = None if is_blank(_field(row, "created_at")) else parse_timestamp(_field(row, "created_at"), tz)
        updated_at = None if is_blank(_field(row, "updated_at")) else parse_timestamp(_field(row, "updated_at"), tz)
        signed = parse_bool(_field(row, "signed"))
    except ValueError as exc:
        raise RepositoryFetchError(f"Record {row_id}: {exc}") from exc

    flight = clean_text(_field(row, "flight"))
    shift = clean_text(_field(row, "shift"))
    return IncidentRecord(
        id=row_id,
        source=source,
        code=code,
        timestamp=timestamp,
        signed=signed,
        airline=normalize_airline(_field(row, "airline"), settings.airline_aliases),
        flight=flight.upper() if flight else None,
        categories=_categories(_field(row, "categories"), settings.category_codes, row_id),
        observation=clean_text(_field(row, "observation")),
        user=clean_text(_field(row, "user")),
        shift=shift.upper() if shift else None,
        image_url=clean_text(_field(row, "image_url")),
        created_at=created_at,
        updated_at=updated_at,
    )


def rows_to_records(rows: Iterable[Mapping[str, Any]], settings: Settings = SETTINGS) -> list[IncidentRecord]:
    """Normalise every row, newest first; one bad row fails the whole batch."""
    records = [row_to_record(row, settings, fallback_id=str(index + 1)) for index, row in enumerate(rows)]
    return newest_first(records)


def newest_first(records: Iterable[IncidentRecord]) -> list[IncidentRecord]:
    return sorted(records, key=lambda record: record.timestamp, reverse=True)
