"""Shared parsing utilities for record-store rows and exports."""
from __future__ import annotations

import json
import re
from datetime import datetime, tzinfo
from io import BytesIO
from pathlib import Path

import pandas as pd

TRUE_VALUES = {"1", "true", "t", "yes", "y", "si", "sí", "on"}
FALSE_VALUES = {"0", "false", "f", "no", "n", "off", ""}

_ALIAS_STRIP = re.compile(r"[\s\-_]+")
_CATEGORY_SPLIT = re.compile(r"[,;\s]+")


def ensure_bytes(source: BytesIO | Path | bytes | str) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, (Path, str)):
        return Path(source).read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def clean_text(value: object) -> str | None:
    if is_blank(value):
        return None
    return str(value).strip()


def parse_timestamp(value: object, tz: tzinfo) -> datetime:
    """Parse a stored timestamp into an aware datetime in ``tz``.

    Naive values are taken to be wall-clock time in ``tz`` already.
    """
    if is_blank(value):
        raise ValueError("missing timestamp")
    stamp = pd.Timestamp(value)
    if pd.isna(stamp):
        raise ValueError(f"invalid timestamp {value!r}")
    return localize(stamp.to_pydatetime(), tz)


def localize(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def parse_bool(value: object) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"invalid boolean {value!r}")
    if is_blank(value):
        return False
    return bool(value)


def split_categories(value: object) -> list[str]:
    """Split the category cell into raw upper-cased codes.

    Accepts Python sequences, JSON arrays, Postgres array literals
    (``{A,B}``) and plain delimited text (``A,B`` / ``A;B``).
    """
    if is_blank(value):
        return []
    if isinstance(value, (list, tuple, set)):
        items = [str(item) for item in value]
    else:
        text = str(value).strip()
        items = []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                decoded = None
            if isinstance(decoded, list):
                items = [str(item) for item in decoded]
            else:
                text = text.strip("[]")
        if not items:
            items = _CATEGORY_SPLIT.split(text.strip("{}"))
    codes = [item.strip().strip("'\"").upper() for item in items]
    return [code for code in codes if code]


def normalize_airline(value: object, aliases: dict[str, str]) -> str | None:
    text = clean_text(value)
    if text is None:
        return None
    key = _ALIAS_STRIP.sub("", text).upper()
    return aliases.get(key, text.upper())
