"""Central configuration for the regisbags package."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

from regisbags.domain.models import CategoryDefinition, ShiftDefinition

DEFAULT_TIMEZONE = "America/Lima"

PRIMARY_SHIFTS = (
    ShiftDefinition(code="BRC-ERC", label="Mañana"),
    ShiftDefinition(code="IRC-KRC", label="Tarde"),
)
DEFAULT_SHIFTS = ",".join(f"{shift.code}:{shift.label}" for shift in PRIMARY_SHIFTS)
THIRD_SHIFT = ShiftDefinition(code="ZRC-ARC", label="Noche")

KNOWN_AIRLINES = ("LATAM", "SKY", "JET SMART", "AVIANCA")

# Keys are compared after dropping spaces/hyphens and upper-casing.
AIRLINE_ALIASES = {
    "LATAM": "LATAM",
    "LATAMAIRLINES": "LATAM",
    "SKY": "SKY",
    "SKYAIRLINE": "SKY",
    "JETSMART": "JET SMART",
    "AVIANCA": "AVIANCA",
}

DAMAGE_CATEGORIES = (
    CategoryDefinition(code="A", label="Asa rota"),
    CategoryDefinition(code="B", label="Casco roto"),
    CategoryDefinition(code="C", label="Rueda rota"),
)

PRESET_RECIPIENTS = (
    ("Gerencia General", "gerencia@aeropuerto.com"),
    ("Operaciones", "operaciones@aeropuerto.com"),
    ("Control de Calidad", "calidad@aeropuerto.com"),
)
DEFAULT_RECIPIENTS = ",".join(f"{label}={email}" for label, email in PRESET_RECIPIENTS)


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _parse_csv(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    items = [part.strip() for part in raw.split(",")]
    return [item for item in items if item]


def _parse_shifts(name: str, default: str) -> tuple[ShiftDefinition, ...]:
    shifts: list[ShiftDefinition] = []
    for item in _parse_csv(name, default):
        code, _, label = item.partition(":")
        code = code.strip().upper()
        if not code:
            continue
        shifts.append(ShiftDefinition(code=code, label=label.strip() or code))
    return tuple(shifts)


def _parse_recipients(name: str, default: str) -> tuple[tuple[str, str], ...]:
    recipients: list[tuple[str, str]] = []
    for item in _parse_csv(name, default):
        label, sep, email = item.partition("=")
        if not sep:
            label, email = item, item
        recipients.append((label.strip(), email.strip()))
    return tuple(recipients)


@dataclass(slots=True, frozen=True)
class Settings:
    timezone: ZoneInfo = ZoneInfo(DEFAULT_TIMEZONE)
    shifts: tuple[ShiftDefinition, ...] = PRIMARY_SHIFTS
    airlines: tuple[str, ...] = KNOWN_AIRLINES
    airline_aliases: dict[str, str] = field(default_factory=lambda: dict(AIRLINE_ALIASES))
    categories: tuple[CategoryDefinition, ...] = DAMAGE_CATEGORIES
    top_flights_limit: int = 5
    signature_target: int = 80
    station_name: str = "Cusco"
    report_file_prefix: str = "REP_CUS_MALETAS"
    store_url: str = ""
    store_key: str = ""
    records_table: str = "unified_records"
    request_timeout: float = 20.0
    email_function: str = "send-email"
    preset_recipients: tuple[tuple[str, str], ...] = PRESET_RECIPIENTS
    refresh_seconds: int = 10
    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def shift_codes(self) -> tuple[str, ...]:
        return tuple(shift.code for shift in self.shifts)

    @property
    def category_codes(self) -> tuple[str, ...]:
        return tuple(category.code for category in self.categories)

    def category(self, code: str) -> CategoryDefinition | None:
        for category in self.categories:
            if category.code == code:
                return category
        return None

    @classmethod
    def from_env(cls) -> "Settings":
        shifts = _parse_shifts("REGISBAGS_SHIFTS", DEFAULT_SHIFTS)
        if _parse_bool("REGISBAGS_THIRD_SHIFT", False) and THIRD_SHIFT.code not in {s.code for s in shifts}:
            shifts = shifts + (THIRD_SHIFT,)
        return cls(
            timezone=ZoneInfo(os.getenv("REGISBAGS_TIMEZONE", DEFAULT_TIMEZONE)),
            shifts=shifts,
            top_flights_limit=int(os.getenv("REGISBAGS_TOP_FLIGHTS", "5")),
            signature_target=int(os.getenv("REGISBAGS_SIGNATURE_TARGET", "80")),
            station_name=os.getenv("REGISBAGS_STATION", "Cusco"),
            report_file_prefix=os.getenv("REGISBAGS_REPORT_PREFIX", "REP_CUS_MALETAS"),
            store_url=os.getenv("REGISBAGS_STORE_URL", "").rstrip("/"),
            store_key=os.getenv("REGISBAGS_STORE_KEY", ""),
            records_table=os.getenv("REGISBAGS_RECORDS_TABLE", "unified_records"),
            request_timeout=float(os.getenv("REGISBAGS_HTTP_TIMEOUT", "20")),
            email_function=os.getenv("REGISBAGS_EMAIL_FUNCTION", "send-email"),
            preset_recipients=_parse_recipients("REGISBAGS_RECIPIENTS", DEFAULT_RECIPIENTS),
            refresh_seconds=int(os.getenv("REGISBAGS_REFRESH_SECONDS", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json_logs=_parse_bool("LOG_FORMAT_JSON", False),
        )


SETTINGS = Settings.from_env()
