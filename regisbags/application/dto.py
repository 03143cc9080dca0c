"""Application-level DTOs for report generation and delivery."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from regisbags.domain.models import IncidentRecord
from regisbags.domain.results import Report


@dataclass(slots=True, frozen=True)
class ReportResponse:
    report: Report
    records: Sequence[IncidentRecord]


@dataclass(slots=True, frozen=True)
class EmailMessagePayload:
    to: str
    subject: str
    html: str
    text: str

    def as_json(self) -> dict[str, str]:
        return {"to": self.to, "subject": self.subject, "html": self.html, "text": self.text}
