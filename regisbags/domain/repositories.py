"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import IncidentRecord


class IncidentRepository(Protocol):
    """Provides incident records recorded within an inclusive time window.

    Implementations return records newest-first and raise
    ``RepositoryFetchError`` instead of handing back a partial result.
    """

    def fetch_records(self, start: datetime, end: datetime) -> Sequence[IncidentRecord]:
        ...
