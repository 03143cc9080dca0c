"""Record repository over CSV / Excel exports of the records table."""
from __future__ import annotations

import logging
import zipfile
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd
from xlrd import XLRDError

from regisbags.config import SETTINGS, Settings
from regisbags.domain.errors import RepositoryFetchError
from regisbags.domain.models import IncidentRecord
from regisbags.domain.repositories import IncidentRepository
from regisbags.infrastructure.parsing.normalize import rows_to_records
from regisbags.infrastructure.parsing.utils import ensure_bytes

logger = logging.getLogger(__name__)

EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}


def read_table(data: bytes, suffix: str) -> pd.DataFrame:
    """Load an export into a string-typed frame with blanks as empty strings."""
    engine = EXCEL_ENGINES.get(suffix)
    if engine is None:
        frame = pd.read_csv(BytesIO(data), dtype=str, keep_default_na=False)
    else:
        frame = pd.read_excel(BytesIO(data), engine=engine, dtype=str)
    frame.columns = [str(column).strip().lower() for column in frame.columns]
    return frame.fillna("")


class TabularIncidentRepository(IncidentRepository):
    def __init__(
        self,
        source: BytesIO | Path | bytes | str,
        file_name: str | None = None,
        settings: Settings = SETTINGS,
    ) -> None:
        if file_name is None and isinstance(source, (Path, str)):
            file_name = str(source)
        try:
            self._source = ensure_bytes(source)
        except OSError as exc:
            raise RepositoryFetchError(f"Could not open records export: {exc}") from exc
        self._suffix = Path(file_name).suffix.lower() if file_name else ".csv"
        self._settings = settings

    def fetch_records(self, start: datetime, end: datetime) -> Sequence[IncidentRecord]:
        try:
            frame = read_table(self._source, self._suffix)
        except (ValueError, OSError, XLRDError, zipfile.BadZipFile) as exc:
            logger.error("Could not read %s export: %s", self._suffix, exc)
            raise RepositoryFetchError(f"Could not read records export: {exc}") from exc

        records = rows_to_records(frame.to_dict(orient="records"), self._settings)
        selected = [record for record in records if start <= record.timestamp <= end]
        logger.debug("Loaded %d rows, %d within range", len(records), len(selected))
        return selected
