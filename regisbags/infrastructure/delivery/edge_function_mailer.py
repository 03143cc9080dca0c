"""Report mailer that delegates sending to the record store's email function."""
from __future__ import annotations

import logging

import httpx

from regisbags.application.dto import EmailMessagePayload
from regisbags.application.delivery import ReportMailer
from regisbags.config import SETTINGS, Settings
from regisbags.domain.errors import EmailDeliveryError
from regisbags.infrastructure.repositories.rest_repository import store_headers

logger = logging.getLogger(__name__)


class EdgeFunctionMailer(ReportMailer):
    def __init__(self, settings: Settings = SETTINGS) -> None:
        if not settings.store_url:
            raise EmailDeliveryError("REGISBAGS_STORE_URL is not configured")
        self._settings = settings
        self._endpoint = f"{settings.store_url}/functions/v1/{settings.email_function}"

    def send(self, payload: EmailMessagePayload) -> None:
        try:
            with httpx.Client(timeout=self._settings.request_timeout) as client:
                response = client.post(
                    self._endpoint,
                    json=payload.as_json(),
                    headers=store_headers(self._settings.store_key),
                )
        except httpx.TransportError as exc:
            logger.error("Email function unreachable: %s", exc)
            raise EmailDeliveryError(f"Email service unreachable: {exc}") from exc

        if not response.is_success:
            details = self._extract_error(response)
            logger.error("Email function failed status=%s: %s", response.status_code, details)
            raise EmailDeliveryError(f"Email delivery failed status={response.status_code}: {details}")
        logger.info("Report email accepted for %s", payload.to)

    @staticmethod
    def _extract_error(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            for key in ("error", "message", "detail"):
                if key in data:
                    return str(data[key])
        return response.text.strip() or f"status={response.status_code}"
