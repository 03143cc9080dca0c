"""Email delivery of generated reports."""
from __future__ import annotations

import logging
import re
from typing import Protocol

from regisbags.domain.errors import InvalidRecipient
from regisbags.presentation.email_template import default_subject, render_email_html, render_email_text

from .dto import EmailMessagePayload, ReportResponse

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ReportMailer(Protocol):
    """Sends one rendered report email; raises ``EmailDeliveryError`` on failure."""

    def send(self, payload: EmailMessagePayload) -> None:
        ...


def validate_recipient(address: str) -> str:
    candidate = (address or "").strip()
    if not EMAIL_PATTERN.match(candidate):
        raise InvalidRecipient(f"Invalid email address: {address!r}")
    return candidate


class SendReportEmailUseCase:
    def __init__(self, mailer: ReportMailer, signature_target: int = 80) -> None:
        self._mailer = mailer
        self._signature_target = signature_target

    def build_payload(self, response: ReportResponse, recipient: str, subject: str | None = None) -> EmailMessagePayload:
        report = response.report
        return EmailMessagePayload(
            to=validate_recipient(recipient),
            subject=subject or default_subject(report),
            html=render_email_html(report, self._signature_target),
            text=render_email_text(report, self._signature_target),
        )

    def execute(self, response: ReportResponse, recipient: str, subject: str | None = None) -> EmailMessagePayload:
        payload = self.build_payload(response, recipient, subject)
        logger.info("Sending report %r to %s", payload.subject, payload.to)
        self._mailer.send(payload)
        return payload
