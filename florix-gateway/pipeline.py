"""
pipeline.py — Notification Pipeline
=====================================
Runs the same steps for both email-producing endpoints. Each step is a
rejection point; delivery is the last step.

Steps:
1. Validate request schema
2. Render message
3. Address from configuration
4. Hand off to transport
5. Return result

Nothing is remembered between calls: an identical submission sent twice is
delivered twice.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import templates
import transport
import validation
from settings import Settings

log = logging.getLogger(__name__)

INVALID_REQUEST = 'invalid_request'
DELIVERY_FAILED = 'delivery_failed'


@dataclass
class PipelineResult:
    status: str                 # "sent" | "rejected" | "error"
    error_code: str | None = None
    error_message: str | None = None
    detail: Any = None


def _reject(code: str, message: str) -> PipelineResult:
    log.warning(f"Request rejected [{code}]: {message}")
    return PipelineResult(status="rejected", error_code=code, error_message=message)


def _process(kind: str, data: Any, parse: Callable, render: Callable,
             settings: Settings, mailer) -> tuple[PipelineResult, Any]:
    # ── Step 1: Validate request schema ──────────────────────────────────────
    try:
        req = parse(data)
    except validation.InvalidRequest as e:
        return _reject(INVALID_REQUEST, e.message), None

    # ── Step 2: Render message ───────────────────────────────────────────────
    rendered = render(req)

    # ── Step 3: Address from configuration ───────────────────────────────────
    msg = transport.OutboundMessage(
        to_address=settings.contact_to,
        from_address=settings.contact_from,
        subject=rendered.subject,
        body_text=rendered.body_text,
        body_html=rendered.body_html,
    )

    # ── Step 4: Hand off to transport ────────────────────────────────────────
    result = transport.deliver(mailer, msg)
    if not result.success:
        log.error(f"{kind} delivery failed: {result.error}")
        return PipelineResult(
            status="error",
            error_code=DELIVERY_FAILED,
            error_message=result.error,
            detail=result.detail,
        ), req

    return PipelineResult(status="sent"), req


def process_contact(data: Any, settings: Settings, mailer) -> PipelineResult:
    result, req = _process('Quote request', data, validation.parse_contact,
                           templates.render_quote_request, settings, mailer)
    if result.status == "sent":
        log.info(f"Quote request email sent for {req.email}")
    return result


def process_recommendation(data: Any, settings: Settings, mailer) -> PipelineResult:
    result, req = _process('Recommendation', data, validation.parse_recommendation,
                           templates.render_recommendation, settings, mailer)
    if result.status == "sent":
        log.info(f"Recommendation email sent for {templates.display(req.form_data.email)} "
                 f"({len(req.recommendations)} builds)")
    return result
