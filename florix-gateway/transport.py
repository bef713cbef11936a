"""
transport.py — Email Transport Layer
======================================
This is the ONLY file that knows about SendGrid (or any delivery mechanism).
The pipeline hands over an OutboundMessage and gets a DeliveryResult back.

Transports:
  sendgrid — SendGrid v3 mail/send through the official client (production)
  console  — logs the message instead of sending (local development)

One attempt per message. No retry, no queue: a provider failure is returned
to the caller immediately.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from settings import Settings

log = logging.getLogger(__name__)


@dataclass
class OutboundMessage:
    """Normalized message envelope. Transports speak only this."""
    to_address: str
    from_address: str
    subject: str
    body_html: str
    body_text: str | None = None


@dataclass
class DeliveryResult:
    success: bool
    error: str | None = None
    detail: Any = None      # Provider's structured error body, when it sent one


def _error_body(e: HTTPError) -> Any:
    body = e.body
    if isinstance(body, bytes):
        body = body.decode('utf-8', errors='replace')
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return body or None


class SendGridTransport:
    name = 'sendgrid'

    def __init__(self, api_key: str, timeout: float = 10.0, client=None):
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def client(self):
        if self._client is not None:
            return self._client
        sg = SendGridAPIClient(self.api_key)
        # python-http-client hands this to urlopen for every request
        sg.client.timeout = self.timeout
        return sg

    def send(self, msg: OutboundMessage) -> DeliveryResult:
        if not self.api_key:
            log.error(f"SendGrid API key not configured — cannot send '{msg.subject}'")
            return DeliveryResult(success=False, error='SendGrid API key is not configured')

        mail = Mail(
            from_email=msg.from_address,
            to_emails=msg.to_address,
            subject=msg.subject,
            plain_text_content=msg.body_text or None,
            html_content=msg.body_html,
        )
        try:
            response = self.client().send(mail)
        except HTTPError as e:
            body = _error_body(e)
            log.error(f"SendGrid rejected message: status={e.status_code} body={body}")
            return DeliveryResult(
                success=False,
                error=f"SendGrid responded with HTTP {e.status_code}",
                detail=body,
            )
        except OSError as e:
            log.error(f"SendGrid unreachable: {e}")
            return DeliveryResult(success=False, error=str(e) or e.__class__.__name__)

        log.info(f"Delivered via SendGrid: to={msg.to_address} subject='{msg.subject}' "
                 f"status={response.status_code}")
        return DeliveryResult(success=True)


class ConsoleTransport:
    name = 'console'

    def send(self, msg: OutboundMessage) -> DeliveryResult:
        text = msg.body_text or msg.body_html
        log.info("=" * 60)
        log.info("EMAIL (console transport — nothing sent)")
        log.info(f"  from    : {msg.from_address}")
        log.info(f"  to      : {msg.to_address}")
        log.info(f"  subject : {msg.subject}")
        log.info(f"  body    : {text[:300]}{'...' if len(text) > 300 else ''}")
        log.info("=" * 60)
        return DeliveryResult(success=True)


def deliver(transport, msg: OutboundMessage) -> DeliveryResult:
    """Public interface. Pipeline calls this — never a transport's send() directly."""
    try:
        return transport.send(msg)
    except Exception as e:
        log.exception(f"Transport error for '{msg.subject}': {e}")
        return DeliveryResult(success=False, error=str(e))


def build_transport(settings: Settings):
    if settings.email_transport == 'console':
        return ConsoleTransport()
    if not settings.sendgrid_api_key:
        log.warning("WARNING: SENDGRID_API_KEY is missing in environment variables.")
    return SendGridTransport(settings.sendgrid_api_key, timeout=settings.email_timeout)
