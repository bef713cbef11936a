"""
inference.py — ML Model Proxy
===============================
Forwards /predict payloads to the recommendation model untouched and relays
whatever comes back. The model service owns the payload schema; nothing here
inspects or reshapes it.

Only a transport failure (DNS, refused connection, timeout) produces a
response of our own: 500 with a generic error.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from settings import Settings

log = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = 'Failed to communicate with prediction model.'


@dataclass
class ProxyResult:
    status_code: int
    content: bytes
    content_type: str = 'application/json'
    error: str | None = None    # Set only when the model could not be reached


class InferenceClient:
    def __init__(self, url: str, api_key: str = '', timeout: float = 30.0,
                 transport: httpx.BaseTransport | None = None):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> 'InferenceClient':
        return cls(settings.ml_model_api_url, settings.model_api_key, settings.inference_timeout)

    def headers(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        # Header omitted entirely when no key is configured
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def forward(self, payload: Any) -> ProxyResult:
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True,
                              transport=self._transport) as client:
                response = client.post(self.url, content=json.dumps(payload), headers=self.headers())
        except httpx.HTTPError as e:
            log.error(f"ML Proxy Error: {e.__class__.__name__}: {e}")
            return ProxyResult(
                status_code=500,
                content=json.dumps({"error": UNREACHABLE_MESSAGE}).encode(),
                error=str(e) or e.__class__.__name__,
            )

        if not response.is_success:
            log.warning(f"ML Proxy Error: model responded with HTTP {response.status_code}")

        return ProxyResult(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get('Content-Type', 'application/json'),
        )
