"""
origin.py — Origin Guard
==========================
Every request passes through here before routing. Browsers declare an Origin;
server-to-server callers usually don't and are always let through.

A denied origin gets a bare 403 with no CORS headers. The browser reports it as
a blocked request, so there is deliberately no JSON error body.
"""

import logging
from dataclasses import dataclass

from flask import Flask, Response, request

log = logging.getLogger(__name__)

ALLOWED_METHODS = ('GET', 'POST')
ALLOW_CREDENTIALS = True


@dataclass
class OriginDecision:
    allowed: bool
    origin: str | None
    reason: str | None = None


def check(origin: str | None, allowed_origins) -> OriginDecision:
    """Pure decision: absent origin or exact allow-list match."""
    if not origin:
        return OriginDecision(allowed=True, origin=None)
    if origin in allowed_origins:
        return OriginDecision(allowed=True, origin=origin)
    return OriginDecision(allowed=False, origin=origin, reason='Not allowed by CORS')


def _cors_headers(response: Response, origin: str) -> Response:
    response.headers['Access-Control-Allow-Origin'] = origin
    if ALLOW_CREDENTIALS:
        response.headers['Access-Control-Allow-Credentials'] = 'true'
    response.vary.add('Origin')
    return response


def init_app(app: Flask, allowed_origins) -> None:
    """Install the guard as the first before_request hook plus CORS response headers."""

    @app.before_request
    def guard_origin():
        decision = check(request.headers.get('Origin'), allowed_origins)
        if not decision.allowed:
            log.warning(f"Origin rejected: {decision.origin} {request.method} {request.path}")
            return Response(decision.reason, status=403, mimetype='text/plain')

        if request.method == 'OPTIONS' and decision.origin:
            resp = Response(status=204)
            resp.headers['Access-Control-Allow-Methods'] = ','.join(ALLOWED_METHODS)
            requested = request.headers.get('Access-Control-Request-Headers')
            if requested:
                resp.headers['Access-Control-Allow-Headers'] = requested
                resp.vary.add('Access-Control-Request-Headers')
            return _cors_headers(resp, decision.origin)

        return None

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        origin = request.headers.get('Origin')
        if origin and origin in allowed_origins and 'Access-Control-Allow-Origin' not in response.headers:
            _cors_headers(response, origin)
        return response
