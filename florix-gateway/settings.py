"""
settings.py — Process Configuration
=====================================
Read once at startup, never mutated afterwards. Every component receives the
Settings instance it needs; nothing reads os.environ after create_app().

Configuration (environment variables, .env supported):
  PORT                      — Listening port (default: 4000, clear of Next.js on 3000)
  SENDGRID_API_KEY          — SendGrid credential (missing: warning, sends fail)
  CONTACT_FROM              — Sender address (default: info@florixtechnologies.com)
  CONTACT_TO                — Recipient address (default: info@florixtechnologies.com)
  ML_MODEL_API_URL          — Inference endpoint (default: Railway recommend_direct)
  MODEL_API_KEY             — Inference bearer token (optional)
  CORS_ORIGINS              — Extra allowed origins, comma-separated
  EMAIL_TRANSPORT           — "sendgrid" (default) or "console"
  SENDGRID_TIMEOUT_SECONDS  — Email provider timeout (default: 10)
  ML_MODEL_TIMEOUT_SECONDS  — Inference timeout (default: 30)
  LOG_LEVEL                 — Root log level (default: INFO)
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 4000
DEFAULT_ADDRESS = 'info@florixtechnologies.com'
DEFAULT_ML_MODEL_API_URL = 'https://web-production-49762.up.railway.app/recommend_direct'

ALLOWED_ORIGINS = (
    'https://florixtechnologies.com',
    'https://www.florixtechnologies.com',
    'http://localhost:3000',
)

EMAIL_TRANSPORTS = ('sendgrid', 'console')
LOG_LEVELS = ('CRITICAL', 'FATAL', 'ERROR', 'WARNING', 'WARN', 'INFO', 'DEBUG', 'NOTSET')


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    sendgrid_api_key: str = ''
    contact_from: str = DEFAULT_ADDRESS
    contact_to: str = DEFAULT_ADDRESS
    ml_model_api_url: str = DEFAULT_ML_MODEL_API_URL
    model_api_key: str = ''
    allowed_origins: tuple[str, ...] = ALLOWED_ORIGINS
    email_transport: str = 'sendgrid'
    email_timeout: float = 10.0
    inference_timeout: float = 30.0
    log_level: str = 'INFO'

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'")

    @classmethod
    def from_env(cls, environ=None, load_env_file: bool = True) -> 'Settings':
        if load_env_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        transport = env.get('EMAIL_TRANSPORT', 'sendgrid').strip().lower() or 'sendgrid'
        if transport not in EMAIL_TRANSPORTS:
            raise ValueError(f"EMAIL_TRANSPORT must be one of {', '.join(EMAIL_TRANSPORTS)}, got '{transport}'")

        return cls(
            port=_int(env, 'PORT', DEFAULT_PORT),
            sendgrid_api_key=env.get('SENDGRID_API_KEY', ''),
            contact_from=env.get('CONTACT_FROM') or DEFAULT_ADDRESS,
            contact_to=env.get('CONTACT_TO') or DEFAULT_ADDRESS,
            ml_model_api_url=env.get('ML_MODEL_API_URL') or DEFAULT_ML_MODEL_API_URL,
            model_api_key=env.get('MODEL_API_KEY', ''),
            allowed_origins=merge_origins(ALLOWED_ORIGINS, env.get('CORS_ORIGINS', '')),
            email_transport=transport,
            email_timeout=_float(env, 'SENDGRID_TIMEOUT_SECONDS', 10.0),
            inference_timeout=_float(env, 'ML_MODEL_TIMEOUT_SECONDS', 30.0),
            log_level=env.get('LOG_LEVEL', 'INFO').strip().upper() or 'INFO',
        )

    def summary(self) -> dict:
        """Configuration for startup logging. Credentials reduced to presence flags."""
        return {
            "port":              self.port,
            "email_transport":   self.email_transport,
            "sendgrid_key":      bool(self.sendgrid_api_key),
            "from":              self.contact_from,
            "to":                self.contact_to,
            "ml_model_api_url":  self.ml_model_api_url,
            "model_api_key":     bool(self.model_api_key),
            "allowed_origins":   list(self.allowed_origins),
            "email_timeout":     self.email_timeout,
            "inference_timeout": self.inference_timeout,
        }


def merge_origins(builtin: tuple[str, ...], extra: str) -> tuple[str, ...]:
    """Built-in origins followed by CORS_ORIGINS entries, duplicates dropped in order."""
    origins = list(builtin)
    for origin in extra.split(','):
        origin = origin.strip().rstrip('/')
        if origin and origin not in origins:
            origins.append(origin)
    return tuple(origins)


def _int(env, name: str, default: int) -> int:
    raw = env.get(name, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


def _float(env, name: str, default: float) -> float:
    raw = env.get(name, '').strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got '{raw}'")
    return value
