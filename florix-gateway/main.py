"""
Florix Backend
==============
Language  : Python
Framework : Flask + Gunicorn

Architecture: Small gateway in front of two external services.
  settings.py    — Environment configuration, read once
  origin.py      — Origin guard and CORS headers (runs before every route)
  validation.py  — Request schemas for the email endpoints
  templates.py   — Quote request and recommendation renderers
  transport.py   — SendGrid delivery (console fallback for dev)
  inference.py   — Pass-through proxy to the ML model
  pipeline.py    — validate → render → deliver for the email endpoints

Production: gunicorn 'main:create_app()' (see Procfile).

Routes:
  GET  /                      — health check
  POST /contact               — quote request email
  POST /recommendation-email  — PC recommendation summary email
  POST /predict               — ML model proxy
"""

import logging
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

import origin
import pipeline
from inference import InferenceClient
from settings import Settings
from transport import build_transport

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [florix-gateway] %(levelname)s %(message)s'
)
log = logging.getLogger(__name__)

SERVICE_NAME = 'Florix Backend'


class BadJSON(Exception):
    pass


def _json_body(empty=None):
    """Parsed JSON body; `empty` for an empty or non-JSON body, BadJSON when declared JSON doesn't parse."""
    if not request.is_json or not request.get_data(cache=True):
        return empty
    data = request.get_json(silent=True)
    if data is None:
        raise BadJSON()
    return data


def create_app(settings: Settings | None = None, mailer=None, inference=None) -> Flask:
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    _startup_log(settings)

    mailer = mailer or build_transport(settings)
    inference = inference or InferenceClient.from_settings(settings)

    app = Flask(__name__)
    app.config['SETTINGS'] = settings
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    origin.init_app(app, settings.allowed_origins)

    @app.errorhandler(BadJSON)
    def bad_json(_e):
        return jsonify({"error": "Request body must be JSON"}), 400

    @app.errorhandler(HTTPException)
    def http_error(e):
        messages = {404: "Not found", 405: "Method not allowed"}
        return jsonify({"error": messages.get(e.code, e.name)}), e.code

    @app.errorhandler(Exception)
    def unhandled(e):
        log.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({"error": "Internal server error"}), 500

    @app.route('/', methods=['GET'])
    def health():
        timestamp = datetime.now(timezone.utc).isoformat(timespec='milliseconds')
        return jsonify({
            "status": "ok",
            "timestamp": timestamp.replace('+00:00', 'Z'),
            "service": SERVICE_NAME,
        })

    @app.route('/contact', methods=['POST'])
    def contact():
        result = pipeline.process_contact(_json_body(), settings, mailer)
        if result.status == "rejected":
            return jsonify({"error": result.error_message}), 400
        if result.status == "error":
            details = result.detail if result.detail is not None else result.error_message
            return jsonify({"error": "Failed to send email.", "details": details}), 500
        return jsonify({"success": True})

    @app.route('/recommendation-email', methods=['POST'])
    def recommendation_email():
        result = pipeline.process_recommendation(_json_body(), settings, mailer)
        if result.status == "rejected":
            return jsonify({"error": result.error_message}), 400
        if result.status == "error":
            return jsonify({"error": "Failed to send email"}), 500
        return jsonify({"success": True})

    @app.route('/predict', methods=['POST'])
    def predict():
        payload = _json_body(empty={})
        result = inference.forward(payload)
        return Response(result.content, status=result.status_code, content_type=result.content_type)

    return app


def _startup_log(settings: Settings) -> None:
    summary = settings.summary()
    log.info(f"Florix Backend (Python) configured for port {settings.port}")
    log.info(f"  Email:     {summary['email_transport']} (key configured={summary['sendgrid_key']}) "
             f"from={summary['from']} to={summary['to']} timeout={summary['email_timeout']}s")
    log.info(f"  ML model:  {summary['ml_model_api_url']} (key configured={summary['model_api_key']}) "
             f"timeout={summary['inference_timeout']}s")
    log.info(f"  Origins:   {', '.join(summary['allowed_origins'])}")


if __name__ == '__main__':
    settings = Settings.from_env()
    create_app(settings).run(host='0.0.0.0', port=settings.port)
