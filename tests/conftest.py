"""
Shared fixtures. Nothing here touches the network: the email provider is a
recording fake and the ML model is an httpx.MockTransport.
"""

import httpx
import pytest

from inference import InferenceClient
from main import create_app
from settings import Settings
from transport import DeliveryResult


ALLOWED_ORIGIN = "https://florixtechnologies.com"
MODEL_URL = "https://model.test/recommend_direct"


class FakeMailer:
    """Records every OutboundMessage; returns `result` for each send."""

    name = "fake"

    def __init__(self, result: DeliveryResult | None = None):
        self.result = result or DeliveryResult(success=True)
        self.sent = []

    def send(self, msg):
        self.sent.append(msg)
        return self.result


def echo_model(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=request.content, headers={"Content-Type": "application/json"})


@pytest.fixture
def settings():
    return Settings(
        sendgrid_api_key="SG.test",
        contact_from="from@florix.test",
        contact_to="inbox@florix.test",
        ml_model_api_url=MODEL_URL,
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def model_handler():
    """Override in a test module to change how the fake model answers."""
    return echo_model


@pytest.fixture
def model_requests():
    return []


@pytest.fixture
def inference(settings, model_handler, model_requests):
    def handler(request):
        model_requests.append(request)
        return model_handler(request)

    return InferenceClient(settings.ml_model_api_url, settings.model_api_key,
                           transport=httpx.MockTransport(handler))


@pytest.fixture
def app(settings, mailer, inference):
    app = create_app(settings, mailer=mailer, inference=inference)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_contact(**overrides) -> dict:
    payload = {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "+91 98450 00000",
        "service": "Custom PC Build",
        "message": "Need a workstation for video editing.",
        "serviceDetails": {"budgetRange": "80k-1L", "ramSize": "32GB", "useCase": "Editing"},
    }
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not ...}


def make_recommendation(form_overrides=None, recommendations=None) -> dict:
    form = {
        "name": "Vikram",
        "email": "vikram@example.com",
        "phone": "9000000000",
        "usage": "Gaming",
        "budget": "1.2L",
        "speed": "High",
        "storageCapacity": "2TB",
        "brands": ["AMD", "NVIDIA"],
        "additionalNotes": "Quiet build please",
    }
    form.update(form_overrides or {})
    form = {k: v for k, v in form.items() if v is not ...}
    if recommendations is None:
        recommendations = [make_build()]
    return {"formData": form, "recommendations": recommendations}


def make_build(**overrides) -> dict:
    build = {
        "build_name": "Ryzen Gaming Rig",
        "estimated_price": 115000,
        "why_this_build": "Best frames per rupee",
        "cpu": "Ryzen 7 7800X3D",
        "gpu": "RTX 4070 Super",
        "ram": "32GB DDR5",
        "storage": "2TB NVMe",
        "motherboard": "B650",
        "psu": "750W Gold",
        "cabinet": "Lancool 216",
    }
    build.update(overrides)
    return build
