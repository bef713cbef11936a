"""
validation.py — Request Schemas
=================================
Turns raw JSON bodies into typed requests, or raises InvalidRequest with the
message the caller will see. No downstream call happens before these pass.

/predict has no schema here: the inference service owns its payload shape.
"""

from dataclasses import dataclass, field
from typing import Any

CONTACT_REQUIRED = ('name', 'email', 'service')
CONTACT_REQUIRED_MESSAGE = 'Name, email, and service are required.'
RECOMMENDATION_REQUIRED_MESSAGE = 'Missing required data'

RECOMMENDATION_FIELDS = (
    'build_name', 'estimated_price', 'why_this_build',
    'cpu', 'gpu', 'ram', 'storage', 'motherboard', 'psu', 'cabinet',
)


class InvalidRequest(ValueError):
    """Caller payload is missing required fields. Always a 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class ContactRequest:
    name: str
    email: str
    service: str
    phone: str | None = None
    message: str | None = None
    # Ordered (key, value) pairs; display order is the order received.
    service_details: list[tuple[str, Any]] | None = None


@dataclass
class RecommendationForm:
    name: Any = None
    email: Any = None
    phone: Any = None
    usage: Any = None
    budget: Any = None
    speed: Any = None
    storage_capacity: Any = None
    brands: list[str] | None = None
    additional_notes: Any = None


@dataclass
class RecommendationItem:
    build_name: Any = None
    estimated_price: Any = None
    why_this_build: Any = None
    cpu: Any = None
    gpu: Any = None
    ram: Any = None
    storage: Any = None
    motherboard: Any = None
    psu: Any = None
    cabinet: Any = None


@dataclass
class RecommendationRequest:
    form_data: RecommendationForm
    recommendations: list[RecommendationItem] = field(default_factory=list)


def parse_contact(data: Any) -> ContactRequest:
    if not isinstance(data, dict):
        raise InvalidRequest(CONTACT_REQUIRED_MESSAGE)

    for name in CONTACT_REQUIRED:
        value = data.get(name)
        if not isinstance(value, str) or not value:
            raise InvalidRequest(CONTACT_REQUIRED_MESSAGE)

    # Only an object carries details; falsy or scalar values count as absent.
    details = data.get('serviceDetails')
    if not isinstance(details, dict):
        details = None

    return ContactRequest(
        name=data['name'],
        email=data['email'],
        service=data['service'],
        phone=data.get('phone') or None,
        message=data.get('message') or None,
        service_details=list(details.items()) if details is not None else None,
    )


def parse_recommendation(data: Any) -> RecommendationRequest:
    if not isinstance(data, dict):
        raise InvalidRequest(RECOMMENDATION_REQUIRED_MESSAGE)

    form = data.get('formData')
    recommendations = data.get('recommendations')
    if form is None or recommendations is None:
        raise InvalidRequest(RECOMMENDATION_REQUIRED_MESSAGE)
    if not isinstance(form, dict):
        raise InvalidRequest('formData must be an object.')
    if not isinstance(recommendations, list):
        raise InvalidRequest('recommendations must be a list.')

    brands = form.get('brands')
    if isinstance(brands, str):
        brands = [brands] if brands else None
    elif not isinstance(brands, list):
        brands = None

    return RecommendationRequest(
        form_data=RecommendationForm(
            name=form.get('name'),
            email=form.get('email'),
            phone=form.get('phone'),
            usage=form.get('usage'),
            budget=form.get('budget'),
            speed=form.get('speed'),
            storage_capacity=form.get('storageCapacity'),
            brands=brands,
            additional_notes=form.get('additionalNotes'),
        ),
        recommendations=[_parse_item(item) for item in recommendations],
    )


def _parse_item(item: Any) -> RecommendationItem:
    # Items are display-only; anything that isn't an object renders as blanks.
    if not isinstance(item, dict):
        return RecommendationItem()
    return RecommendationItem(**{name: item.get(name) for name in RECOMMENDATION_FIELDS})
