"""
templates.py — Message Renderers
==================================
Two fixed notifications, both addressed to the Florix inbox:

  quote_request           — contact form submission (plain text + HTML)
  recommendation_summary  — generated PC builds for a user (HTML only)

render_*() return a RenderedMessage. Addressing is the pipeline's job.
User values are HTML-escaped in the HTML body; subject and plain text are not.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from markupsafe import escape

from validation import ContactRequest, RecommendationRequest

CURRENCY_PREFIX = '₹'

_UPPERCASE = re.compile(r'([A-Z])')


@dataclass
class RenderedMessage:
    subject: str
    body_text: str | None
    body_html: str


# ── Value formatting ──────────────────────────────────────────────────────────

def display(value: Any) -> str:
    """Text for an interpolated value. Missing values render empty."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ','.join(display(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _h(value: Any) -> str:
    return str(escape(display(value)))


def detail_label(key: str) -> str:
    """budgetRange -> 'budget Range'. Only inserts spaces; case is left alone."""
    return _UPPERCASE.sub(r' \1', key).strip()


# ── Quote request ─────────────────────────────────────────────────────────────

def render_quote_request(req: ContactRequest) -> RenderedMessage:
    phone = display(req.phone) or 'N/A'
    details_json = (
        json.dumps(dict(req.service_details), indent=2, ensure_ascii=False)
        if req.service_details is not None else 'N/A'
    )

    text = (
        f"New Quote Request from Florix Technologies Website\n"
        f"\n"
        f"Service: {req.service}\n"
        f"Name: {req.name}\n"
        f"Email: {req.email}\n"
        f"Phone: {phone}\n"
        f"\n"
        f"Service Details:\n"
        f"{details_json}\n"
        f"\n"
        f"Message:\n"
        f"{display(req.message) or 'N/A'}\n"
    )

    html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #2563eb;">New Quote Request</h2>
          <div style="margin-bottom: 20px;">
            <p><strong>Service Requested:</strong> <span style="font-size: 1.1em; color: #2563eb;">{_h(req.service)}</span></p>
          </div>
          <div style="background-color: #f0fdf4; padding: 15px; border-radius: 5px; border-left: 4px solid #16a34a; margin-bottom: 20px;">
            <h3 style="color: #166534; margin-top: 0;">Contact Information</h3>
            <p><strong>Name:</strong> {_h(req.name)}</p>
            <p><strong>Email:</strong> <a href="mailto:{_h(req.email)}">{_h(req.email)}</a></p>
            <p><strong>Phone:</strong> {_h(phone)}</p>
          </div>
          {_service_details_html(req)}
          <div style="margin-top: 20px;">
            <h3>Additional Message:</h3>
            <p style="background-color: #f3f4f6; padding: 15px; border-radius: 5px;">{_h(display(req.message) or 'No additional message provided.')}</p>
          </div>
        </div>
      """

    return RenderedMessage(
        subject=f"New Quote Request: {req.service} from {req.name}",
        body_text=text,
        body_html=html,
    )


def _service_details_html(req: ContactRequest) -> str:
    # Absent details drop the whole block; an empty mapping still gets the container.
    if req.service_details is None:
        return ''

    items = ''.join(f"""
                    <li style="margin-bottom: 5px;">
                        <strong>{_h(detail_label(key))}:</strong> {_h(value)}
                    </li>
                """ for key, value in req.service_details)

    return f"""
        <div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin-top: 10px;">
            <h3 style="color: #333; margin-top: 0;">{_h(req.service)} Details:</h3>
            <ul style="list-style-type: none; padding: 0;">
                {items}
            </ul>
        </div>
        """


# ── Recommendation summary ────────────────────────────────────────────────────

def render_recommendation(req: RecommendationRequest) -> RenderedMessage:
    form = req.form_data
    brands = ', '.join(display(b) for b in form.brands) if form.brands else ''

    cards = ''.join(f"""
            <div style="margin-bottom: 20px; padding: 15px; border: 1px solid #ddd; border-radius: 8px; background-color: #f9f9f9;">
                <h3 style="color: #2563eb; margin-top: 0;">{_h(r.build_name)} - {CURRENCY_PREFIX}{_h(r.estimated_price)}</h3>
                <p><em>"{_h(r.why_this_build)}"</em></p>
                <ul style="font-size: 0.9em; line-height: 1.6;">
                    <li><strong>CPU:</strong> {_h(r.cpu)}</li>
                    <li><strong>GPU:</strong> {_h(r.gpu)}</li>
                    <li><strong>RAM:</strong> {_h(r.ram)}</li>
                    <li><strong>Storage:</strong> {_h(r.storage)}</li>
                    <li><strong>Motherboard:</strong> {_h(r.motherboard)}</li>
                    <li><strong>PSU:</strong> {_h(r.psu)}</li>
                    <li><strong>Cabinet:</strong> {_h(r.cabinet)}</li>
                </ul>
            </div>
        """ for r in req.recommendations)

    html = f"""
                <div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto;">
                    <h2 style="color: #2563eb;">New PC Recommendation Generated</h2>

                    <div style="background-color: #f0fdf4; padding: 15px; border-radius: 5px; border-left: 4px solid #16a34a; margin-bottom: 20px;">
                        <h3 style="color: #166534; margin-top: 0;">User Contact Information</h3>
                        <p><strong>Name:</strong> {_h(form.name)}</p>
                        <p><strong>Email:</strong> <a href="mailto:{_h(form.email)}">{_h(form.email)}</a></p>
                        <p><strong>Phone:</strong> {_h(form.phone)}</p>
                    </div>

                    <div style="margin-bottom: 20px;">
                        <h3 style="color: #333;">User Requirements</h3>
                        <ul style="background-color: #f3f4f6; padding: 15px; border-radius: 5px; list-style-type: none;">
                            <li><strong>Usage:</strong> {_h(form.usage)}</li>
                            <li><strong>Budget:</strong> {_h(form.budget)}</li>
                            <li><strong>Speed Priority:</strong> {_h(form.speed)}</li>
                            <li><strong>Storage:</strong> {_h(form.storage_capacity)}</li>
                            <li><strong>Brands:</strong> {_h(brands or 'None')}</li>
                            <li><strong>Additional Notes:</strong> {_h(display(form.additional_notes) or 'N/A')}</li>
                        </ul>
                    </div>

                    <div>
                        <h3 style="color: #333; border-bottom: 2px solid #eee; padding-bottom: 10px;">Generated Recommendations</h3>
                        {cards}
                    </div>
                </div>
            """

    return RenderedMessage(
        subject=f"New PC Recommendation Generated for {display(form.name)}",
        body_text=None,
        body_html=html,
    )
