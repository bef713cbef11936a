"""
Renderer tests for the quote request and recommendation summary emails.
"""

import re

import pytest

from templates import detail_label, display, render_quote_request, render_recommendation
from validation import parse_contact, parse_recommendation

from conftest import make_build, make_contact, make_recommendation


def _quote(**overrides):
    return render_quote_request(parse_contact(make_contact(**overrides)))


def _recommendation(**kwargs):
    return render_recommendation(parse_recommendation(make_recommendation(**kwargs)))


class TestDetailLabel:

    @pytest.mark.parametrize("key, label", [
        ("budgetRange", "budget Range"),
        ("ramSize", "ram Size"),
        ("RAMSize", "R A M Size"),
        ("CPU", "C P U"),
        ("Budget", "Budget"),
        ("usecase", "usecase"),
        ("snake_case", "snake_case"),
    ])
    def test_space_before_each_uppercase_then_trim(self, key, label):
        assert detail_label(key) == label


class TestDisplay:

    @pytest.mark.parametrize("value, text", [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (115000, "115000"),
        (115000.0, "115000"),
        (99999.5, "99999.5"),
        ("1.2L", "1.2L"),
        (["a", "b"], "a,b"),
    ])
    def test_values(self, value, text):
        assert display(value) == text


class TestQuoteRequest:

    def test_subject(self):
        assert _quote().subject == "New Quote Request: Custom PC Build from Asha Rao"

    def test_plain_text_body(self):
        text = _quote().body_text
        assert "Service: Custom PC Build" in text
        assert "Name: Asha Rao" in text
        assert "Email: asha@example.com" in text
        assert "Phone: +91 98450 00000" in text
        assert '"budgetRange": "80k-1L"' in text
        assert "Need a workstation for video editing." in text

    def test_plain_text_defaults(self):
        text = _quote(phone=..., message=..., serviceDetails=...).body_text
        assert "Phone: N/A" in text
        assert text.rstrip().endswith("Message:\nN/A")
        assert "Service Details:\nN/A" in text

    def test_details_rendered_in_order_with_labels(self):
        html = _quote(serviceDetails={"useCase": "Editing", "budgetRange": "80k", "ramSize": "32GB"}).body_html
        labels = re.findall(r"<li style=\"margin-bottom: 5px;\">\s*<strong>(.*?):</strong>", html)
        assert labels == ["use Case", "budget Range", "ram Size"]
        assert "Custom PC Build Details:" in html

    def test_details_block_omitted_when_absent(self):
        html = _quote(serviceDetails=...).body_html
        assert "Details:" not in html
        assert "margin-bottom: 5px" not in html

    def test_empty_details_keep_container(self):
        html = _quote(serviceDetails={}).body_html
        assert "Custom PC Build Details:" in html
        assert "<li" not in html

    def test_contact_block(self):
        html = _quote().body_html
        assert "<p><strong>Name:</strong> Asha Rao</p>" in html
        assert '<a href="mailto:asha@example.com">asha@example.com</a>' in html
        assert "<p><strong>Phone:</strong> +91 98450 00000</p>" in html

    def test_html_defaults(self):
        html = _quote(phone=..., message=...).body_html
        assert "<p><strong>Phone:</strong> N/A</p>" in html
        assert "No additional message provided." in html

    def test_user_content_is_escaped_in_html(self):
        rendered = _quote(name="<script>alert(1)</script>", message="<b>hi</b>",
                          serviceDetails={"note": "<img src=x>"})
        assert "<script>" not in rendered.body_html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in rendered.body_html
        assert "&lt;b&gt;hi&lt;/b&gt;" in rendered.body_html
        assert "&lt;img src=x&gt;" in rendered.body_html
        # Subject and plain text are not HTML
        assert rendered.subject.endswith("from <script>alert(1)</script>")
        assert "<b>hi</b>" in rendered.body_text


class TestRecommendation:

    def test_subject(self):
        assert _recommendation().subject == "New PC Recommendation Generated for Vikram"

    def test_html_only(self):
        assert _recommendation().body_text is None

    def test_requirements_block(self):
        html = _recommendation().body_html
        assert "<li><strong>Usage:</strong> Gaming</li>" in html
        assert "<li><strong>Budget:</strong> 1.2L</li>" in html
        assert "<li><strong>Speed Priority:</strong> High</li>" in html
        assert "<li><strong>Storage:</strong> 2TB</li>" in html
        assert "<li><strong>Brands:</strong> AMD, NVIDIA</li>" in html
        assert "<li><strong>Additional Notes:</strong> Quiet build please</li>" in html

    @pytest.mark.parametrize("brands", [..., None, []])
    def test_brands_absent_or_empty_shows_none(self, brands):
        html = _recommendation(form_overrides={"brands": brands}).body_html
        assert "<li><strong>Brands:</strong> None</li>" in html

    def test_missing_notes_show_na(self):
        html = _recommendation(form_overrides={"additionalNotes": ...}).body_html
        assert "<li><strong>Additional Notes:</strong> N/A</li>" in html

    def test_card_contents(self):
        html = _recommendation().body_html
        assert "Ryzen Gaming Rig - ₹115000</h3>" in html
        assert '<p><em>"Best frames per rupee"</em></p>' in html
        attrs = re.findall(r"<li><strong>(CPU|GPU|RAM|Storage|Motherboard|PSU|Cabinet):</strong>", html)
        # Requirements block has its own Storage entry first
        assert attrs == ["Storage", "CPU", "GPU", "RAM", "Storage", "Motherboard", "PSU", "Cabinet"]

    def test_one_card_per_build_in_order(self):
        builds = [make_build(build_name=f"Build {i}") for i in range(3)]
        html = _recommendation(recommendations=builds).body_html
        assert re.findall(r"(Build \d) - ₹", html) == ["Build 0", "Build 1", "Build 2"]

    def test_empty_recommendations_render_no_cards(self):
        html = _recommendation(recommendations=[]).body_html
        assert "Generated Recommendations" in html
        assert "₹" not in html

    def test_missing_item_fields_render_empty(self):
        html = _recommendation(recommendations=[{}]).body_html
        assert " - ₹</h3>" in html
        assert "<li><strong>CPU:</strong> </li>" in html
        assert '<p><em>""</em></p>' in html

    def test_price_rendered_as_given(self):
        html = _recommendation(recommendations=[make_build(estimated_price="1,15,000")]).body_html
        assert "₹1,15,000" in html

    def test_user_content_is_escaped(self):
        html = _recommendation(form_overrides={"name": "<i>V</i>"},
                               recommendations=[make_build(cpu="<blink>")]).body_html
        assert "&lt;i&gt;V&lt;/i&gt;" in html
        assert "&lt;blink&gt;" in html
        assert "<blink>" not in html
