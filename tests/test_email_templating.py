from __future__ import annotations

from werkwise.emails.client import strip_tags, wrap_html
from werkwise.emails.templating import render_template


def test_placeholders_are_replaced():
    text = "Hoi {{user_name}}, je hebt {{hours_filled}} van {{minimum_hours}} uur ({{week_number}})"
    out = render_template(text, {"user_name": "Pieter", "hours_filled": 7.5, "minimum_hours": 40.0, "week_number": 42})
    assert out == "Hoi Pieter, je hebt 7.5 van 40 uur (42)"


def test_unknown_placeholders_are_left_alone():
    assert render_template("{{onbekend}} {{user_name}}", {"user_name": "Emma"}) == "{{onbekend}} Emma"


def test_projects_block_expands_items():
    text = "Totaal {{total_hours}}\n{{#if projects}}Projecten:\n{{#each projects}}{{/each}}{{/if}}"
    data = {
        "total_hours": 12,
        "projects": [{"project_name": "Villa", "hours": 8.0}, {"project_name": "School", "hours": 4}],
    }
    assert render_template(text, data) == "Totaal 12\nProjecten:\n- Villa: 8 uren\n- School: 4 uren"


def test_projects_block_removed_when_empty():
    text = "Start{{#if projects}} Projecten: {{#each projects}}{{/each}}{{/if}} Einde"
    assert render_template(text, {"projects": []}) == "Start Einde"


def test_html_wrapping_and_text_body():
    html = wrap_html("Uren <week>", "Hoi <b>Jan</b>", year=2025)
    assert "<title>Uren &lt;week&gt;</title>" in html
    assert "&copy; 2025 Werkwise" in html
    assert strip_tags("Hoi <b>Jan</b>") == "Hoi Jan"
