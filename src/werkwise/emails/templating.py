"""Placeholder substitution for e-mail templates.

Supports `{{key}}` for plain values plus one list block for project hours:

    {{#if projects}}Projecten:
    {{#each projects}}{{/each}}{{/if}}
"""
from __future__ import annotations

import re
from typing import Any, Mapping

from ..common.formatting import format_number

_IF_PROJECTS = re.compile(r"\{\{#if projects\}\}([\s\S]*?)\{\{/if\}\}")
_EACH_PROJECTS = re.compile(r"\{\{#each projects\}\}([\s\S]*?)\{\{/each\}\}")


def render_template(text: str, data: Mapping[str, Any]) -> str:
    rendered = text
    for key, value in data.items():
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            rendered = rendered.replace("{{" + key + "}}", value if isinstance(value, str) else format_number(value))

    projects = data.get("projects")
    if isinstance(projects, list):
        if projects:
            rendered = _IF_PROJECTS.sub(lambda m: m.group(1), rendered)
            items = "\n".join(
                f"- {p.get('project_name')}: {format_number(p.get('hours'))} uren" for p in projects
            )
            rendered = _EACH_PROJECTS.sub(lambda m: items, rendered)
        else:
            rendered = _IF_PROJECTS.sub("", rendered)

    return rendered
