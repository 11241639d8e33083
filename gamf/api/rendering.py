"""Rendering of the self-submitting form that hands the manifest to GitHub."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache()
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_redirect_page(*, action: str, manifest_json: str) -> str:
    """Return HTML that POSTs ``manifest_json`` to ``action`` on load.

    The manifest is HTML-escaped into the hidden input's value attribute.
    """
    template = _environment().get_template("redirect.html")
    return template.render(action=action, manifest=manifest_json)


__all__ = ["render_redirect_page"]
