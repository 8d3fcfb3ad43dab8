"""Jinja2 environment for the server-rendered conversation pages."""

from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

APP_TITLE = "WizePrompt"


@lru_cache()
def get_environment() -> Environment:
    return Environment(
        loader=PackageLoader("wizeprompt", "ui/templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **context: Any) -> str:
    context.setdefault("app_title", APP_TITLE)
    return get_environment().get_template(template_name).render(**context)
