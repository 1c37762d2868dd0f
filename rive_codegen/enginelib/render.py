"""Adapters over the two template backends."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Union

import chevron
import jinja2

from .errors import ConfigError, TemplateError
from .projection import ExpressionProjector, LogicLessProjector


class TemplateEngine(str, Enum):
    MUSTACHE = "mustache"
    JINJA = "jinja"

    @classmethod
    def parse(cls, value: Union[str, "TemplateEngine"]) -> "TemplateEngine":
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        if name == "inja":
            return cls.JINJA
        try:
            return cls(name)
        except ValueError:
            raise ConfigError(f"Unknown template engine: {value}") from None


class MustacheRenderer:
    engine = TemplateEngine.MUSTACHE
    template_suffix = ".mustache"

    def __init__(self):
        self.projector = LogicLessProjector()

    def render(self, template: str, data: Dict[str, Any]) -> str:
        try:
            return chevron.render(template, data)
        except (chevron.ChevronError, KeyError, IndexError) as exc:
            raise TemplateError(f"Mustache rendering failed: {exc}") from exc


class JinjaRenderer:
    engine = TemplateEngine.JINJA
    template_suffix = ".jinja"

    def __init__(self):
        self.projector = ExpressionProjector()
        self.environment = jinja2.Environment(
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render(self, template: str, data: Dict[str, Any]) -> str:
        try:
            return self.environment.from_string(template).render(data)
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Jinja rendering failed: {exc}") from exc


def renderer_for(engine: Union[str, TemplateEngine]):
    engine = TemplateEngine.parse(engine)
    if engine is TemplateEngine.MUSTACHE:
        return MustacheRenderer()
    return JinjaRenderer()
