"""Jinja2 rendering of the projected diff.

Templates see three names: ``added`` and ``removed`` (lists of display
strings) and ``changed`` (list of items with ``old`` and ``new``). Undefined
names are errors rather than empty strings.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, StrictUndefined, Template, TemplateError, TemplateSyntaxError

from apidiff.core.errors import RenderError
from apidiff.diff.projection import RenderableDiff


def _environment() -> Environment:
    return Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


class TemplateRenderer:
    """Compiled user template."""

    def __init__(self, source: str, *, name: str = "<template>") -> None:
        self._name = name
        try:
            self._template: Template = _environment().from_string(source)
        except TemplateSyntaxError as e:
            raise RenderError.failed(name, f"line {e.lineno}: {e.message}") from e

    @classmethod
    def from_file(cls, path: Path) -> TemplateRenderer:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RenderError.failed(str(path), f"cannot read template: {e}") from e
        return cls(source, name=str(path))

    @property
    def name(self) -> str:
        return self._name

    def render(self, model: RenderableDiff) -> str:
        try:
            return self._template.render(**model.to_dict())
        except TemplateError as e:
            raise RenderError.failed(self._name, str(e)) from e
        except Exception as e:
            # Template expressions can raise arbitrary Python errors
            raise RenderError.failed(self._name, f"{type(e).__name__}: {e}") from e
