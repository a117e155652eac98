"""Template rendering and output."""

from apidiff.render.output import check_destination, write_output
from apidiff.render.template import TemplateRenderer

__all__ = [
    "TemplateRenderer",
    "check_destination",
    "write_output",
]
