"""Symbol extraction: models, engine adapter and output parsers."""

from apidiff.extract.engine import CommandExtractor, Extractor
from apidiff.extract.models import Symbol, SymbolDocument
from apidiff.extract.parsers import parse_item_line, parse_output

__all__ = [
    "CommandExtractor",
    "Extractor",
    "Symbol",
    "SymbolDocument",
    "parse_item_line",
    "parse_output",
]
