"""Parsers for extraction engine output.

Two formats are understood:

``json``
    ``{"symbols": [{"path": ..., "signature": ..., "kind": ...}]}`` or a bare
    list of symbol objects. ``signature`` defaults to ``path``.

``lines``
    One public item per line, as printed by ``cargo public-api``::

        pub mod foo
        pub fn foo::bar(i32) -> i32
        pub struct foo::Baz
        impl core::clone::Clone for foo::Baz

    The whole line is the signature; the path is the item name that follows
    visibility, qualifiers and the item keyword, with generic arguments
    removed. ``impl`` blocks have no path of their own and are keyed by the
    full line.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from apidiff.config.models import OutputFormat
from apidiff.core.errors import ExtractionError
from apidiff.extract.models import Symbol


class SymbolRecord(BaseModel):
    """One symbol in the JSON document."""

    model_config = ConfigDict(extra="ignore")

    path: str = Field(min_length=1)
    signature: str | None = None
    kind: str | None = None

    def to_symbol(self) -> Symbol:
        return Symbol(self.path, self.signature or self.path, self.kind)


class SymbolsPayload(BaseModel):
    """Top-level JSON document."""

    model_config = ConfigDict(extra="ignore")

    symbols: list[SymbolRecord]


_PAYLOAD_ADAPTER: TypeAdapter[SymbolsPayload | list[SymbolRecord]] = TypeAdapter(
    SymbolsPayload | list[SymbolRecord]
)


def parse_json(text: str) -> list[Symbol]:
    try:
        payload = _PAYLOAD_ADAPTER.validate_json(text)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(loc) for loc in first["loc"]) or "<root>"
        raise ExtractionError.output_invalid(f"{where}: {first['msg']}") from e
    records = payload.symbols if isinstance(payload, SymbolsPayload) else payload
    return [r.to_symbol() for r in records]


# Attributes, visibility, qualifiers, then an optional item keyword.
_ITEM_PREFIX = re.compile(
    r"""
    ^(?:\#\[[^\]]*\]\s*)*
    (?:pub(?:\([^)]*\))?\s+)?
    (?:(?:async|unsafe|default|auto
        |const(?=\s+(?:fn|unsafe|async|extern)\b)
        |extern(?:\s+"[^"]*")?(?=\s+(?:fn|crate)\b))\s+)*
    (?:(?P<kind>mod|fn|struct|enum|union|trait|type|const|static|macro|use|crate)\s+)?
    (?:mut\s+)?
    """,
    re.VERBOSE,
)
_IMPL = re.compile(r"impl\b")


def _at_raw_identifier(text: str, i: int, out: list[str]) -> bool:
    """``r#ident`` starting a path segment at position *i*."""
    if out and out[-1] != "::":
        return False
    if not text.startswith("r#", i) or i + 2 >= len(text):
        return False
    nxt = text[i + 2]
    return nxt.isalpha() or nxt == "_"


def _scan_path(text: str) -> str:
    """Leading ``a::b<T>::c`` path with generic arguments removed.

    Raw identifiers keep their ``r#`` prefix.
    """
    out: list[str] = []
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if depth:
            if ch == "<":
                depth += 1
            elif ch == ">":
                depth -= 1
        elif ch == "<" and out:
            depth = 1
        elif _at_raw_identifier(text, i, out):
            out.append("r#")
            i += 2
            continue
        elif ch.isalnum() or ch == "_":
            out.append(ch)
        elif text.startswith("::", i):
            out.append("::")
            i += 2
            continue
        else:
            break
        i += 1
    return "".join(out).strip(":")


def parse_item_line(line: str) -> Symbol:
    """Parse one ``cargo public-api`` line into a Symbol."""
    signature = line.strip()
    match = _ITEM_PREFIX.match(signature)
    rest = signature[match.end() :] if match else signature
    kind = match.group("kind") if match else None

    if kind is None and _IMPL.match(rest):
        return Symbol(signature, signature, "impl")

    path = _scan_path(rest)
    if not path or not (path[0].isalpha() or path[0] == "_"):
        raise ExtractionError.output_invalid(f"no item path in line {signature!r}")
    return Symbol(path, signature, kind)


def parse_lines(text: str) -> list[Symbol]:
    return [parse_item_line(line) for line in text.splitlines() if line.strip()]


def parse_output(text: str, output_format: OutputFormat) -> list[Symbol]:
    """Parse engine stdout according to *output_format*."""
    if output_format == "json":
        return parse_json(text)
    if output_format == "lines":
        return parse_lines(text)
    raise ExtractionError.output_invalid(f"unknown output format {output_format!r}")
