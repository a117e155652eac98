"""Syntactic validation of reference names.

Runs before any repository lookup or filesystem work. Accepts branch and tag
names (short or fully qualified), commit ids, ``HEAD``/``@``, each optionally
followed by ``~N``/``^N`` ancestry suffixes.
"""

from __future__ import annotations

import re

import pygit2

from apidiff.core.errors import RefError

_ANCESTRY_SUFFIX = re.compile(r"(?:[~^]\d*)+$")
_HEAD_ALIASES = frozenset({"HEAD", "@"})


def validate_reference(ref: str) -> str:
    """Return *ref* unchanged if it is a legal reference, else raise RefError."""
    if not isinstance(ref, str) or not ref:
        raise RefError.invalid(str(ref), "reference is empty")
    if "\x00" in ref:
        raise RefError.invalid(ref, "reference contains a NUL byte")
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in ref):
        raise RefError.invalid(ref, "reference contains whitespace or control characters")
    if ref.startswith("-"):
        raise RefError.invalid(ref, "reference must not start with '-'")

    name = _ANCESTRY_SUFFIX.sub("", ref)
    if not name:
        raise RefError.invalid(ref, "ancestry suffix without a reference")
    if name in _HEAD_ALIASES:
        return ref

    qualified = name if name.startswith("refs/") else f"refs/heads/{name}"
    if not pygit2.reference_is_valid_name(qualified):
        raise RefError.invalid(ref, "not a valid reference name")
    return ref
