"""Render a TypeDescriptor as TypeScript-style type text."""

from __future__ import annotations

import re

from .typedef import ObjectType, TupleType, TypeDescriptor

_IDENTIFIER_RE = re.compile(r"[a-zA-Z_$][a-zA-Z0-9_$]*")
_NULLISH_WORDS = ("undefined", "null")


def render(
    descriptor: TypeDescriptor,
    indent_level: int = 0,
    *,
    indent: str = "  ",
    optional: str = "nullable",
) -> str:
    """Render *descriptor*; objects become one-field-per-line brace blocks.

    ``optional`` picks how a field gets its ``?``: ``"nullable"`` uses the
    flag recorded during inference, ``"substring"`` looks for ``null`` or
    ``undefined`` anywhere in the field's rendered type.
    """
    if isinstance(descriptor, TupleType):
        items = (
            render(item, indent_level, indent=indent, optional=optional)
            for item in descriptor.items
        )
        return f"[{', '.join(items)}]"

    if not isinstance(descriptor, ObjectType):
        return descriptor

    if not descriptor.fields:
        return "{}"

    inner = indent * (indent_level + 1)
    lines = []
    for key, value in descriptor.fields.items():
        value_text = render(value, indent_level + 1, indent=indent, optional=optional)
        if optional == "substring":
            is_optional = any(word in value_text for word in _NULLISH_WORDS)
        else:
            is_optional = key in descriptor.optional
        marker = "?" if is_optional else ""
        lines.append(f"{inner}{format_key(key)}{marker}: {value_text};")

    return "{\n" + "\n".join(lines) + "\n" + indent * indent_level + "}"


def format_key(key: str) -> str:
    """Bare identifier, or a single-quoted string literal."""
    if _IDENTIFIER_RE.fullmatch(key):
        return key
    escaped = key.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
