"""TupleType and ObjectType: the structured type descriptors.

A descriptor is one of:

- ``str``: an atomic type name (``"number"``, ``"string[]"``, ``"Date"`` ...)
- ``TupleType``: a positional sequence of descriptors
- ``ObjectType``: an ordered mapping from field name to descriptor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class TupleType:
    items: list["TypeDescriptor"]


@dataclass
class ObjectType:
    fields: dict[str, "TypeDescriptor"] = field(default_factory=dict)
    optional: set[str] = field(default_factory=set)  # fields seen as null/undefined


TypeDescriptor = Union[str, TupleType, ObjectType]
