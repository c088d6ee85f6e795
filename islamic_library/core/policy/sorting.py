# islamic_library/core/policy/sorting.py
"""
Sort aliases.

List endpoints accept sort keys in the compact form used by the catalog
database: a field name, optionally prefixed with "-" for descending order
("title", "-createdAt"). This module converts between that form and an
explicit (field, direction) pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

DESCENDING_PREFIX = "-"


class SortDirection(int, Enum):
    """Matches the database convention: 1 ascending, -1 descending."""
    ASCENDING = 1
    DESCENDING = -1


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def alias(self) -> str:
        return encode_sort_alias(self)


def decode_sort_alias(alias: str) -> SortSpec:
    """
    "-title" -> SortSpec("title", DESCENDING); "title" -> SortSpec("title", ASCENDING).
    Raises ValueError for an empty alias or a bare "-".
    """
    raw = alias.strip()
    if raw.startswith(DESCENDING_PREFIX):
        field, direction = raw[len(DESCENDING_PREFIX):], SortDirection.DESCENDING
    else:
        field, direction = raw, SortDirection.ASCENDING
    if not field or field.startswith(DESCENDING_PREFIX):
        raise ValueError(f"Invalid sort alias: {alias!r}")
    return SortSpec(field=field, direction=direction)


def encode_sort_alias(spec: SortSpec) -> str:
    prefix = DESCENDING_PREFIX if spec.direction is SortDirection.DESCENDING else ""
    return f"{prefix}{spec.field}"


def parse_sort(param: Optional[str], allowed_fields: Iterable[str] = ()) -> Tuple[List[SortSpec], List[str]]:
    """
    Parse a comma separated sort parameter ("-downloads,title").

    Returns (specs, violations). Fields outside allowed_fields are reported as
    violations and left out of specs; an empty allowed_fields accepts any field.
    A field named twice keeps its first position and its last direction.
    """
    if not param:
        return [], []

    allowed = set(allowed_fields)
    specs: Dict[str, SortSpec] = {}
    violations: List[str] = []
    for part in param.split(","):
        if not part.strip():
            continue
        try:
            spec = decode_sort_alias(part)
        except ValueError as e:
            violations.append(str(e))
            continue
        if allowed and spec.field not in allowed:
            violations.append(f"Sort field '{spec.field}' is not allowed")
        else:
            specs[spec.field] = spec
    return list(specs.values()), violations


__all__ = [
    "SortDirection",
    "SortSpec",
    "decode_sort_alias",
    "encode_sort_alias",
    "parse_sort",
]
