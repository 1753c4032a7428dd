"""Differences between two flattened saves."""
from __future__ import annotations

import json
from typing import Dict, List, Mapping

from suprasave.core.types import PlainValue

DiffReport = Dict[str, Dict[str, PlainValue]]


def _identity(value: PlainValue) -> str:
    return json.dumps(value, sort_keys=True)


def diff_flattened(a: Mapping[str, PlainValue], b: Mapping[str, PlainValue]) -> Dict[str, PlainValue]:
    """Return what ``a`` holds that ``b`` does not.

    List values yield the entries missing from ``b``'s list of the same name,
    de-duplicated in first-seen order; empty results are dropped. Scalar
    values are kept when ``b`` lacks the name or holds a different value.
    """
    result: Dict[str, PlainValue] = {}
    for name, value in a.items():
        other = b.get(name)
        if isinstance(value, list):
            present = {_identity(entry) for entry in other} if isinstance(other, list) else set()
            unique: List[PlainValue] = []
            for entry in value:
                key = _identity(entry)
                if key in present:
                    continue
                present.add(key)
                unique.append(entry)
            if unique:
                result[name] = unique
        elif name not in b or _identity(other) != _identity(value):
            result[name] = value
    return result


def compare_flattened(
    label_a: str,
    a: Mapping[str, PlainValue],
    label_b: str,
    b: Mapping[str, PlainValue],
) -> DiffReport:
    """Per-archive report of the entries unique to each side."""
    return {label_a: diff_flattened(a, b), label_b: diff_flattened(b, a)}
