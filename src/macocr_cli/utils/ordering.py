from __future__ import annotations

import locale
import re
from functools import cmp_to_key
from typing import Iterable, List, Tuple

INTEGER_PATTERN = re.compile(r"[+-]?\d+")
DIGIT_RUN_PATTERN = re.compile(r"(\d+)")


def _is_integer(value: str) -> bool:
    return INTEGER_PATTERN.fullmatch(value) is not None


def natural_key(value: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Split ``value`` into digit and text runs.

    Digit runs order by numeric value and sort ahead of text runs at the same
    position. Text runs go through the active collation, case-insensitively.
    """
    parts = []
    for index, chunk in enumerate(DIGIT_RUN_PATTERN.split(value.casefold())):
        if not chunk:
            continue
        if index % 2:
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, locale.strxfrm(chunk)))
    return tuple(parts)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_keys(left: str, right: str) -> int:
    if _is_integer(left) and _is_integer(right):
        numeric = _sign(int(left) - int(right))
        if numeric:
            return numeric
    else:
        left_key, right_key = natural_key(left), natural_key(right)
        if left_key != right_key:
            return -1 if left_key < right_key else 1
    if left != right:
        return -1 if left < right else 1
    return 0


def sorted_keys(keys: Iterable[str]) -> List[str]:
    """Deterministic order for file-name keys: ``1.png, 2.png, 10.png``."""
    return sorted(keys, key=cmp_to_key(compare_keys))
