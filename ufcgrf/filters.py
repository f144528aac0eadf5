"""
Filter extraction from GRF chart titles.

UFC 3-340-02 chart files carry their design parameters only inside the
free-text title, e.g.::

    Figure 2-154.  Scaled gas impulse  (W/Vf = 0.002, i/W^(1/3) = 100)

``extract_filters`` recovers such ``key = value`` pairs by plain substring
scanning. It is used only at the ingestion boundary; the pipeline works on
the structured ``filters`` mapping afterwards.
"""

from __future__ import annotations

import json
from typing import Iterable, Mapping

from ufcgrf.constants import FILTER_TERMINATORS
from ufcgrf.models import FilterValue, parse_leading_float


def normalize_title(text: str) -> str:
    """Replace newlines by spaces and collapse repeated whitespace."""
    return " ".join(text.replace("\n", " ").split())


def extract_filters(text: str, keys: Iterable[str]) -> dict[str, FilterValue]:
    """
    Extract ``key = value`` pairs for the requested keys.

    For each key the first occurrence is located, then the next ``=``; the
    value runs up to the first ``,`` or ``)`` after it. Numeric values are
    stored as floats, anything else as the trimmed string. Keys that are not
    present (or have no ``=`` after them) are omitted.

    Args:
        text: Title or filename to scan.
        keys: Filter keys to look for.

    Returns:
        Mapping of found keys to their values, in the order of ``keys``.
    """
    clean = normalize_title(text)
    filters: dict[str, FilterValue] = {}

    for key in keys:
        pos = clean.find(key)
        if pos == -1:
            continue

        eq_pos = clean.find("=", pos)
        if eq_pos == -1:
            continue

        after_eq = clean[eq_pos + 1:].strip()
        end = len(after_eq)
        for sep in FILTER_TERMINATORS:
            sep_pos = after_eq.find(sep)
            if sep_pos != -1:
                end = min(end, sep_pos)

        raw = after_eq[:end].strip()
        number = parse_leading_float(raw)
        filters[key] = raw if number is None else number

    return filters


def filters_key(filters: Mapping[str, FilterValue]) -> str:
    """Canonical JSON rendering of a filter mapping, used as a grouping key."""
    return json.dumps(dict(filters), sort_keys=True, separators=(",", ":"))


def without_key(filters: Mapping[str, FilterValue], key: str) -> dict[str, FilterValue]:
    """Copy of ``filters`` with ``key`` removed."""
    return {k: v for k, v in filters.items() if k != key}
