"""
List-item recovery inside a section window.

Worksheets arrive with clean numbering, with no numbers at all, or with
numbers that are duplicated or mangled by the converter. `recover_items`
runs one pass per failure mode; each pass only fills slots the previous
passes left empty.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence, Set

from worksheet.extract.headings import RE_NUMBER_MARKER, is_heading, strip_number_marker

logger = logging.getLogger(__name__)

CONTENT_BLOCK_MIN_LEN = 15  # strictly longer
POSITIONAL_MIN_LEN = 10

# "1.", "1)", "•", "-", "*" at line start
_RE_LIST_MARKER = re.compile(r"^(?:\d+[.)]|[•\-*])\s*")


def _slots_to_list(slots: Dict[int, str], max_items: int) -> List[str]:
    return [slots.get(n, "") for n in range(1, max_items + 1)]


def _numbering_pass(
    window: Sequence[str], max_items: int, slots: Dict[int, str], used: Set[int]
) -> None:
    for i, ln in enumerate(window):
        if not ln or is_heading(ln):
            continue
        m = RE_NUMBER_MARKER.match(ln)
        if not m:
            continue
        n = int(m.group(1))
        if not 1 <= n <= max_items or n in slots:
            continue
        content = strip_number_marker(ln)
        if content:
            slots[n] = content
            used.add(i)


def _is_candidate(ln: str) -> bool:
    return bool(ln) and not is_heading(ln) and not RE_NUMBER_MARKER.match(ln)


def _content_block_pass(
    window: Sequence[str], max_items: int, slots: Dict[int, str], used: Set[int]
) -> None:
    slot = 1
    for i, ln in enumerate(window):
        if i in used or not _is_candidate(ln) or len(ln) <= CONTENT_BLOCK_MIN_LEN:
            continue
        while slot in slots and slot <= max_items:
            slot += 1
        if slot > max_items:
            break
        slots[slot] = ln
        used.add(i)
        slot += 1


def _positional_pass(
    window: Sequence[str], max_items: int, slots: Dict[int, str], used: Set[int]
) -> None:
    lines_per_item = max(1, len(window) // max_items)
    for i, ln in enumerate(window):
        if i in used or not _is_candidate(ln) or len(ln) < POSITIONAL_MIN_LEN:
            continue
        n = i // lines_per_item + 1
        if n <= max_items and n not in slots:
            slots[n] = ln
            used.add(i)


def recover_items(
    lines: Sequence[str], start: int, end: int, max_items: int
) -> List[str]:
    """
    Recover exactly `max_items` entries from lines[start:end].

    1. explicit numbering ("1. foo"), first occurrence of a number wins
    2. substantial unnumbered lines fill the next free slots in order
    3. remaining lines are bucketed by position in the window
    Slots never filled are "".
    """
    if max_items <= 0:
        return []
    window = [ln.strip() for ln in lines[max(0, start) : max(0, end)]]
    slots: Dict[int, str] = {}
    used: Set[int] = set()

    _numbering_pass(window, max_items, slots, used)
    if len(slots) < max_items:
        _content_block_pass(window, max_items, slots, used)
    if len(slots) < max_items:
        _positional_pass(window, max_items, slots, used)

    return _slots_to_list(slots, max_items)


def _marked_items(window: Sequence[str], max_items: int) -> List[str]:
    """Bulleted/numbered entries; unmarked lines continue the previous entry."""
    items: List[str] = []
    for ln in window:
        if not ln or is_heading(ln):
            continue
        if _RE_LIST_MARKER.match(ln):
            if len(items) >= max_items:
                break
            content = _RE_LIST_MARKER.sub("", ln, count=1).strip()
            if content:
                items.append(content)
        elif items:
            items[-1] = f"{items[-1]} {ln}"
    return items


def extract_flow_items(
    lines: Sequence[str], start: int, end: int, max_items: int
) -> List[str]:
    """
    Items under a heading in a conventional document: marked entries with
    continuation lines, else `recover_items`, else the bare lines in order.
    """
    window = [ln.strip() for ln in lines[max(0, start) : max(0, end)]]
    items = _marked_items(window, max_items)
    if not items:
        items = recover_items(window, 0, len(window), max_items)
        if not any(items):
            logger.debug("no list structure in window %d:%d; using plain lines", start, end)
            items = [ln for ln in window if ln and not is_heading(ln)]
    items = list(items[:max_items])
    items.extend([""] * (max_items - len(items)))
    return items
