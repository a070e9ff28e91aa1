"""
Recovery and clean-up for the four personal-values lists.

Two-column grids often come out of the converter row by row, so items land
under the wrong question or under no recognisable window at all. The
fallbacks anchor content on the four worksheet questions instead. These
helpers work on plain dicts (field -> list of 3 strings) and always return
new dicts.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from worksheet.extract.headings import (
    QUESTION_PATTERNS,
    is_likely_header,
    is_question,
)
from worksheet.extract.schema import PERSONAL_VALUE_ITEMS, fixed_length

logger = logging.getLogger(__name__)

PV_FIELDS = ("proud_of", "achievement", "happiness", "inspiration")

PersonalValuesDict = Dict[str, List[str]]

_RE_ITEM = re.compile(r"^(\d+)[.)\s]+\s*(.*)")


def _copy(pv: Mapping[str, Sequence[str]]) -> PersonalValuesDict:
    return {f: list(fixed_length(pv.get(f, ()), PERSONAL_VALUE_ITEMS)) for f in PV_FIELDS}


def _counts(pv: Mapping[str, Sequence[str]]) -> Dict[str, int]:
    return {f: sum(1 for v in pv.get(f, ()) if v) for f in PV_FIELDS}


def scrub_questions(pv: Mapping[str, Sequence[str]]) -> PersonalValuesDict:
    """Blank out slots that are really the worksheet questions."""
    out = {f: list(pv.get(f, ())) for f in PV_FIELDS}
    for f, values in out.items():
        for i, v in enumerate(values):
            if v and is_question(v):
                logger.debug("removing question text from %s[%d]: %r", f, i, v)
                values[i] = ""
    return _copy(out)


def proximity_fill(
    lines: Sequence[str],
    question_index: Mapping[str, Optional[int]],
    pv: Mapping[str, Sequence[str]],
) -> PersonalValuesDict:
    """
    Fill fields that are still all-empty with numbered items (1..3) from
    anywhere in the document, each attached to the closest question above it.
    """
    out = _copy(pv)
    empty = [f for f in PV_FIELDS if not any(out[f]) and question_index.get(f) is not None]
    if not empty:
        return out

    grouped: Dict[str, Dict[int, str]] = {f: {} for f in PV_FIELDS}
    for i, raw in enumerate(lines):
        ln = raw.strip()
        if len(ln) < 5 or any(p.search(ln) for p in QUESTION_PATTERNS):
            continue
        m = _RE_ITEM.match(ln)
        if not m:
            continue
        number, text = int(m.group(1)), m.group(2).strip()
        if not 1 <= number <= PERSONAL_VALUE_ITEMS or not text or is_likely_header(text):
            continue
        above = [(i - q, f) for f, q in question_index.items() if q is not None and i > q]
        if not above:
            continue
        _, closest = min(above)
        grouped[closest].setdefault(number, text)

    for f in empty:
        if grouped[f]:
            out[f] = [grouped[f].get(n, "") for n in range(1, PERSONAL_VALUE_ITEMS + 1)]
            logger.debug("proximity assignment for %s: %s", f, out[f])
    return out


# ---------- unnumbered fallbacks ----------

NEAR_QUESTION_LOOKAHEAD = 10
SECTION_LOOKAHEAD = 20
SPREAD_MIN_ITEMS = 4

_RE_BULLET = re.compile(r"^[•\-*]\s*")
_RE_ALL_CAPS = re.compile(r"^[A-Z\s]{5,}$")


def _taken(pv: Mapping[str, Sequence[str]]) -> Set[str]:
    return {v for f in PV_FIELDS for v in pv.get(f, ()) if v}


def _item_text(ln: str) -> str:
    m = _RE_ITEM.match(ln)
    if m:
        return m.group(2).strip()
    return _RE_BULLET.sub("", ln, count=1).strip()


def _skip(ln: str, taken: Set[str]) -> bool:
    """Already assigned, a worksheet question or a title line."""
    return ln in taken or _item_text(ln) in taken or is_question(ln) or is_likely_header(ln)


def _located(question_index: Mapping[str, Optional[int]]) -> Dict[str, int]:
    return {f: q for f, q in question_index.items() if f in PV_FIELDS and q is not None}


def near_question_fill(
    lines: Sequence[str],
    question_index: Mapping[str, Optional[int]],
    pv: Mapping[str, Sequence[str]],
) -> PersonalValuesDict:
    """
    Still-empty fields take up to three substantial lines from the few
    lines below their question. Needs at least two located questions.
    """
    out = _copy(pv)
    located = _located(question_index)
    if len(located) < 2:
        return out
    taken = _taken(out)
    for f in PV_FIELDS:
        q = located.get(f)
        if q is None or any(out[f]):
            continue
        found: List[str] = []
        for i in range(q + 1, min(q + NEAR_QUESTION_LOOKAHEAD, len(lines))):
            ln = lines[i].strip()
            if len(ln) <= 10 or "?" in ln or _skip(ln, taken):
                continue
            found.append(ln)
            taken.add(ln)
            if len(found) >= PERSONAL_VALUE_ITEMS:
                break
        if found:
            out[f] = list(fixed_length(found, PERSONAL_VALUE_ITEMS))
            logger.debug("content below question for %s: %s", f, out[f])
    return out


def section_fill(
    lines: Sequence[str],
    question_index: Mapping[str, Optional[int]],
    pv: Mapping[str, Sequence[str]],
) -> PersonalValuesDict:
    """
    Still-empty fields read the lines up to the next question: numbered
    entries by number, bullets and substantial lines into free slots.
    """
    out = _copy(pv)
    located = _located(question_index)
    taken = _taken(out)
    for f in PV_FIELDS:
        q = located.get(f)
        if q is None or any(out[f]):
            continue
        start = q + 1
        later = [o for o in located.values() if o > q]
        end = min(later) if later else min(start + SECTION_LOOKAHEAD, len(lines))

        slots = [""] * PERSONAL_VALUE_ITEMS
        for i in range(start, end):
            if all(slots):
                break
            ln = lines[i].strip()
            if len(ln) < 5 or _skip(ln, taken):
                continue
            m = _RE_ITEM.match(ln)
            if m:
                number, text = int(m.group(1)), m.group(2).strip()
                if 1 <= number <= PERSONAL_VALUE_ITEMS and text and not slots[number - 1]:
                    slots[number - 1] = text
                    taken.add(text)
                continue
            if _RE_BULLET.match(ln):
                text = _item_text(ln)
            elif len(ln) > 10 and "?" not in ln:
                text = ln
            else:
                continue
            if text and "" in slots:
                slots[slots.index("")] = text
                taken.add(text)
        if any(slots):
            out[f] = slots
            logger.debug("section content for %s: %s", f, slots)
    return out


def spread_fill(
    lines: Sequence[str],
    question_index: Mapping[str, Optional[int]],
    pv: Mapping[str, Sequence[str]],
) -> PersonalValuesDict:
    """
    Last resort: every unassigned content line in the document goes to the
    nearest question (questions above it win over questions below).
    Only used when at least four such lines exist.
    """
    out = _copy(pv)
    located = _located(question_index)
    if not located or all(any(out[f]) for f in PV_FIELDS):
        return out
    taken = _taken(out)

    candidates: List[Tuple[int, str]] = []
    for i, raw in enumerate(lines):
        ln = raw.strip()
        if len(ln) < 10 or _skip(ln, taken):
            continue
        m = _RE_ITEM.match(ln)
        if m:
            number, text = int(m.group(1)), m.group(2).strip()
            if 1 <= number <= PERSONAL_VALUE_ITEMS and text:
                candidates.append((i, text))
        elif len(ln) > 15 and not _RE_ALL_CAPS.match(ln) and "?" not in ln:
            candidates.append((i, ln))
    if len(candidates) < SPREAD_MIN_ITEMS:
        return out

    grouped: Dict[str, List[str]] = {f: [] for f in PV_FIELDS}
    for i, text in candidates:
        # a question below the line only wins when none is above it
        _, closest = min((i - q if i > q else 1000 + q - i, f) for f, q in located.items())
        grouped[closest].append(text)

    for f in PV_FIELDS:
        if grouped[f] and not any(out[f]):
            out[f] = list(fixed_length(grouped[f], PERSONAL_VALUE_ITEMS))
            logger.debug("nearest-question spread for %s: %s", f, out[f])
    return out


def fill_from_questions(
    lines: Sequence[str],
    question_index: Mapping[str, Optional[int]],
    pv: Mapping[str, Sequence[str]],
) -> PersonalValuesDict:
    """All question-anchored fallbacks, each only touching still-empty fields."""
    for step in (proximity_fill, near_question_fill, section_fill, spread_fill):
        pv = step(lines, question_index, pv)
    return _copy(pv)


def rebalance_grid(pv: Mapping[str, Sequence[str]]) -> PersonalValuesDict:
    """
    Undo the column mix-up of two-column grids: content only in fields
    1 & 3 (or only in 2 & 4).
    """
    out = _copy(pv)
    c = _counts(out)
    empty3 = ["", "", ""]

    if c["proud_of"] and not c["achievement"] and c["happiness"] and not c["inspiration"]:
        logger.debug("grid imbalance (1&3): moving happiness to achievement")
        out["achievement"] = list(out["happiness"])
        out["happiness"] = list(empty3)
        return out
    if not c["proud_of"] and c["achievement"] and not c["happiness"] and c["inspiration"]:
        logger.debug("grid imbalance (2&4): shifting columns left")
        out["proud_of"] = list(out["achievement"])
        out["achievement"] = list(out["inspiration"])
        out["inspiration"] = list(empty3)
    return out


def dedupe(pv: Mapping[str, Sequence[str]]) -> PersonalValuesDict:
    """Keep the first occurrence of each item across all four fields."""
    out = _copy(pv)
    seen = set()
    for f in PV_FIELDS:
        for i, v in enumerate(out[f]):
            if not v:
                continue
            if v in seen:
                logger.debug("removing duplicate from %s[%d]: %r", f, i, v)
                out[f][i] = ""
            else:
                seen.add(v)
    return out
