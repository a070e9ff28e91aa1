from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

Layout = Literal["table", "flow"]

WORKSHEET_TITLE = "PRODUCTIVITY SUPERHERO WORKSHEET"
FIRST_ITEM_MARKERS = ("1. Creating genuine", "1.Creating genuine")
PROUD_OF_QUESTION = "What am I most proud of?"
ACHIEVEMENT_QUESTION = "What did it take for me to achieve those things?"


@dataclass(frozen=True)
class LayoutHit:
    layout: Layout
    marker: Optional[str]  # the cue that decided "table"; None for flow
    line_index: int  # line carrying the cue, -1 for flow

    @property
    def is_table(self) -> bool:
        return self.layout == "table"


_FLOW = LayoutHit(layout="flow", marker=None, line_index=-1)


def _table_marker(line: str) -> Optional[str]:
    if WORKSHEET_TITLE in line:
        return WORKSHEET_TITLE
    if "PRODUCTIVITY" in line and "WORKSHEET" in line:
        return "PRODUCTIVITY+WORKSHEET"
    for m in FIRST_ITEM_MARKERS:
        if m in line:
            return m
    return None


def detect_layout(lines: List[str]) -> LayoutHit:
    """
    One-shot template decision for the whole document.

    Table: worksheet title, the canonical first grid item, or the "proud
    of" and "achievement" questions both present. Everything else is flow.
    """
    has_achievement = any(ACHIEVEMENT_QUESTION in ln for ln in lines)
    for idx, ln in enumerate(lines):
        marker = _table_marker(ln)
        if marker is not None:
            return LayoutHit(layout="table", marker=marker, line_index=idx)
        if has_achievement and PROUD_OF_QUESTION in ln:
            return LayoutHit(layout="table", marker=PROUD_OF_QUESTION, line_index=idx)
    return _FLOW
