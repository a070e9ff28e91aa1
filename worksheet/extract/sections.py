from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

from worksheet.extract.headings import is_heading, is_section_break
from worksheet.extract.layout import Layout

logger = logging.getLogger(__name__)

SECTIONS_YAML = Path(__file__).with_name("sections.yaml")

# Window caps when no closing boundary exists
TABLE_LIST_LOOKAHEAD = 50
TABLE_TEXT_LOOKAHEAD = 20

Window = Tuple[int, int]  # [start, end) line indices

# ---------- section taxonomy ----------


@dataclass(frozen=True)
class SectionDef:
    id: str
    kind: str  # "list" | "text" | "anchor"
    labels: Tuple[str, ...]
    table_labels: Tuple[str, ...] = ()
    end_labels: Tuple[str, ...] = ()
    table_until: Tuple[str, ...] = ()
    max_items: int = 1
    grid: bool = False

    def labels_for(self, layout: Layout) -> Tuple[str, ...]:
        if layout == "table" and self.table_labels:
            return self.table_labels
        return self.labels


@dataclass(frozen=True)
class SectionTable:
    sections: Tuple[SectionDef, ...] = field(default_factory=tuple)

    def __iter__(self):
        return iter(self.sections)

    def get(self, section_id: str) -> SectionDef:
        for s in self.sections:
            if s.id == section_id:
                return s
        raise KeyError(section_id)


def _as_tuple(v) -> Tuple[str, ...]:
    if v is None:
        return ()
    if isinstance(v, str):
        return (v,)
    return tuple(str(x) for x in v)


def parse_sections(rows: Iterable[dict]) -> SectionTable:
    out: List[SectionDef] = []
    for r in rows:
        kind = r.get("kind", "text")
        if kind not in ("list", "text", "anchor"):
            raise ValueError(f"section {r.get('id')!r}: unknown kind {kind!r}")
        labels = _as_tuple(r.get("labels"))
        if not labels:
            raise ValueError(f"section {r.get('id')!r}: no labels")
        out.append(
            SectionDef(
                id=r["id"],
                kind=kind,
                labels=labels,
                table_labels=_as_tuple(r.get("table_labels")),
                end_labels=_as_tuple(r.get("end_labels")),
                table_until=_as_tuple(r.get("table_until")),
                max_items=int(r.get("max_items", 1)),
                grid=bool(r.get("grid", False)),
            )
        )
    return SectionTable(sections=tuple(out))


def load_sections(path: Optional[Path] = None) -> SectionTable:
    """Load a section table; the bundled one is parsed once and cached."""
    if path is None or Path(path).resolve() == SECTIONS_YAML.resolve():
        return _bundled_sections()
    rows = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    return parse_sections(rows or [])


@lru_cache(maxsize=1)
def _bundled_sections() -> SectionTable:
    rows = yaml.safe_load(SECTIONS_YAML.read_text(encoding="utf-8"))
    return parse_sections(rows)


# ---------- locating ----------


def locate_sections(
    lines: Sequence[str], sections: Iterable[SectionDef]
) -> Dict[str, int]:
    """
    Grid scan: one pass over the document, first matching line per
    section wins. Sections never seen are absent from the result.
    """
    defs = list(sections)
    found: Dict[str, int] = {}
    for i, ln in enumerate(lines):
        for s in defs:
            if s.id in found:
                continue
            if any(label in ln for label in s.labels_for("table")):
                found[s.id] = i
    logger.debug("grid section index: %s", found)
    return found


def find_heading(
    lines: Sequence[str], labels: Sequence[str], start: int = 0
) -> Optional[int]:
    """First line (from `start`) containing a label; labels in preference order."""
    for label in labels:
        for i in range(max(0, start), len(lines)):
            if label in lines[i]:
                return i
    return None


def locate_section(
    lines: Sequence[str], section: SectionDef, layout: Layout = "flow"
) -> Optional[int]:
    """Start index of `section`, or None when no label occurs."""
    if layout == "table":
        return locate_sections(lines, [section]).get(section.id)
    return find_heading(lines, section.labels_for(layout))


def flow_window(
    lines: Sequence[str], index: int, end_labels: Sequence[str] = ()
) -> Window:
    """
    Content after the heading at `index`, up to the next structural
    heading or explicit end label.
    """
    start = index + 1
    for i in range(start, len(lines)):
        ln = lines[i]
        if is_heading(ln) or any(label in ln for label in end_labels):
            return start, i
    return start, len(lines)


def next_section_index(lines: Sequence[str], index: int) -> int:
    for i in range(index + 1, len(lines)):
        if is_section_break(lines[i]):
            return i
    return -1


def next_major_section_index(
    lines: Sequence[str], index: int, candidates: Iterable[Optional[int]]
) -> int:
    """Closest known anchor after `index`; else the next structural break."""
    later = [c for c in candidates if c is not None and c > index]
    if later:
        return min(later)
    return next_section_index(lines, index)


def table_list_window(lines: Sequence[str], index: int) -> Window:
    start = index + 1
    nxt = next_section_index(lines, index)
    end = nxt if nxt > 0 else min(start + TABLE_LIST_LOOKAHEAD, len(lines))
    return start, end


def table_text_window(
    lines: Sequence[str], index: int, anchors: Iterable[Optional[int]]
) -> Window:
    start = index + 1
    nxt = next_major_section_index(lines, index, anchors)
    end = nxt if nxt > 0 else min(start + TABLE_TEXT_LOOKAHEAD, len(lines))
    return start, end


def window_lines(lines: Sequence[str], window: Window) -> List[str]:
    start, end = window
    return [ln for ln in lines[start:end] if ln.strip()]
