from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from worksheet.extract.items import extract_flow_items, recover_items
from worksheet.extract.layout import Layout
from worksheet.extract.rebalance import (
    PV_FIELDS,
    dedupe,
    fill_from_questions,
    rebalance_grid,
    scrub_questions,
)
from worksheet.extract.schema import (
    ExtractedContent,
    Goals,
    PersonalValues,
    ProductivityConnection,
    WorkshopOutput,
    join_lines,
)
from worksheet.extract.sections import (
    SectionDef,
    SectionTable,
    find_heading,
    flow_window,
    locate_sections,
    table_list_window,
    table_text_window,
    window_lines,
)

logger = logging.getLogger(__name__)

# section id -> list[str] (list sections) or str (text sections)
Partial = Dict[str, Any]

IMPACT_SLOTS = ("impact_feel", "impact_benefits", "impact_improve")
# grid sections that close the personal-values block
VALUES_BLOCK_END = ("core_values", "value_impact", "my_goals")


# ---------- per-section helpers ----------


def _questions(found: Mapping[str, int]) -> Dict[str, Optional[int]]:
    return {f: found.get(f) for f in PV_FIELDS}


def _values_block(lines: Sequence[str], found: Mapping[str, int]) -> Sequence[str]:
    """Lines up to the first values/goals section after the four questions."""
    last_question = max((found[f] for f in PV_FIELDS if f in found), default=-1)
    ends = [found[s] for s in VALUES_BLOCK_END if found.get(s, -1) > last_question]
    return lines[: min(ends)] if ends else lines


def extract_section(lines: Sequence[str], s: SectionDef) -> Partial:
    """One section in heading-then-content form; {} when absent or empty."""
    idx = find_heading(lines, s.labels_for("flow"))
    if idx is None:
        return {}
    start, end = flow_window(lines, idx, s.end_labels)
    if s.kind == "list":
        items = extract_flow_items(lines, start, end, s.max_items)
        return {s.id: items} if any(items) else {}
    text = join_lines(window_lines(lines, (start, end)))
    return {s.id: text} if text else {}


def map_flow_sections(
    lines: Sequence[str], sections: SectionTable, *, skip_grid: bool = False
) -> Partial:
    """Heading-then-content extraction for every list/text section."""
    out: Partial = {}
    for s in sections:
        if s.kind == "anchor" or (skip_grid and s.grid):
            continue
        out.update(extract_section(lines, s))
    return out


def map_grid_sections(lines: Sequence[str], sections: SectionTable) -> Partial:
    """
    Grid worksheets: one scan for all grid labels, numbered lists under each
    question, free text up to the next known anchor.
    """
    grid = [s for s in sections if s.grid]
    found = locate_sections(lines, grid)
    out: Partial = {}
    for s in grid:
        idx = found.get(s.id)
        if idx is None or s.kind == "anchor":
            continue
        if s.kind == "list":
            start, end = table_list_window(lines, idx)
            items = recover_items(lines, start, end, s.max_items)
            logger.debug("grid %s (lines %d:%d): %s", s.id, start, end, items)
            if any(items):
                out[s.id] = items
        else:
            anchors = [found.get(a) for a in s.table_until]
            text = join_lines(window_lines(lines, table_text_window(lines, idx, anchors)))
            if text:
                out[s.id] = text

    pv = {f: out.get(f, []) for f in PV_FIELDS}
    pv = fill_from_questions(_values_block(lines, found), _questions(found), pv)
    pv = rebalance_grid(pv)
    pv = dedupe(pv)
    for f, values in pv.items():
        if any(values):
            out[f] = values
        else:
            out.pop(f, None)
    return out


def fill_personal_values(
    lines: Sequence[str], sections: SectionTable, parts: Mapping[str, Any]
) -> Partial:
    """
    Question-anchored fallbacks for personal-values fields the heading pass
    left empty. Fields that already have content are returned unchanged.
    """
    found = locate_sections(lines, [s for s in sections if s.grid])
    pv = {f: parts.get(f, []) for f in PV_FIELDS}
    pv = fill_from_questions(_values_block(lines, found), _questions(found), pv)
    return {f: values for f, values in pv.items() if any(values)}


# ---------- assembly ----------


def assemble(parts: Mapping[str, Any]) -> ExtractedContent:
    """Build the fixed-shape record; absent sections keep their defaults."""
    pv = scrub_questions({f: parts.get(f, []) for f in PV_FIELDS})
    return ExtractedContent(
        personal_values=PersonalValues(**pv),
        productivity_connection=ProductivityConnection(
            core_values=parts.get("core_values", ""),
            value_impact=parts.get("value_impact", ""),
        ),
        goals=Goals(
            description=parts.get("description", ""),
            impact=[parts.get(k, "") for k in IMPACT_SLOTS],
        ),
        workshop_output=WorkshopOutput(
            actions=parts.get("actions", []),
            reflections=parts.get("reflections", ""),
        ),
    )


def map_fields(
    lines: Sequence[str], layout: Layout, sections: SectionTable
) -> ExtractedContent:
    """
    Run the extraction steps for `layout` and assemble the record.
    A failing step is logged; whatever was extracted before it is kept.
    """
    steps: List[Callable[[Partial], Partial]]
    if layout == "table":
        steps = [
            lambda _: map_grid_sections(lines, sections),
            lambda _: map_flow_sections(lines, sections, skip_grid=True),
        ]
    else:
        steps = [
            lambda _: map_flow_sections(lines, sections),
            lambda so_far: fill_personal_values(lines, sections, so_far),
        ]

    parts: Partial = {}
    try:
        for step in steps:
            parts = {**parts, **step(parts)}
    except Exception:
        logger.exception("field mapping failed; returning partial record")
    return assemble(parts)
