from __future__ import annotations

import re

# ---------- heading patterns ----------

# "MY VALUES", "MY GOALS", "WORKSHOP ONE ACTIONS"
_RE_LABEL_CAPS = re.compile(r"^(?:MY|WORKSHOP) [A-Z]+")
# "1. PLAN", "2. REVIEW THE WEEK" (a single capital letter is a sentence, not a label)
_RE_ENUM_CAPS = re.compile(r"^\d+\.\s+[A-Z]{2,}\b")
# "PRODUCTIVITY", "MY VALUES"; an acronym inside an answer is not a break
_RE_CAPS_LEAD = re.compile(r"^[A-Z\s]{5,}")

# numbered list marker: "1. foo", "2 foo", "3.foo" is not a marker
RE_NUMBER_MARKER = re.compile(r"^(\d+)\.?\s+")

# Worksheet questions that must never end up as item content
QUESTION_PATTERNS = (
    re.compile(r"what am i most proud of\??", re.I),
    re.compile(r"what did it take for me to achieve those things\??", re.I),
    re.compile(r"what makes me happiest in life\??", re.I),
    re.compile(r"who do i find inspiring|qualities i am admiring", re.I),
)

_HEADER_PATTERNS = (
    re.compile(r"^MY [A-Z\s]+:?", re.I),
    re.compile(r"^PRODUCTIVITY [A-Z\s]+:?", re.I),
    re.compile(r"finding meaning and importance", re.I),
    re.compile(r"^\s*WORKSHEET\s*$", re.I),
    re.compile(r"^Section \d+", re.I),
    re.compile(r"^Table \d+", re.I),
)


def is_heading(line: str) -> bool:
    """
    Structural heading test. Over-classifies on purpose: a false positive
    cuts a list short, a false negative merges two sections.
    """
    if not line:
        return False
    return (
        bool(_RE_LABEL_CAPS.match(line))
        or bool(_RE_ENUM_CAPS.match(line))
        or "?" in line
    )


def starts_with_caps(line: str) -> bool:
    """Five or more leading uppercase letters or spaces."""
    return bool(_RE_CAPS_LEAD.match(line or ""))


def is_section_break(line: str) -> bool:
    """Next-section scanner: a heading or a line opening in capitals."""
    return is_heading(line) or starts_with_caps(line)


def is_question(text: str) -> bool:
    return any(p.search(text) for p in QUESTION_PATTERNS)


def is_likely_header(text: str) -> bool:
    """
    Title/caption test for grid worksheets: all-caps or a known title
    pattern, and no sentence structure (comma or " and ").
    """
    if not text:
        return False
    all_caps = text == text.upper() and len(text) > 5
    known = any(p.search(text) for p in _HEADER_PATTERNS)
    sentence_like = "," in text or " and " in text
    return (all_caps or known) and not sentence_like


def strip_number_marker(line: str) -> str:
    return RE_NUMBER_MARKER.sub("", line, count=1).strip()
