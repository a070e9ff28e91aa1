import re
from typing import List, Optional

_NBSP = "\u00a0"
_THIN = "\u2009"
_NNBSP = "\u202f"

_RE_SOFT_HYPHEN = re.compile("\u00ad")
_RE_SPECIAL_SPACES = re.compile("[{}]".format(re.escape(_NBSP + _THIN + _NNBSP)))

# \r\n, bare \n and old-Mac \r all separate logical lines
_RE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def normalize_spaces(text: str) -> str:
    if not text:
        return text
    s = _RE_SOFT_HYPHEN.sub("", text)
    return _RE_SPECIAL_SPACES.sub(" ", s)


def normalize_lines(text: Optional[str]) -> List[str]:
    """
    Split raw document text into trimmed, non-empty lines.
    Order is preserved; whitespace-only lines are dropped.
    """
    if not text:
        return []
    lines: List[str] = []
    for raw in _RE_LINE_BREAK.split(normalize_spaces(text)):
        ln = raw.strip()
        if ln:
            lines.append(ln)
    return lines
