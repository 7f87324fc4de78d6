"""Line-level diffs used for human readable change reports."""

from __future__ import annotations

import difflib
from enum import Enum
from typing import NamedTuple, Sequence

__all__ = ["DiffLine", "DiffMarker", "NO_NEWLINE_MARKER", "diff_lines", "render_diff"]


NO_NEWLINE_MARKER = "\\ No newline at end of file"


class DiffMarker(str, Enum):
    CONTEXT = " "
    REMOVED = "-"
    ADDED = "+"


class DiffLine(NamedTuple):
    marker: DiffMarker
    line: str
    newline: bool = True


def _tag(marker: DiffMarker, raw: str) -> DiffLine:
    text = raw.splitlines()[0]
    return DiffLine(marker, text, text != raw)


def diff_lines(before: str, after: str) -> list[DiffLine]:
    """Return every line of ``before`` and ``after`` tagged as context, removed or added.

    Lines are matched together with their terminators, so a missing final
    newline shows up as a removed and an added line. Only used for reporting.
    Whether two files differ is decided by comparing their normalized content,
    never by looking at this output.
    """

    old = before.splitlines(keepends=True)
    new = after.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)

    result: list[DiffLine] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            result.extend(_tag(DiffMarker.CONTEXT, line) for line in old[i1:i2])
            continue
        if tag in {"replace", "delete"}:
            result.extend(_tag(DiffMarker.REMOVED, line) for line in old[i1:i2])
        if tag in {"replace", "insert"}:
            result.extend(_tag(DiffMarker.ADDED, line) for line in new[j1:j2])
    return result


def render_diff(lines: Sequence[DiffLine]) -> str:
    rendered: list[str] = []
    for entry in lines:
        rendered.append(f"{entry.marker.value}{entry.line}\n")
        if not entry.newline:
            rendered.append(NO_NEWLINE_MARKER + "\n")
    return "".join(rendered)
