# patchmend/repair/anchor.py
from __future__ import annotations

from typing import Optional

from ..models.hunk import EXACT, HEURISTIC, NONE, AnchorResult, Hunk, is_addition
from .hunks import closest_number, locate_lines

__all__ = ["find_first_line_number", "resolve_hunk_start"]


def find_first_line_number(hunk: Hunk, original_text: str) -> Optional[int]:
    """
    Estimate the real 1-based line where *hunk* starts.

    Walks the hunk until a line occurs exactly once in the file (the anchor)
    and subtracts the number of original-file lines that precede it inside
    the hunk. Additions are never anchors and do not count toward the offset,
    since they have no position in the original.

    Returns 1 for an empty file and None when no line is unique.
    """
    if not original_text:
        return 1

    offset = 0
    for line in hunk.lines:
        if is_addition(line):
            continue
        matches = locate_lines(original_text, line)
        if len(matches) == 1:
            return matches[0] - offset
        offset += 1
    return None


def resolve_hunk_start(hunk: Hunk, original_text: str) -> AnchorResult:
    """
    Anchor the hunk, falling back to the occurrence of its first
    original-side line closest to the claimed start.

    The fallback is a guess: with repeated lines it can pick the wrong copy,
    which is why it is reported as HEURISTIC rather than EXACT.
    """
    anchor = find_first_line_number(hunk, original_text)
    if anchor is not None:
        if anchor < 1:
            # More leading lines than the file has room for; clamp.
            return AnchorResult(1, HEURISTIC)
        return AnchorResult(anchor, EXACT)

    first = next((ln for ln in hunk.lines if not is_addition(ln)), None)
    if first is None:
        # Nothing to match against; the claimed position is all we have.
        return AnchorResult(max(1, hunk.header_start), HEURISTIC)

    closest = closest_number(locate_lines(original_text, first), hunk.header_start)
    if closest is None:
        return AnchorResult(None, NONE)
    return AnchorResult(closest, HEURISTIC)
