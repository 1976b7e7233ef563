# patchmend/repair/hunks.py
from __future__ import annotations

from typing import List, Optional

from ..models.hunk import NO_NEWLINE_MARKER, Hunk

__all__ = ["locate_lines", "closest_number", "parse_hunks", "hunks_to_patch"]


def locate_lines(original_text: str, candidate_line: str) -> List[int]:
    """
    Return every 1-based line number of *original_text* whose trimmed text
    equals *candidate_line* with its +/- marker removed and trimmed.
    """
    search = candidate_line
    if search.startswith(("+", "-")):
        search = search[1:]
    search = search.strip()
    return [
        lineno
        for lineno, line in enumerate(original_text.splitlines(), 1)
        if line.strip() == search
    ]


def closest_number(numbers: List[int], goal: int) -> Optional[int]:
    """Number nearest to *goal*; on a tie the earliest one wins."""
    if not numbers:
        return None
    return min(numbers, key=lambda n: abs(n - goal))


def _starts_file_header(lines: List[str], i: int) -> bool:
    """True when lines[i] opens the next file section of a multi-file patch."""
    line = lines[i]
    if line.startswith(("diff --git ", "Index: ")):
        return True
    # '--- x' alone may be a deleted '-- x' line; require the full header triple.
    return (
        line.startswith("--- ")
        and i + 2 < len(lines)
        and lines[i + 1].startswith("+++ ")
        and lines[i + 2].startswith("@@")
    )


def parse_hunks(patch_text: str) -> List[Hunk]:
    """
    Split patch text into hunks. Lines before the first '@@' header (Index:,
    ---, +++) are ignored; every body line is kept in order, unmarked ones as
    context so later repairs can replace them.
    """
    raw_lines = patch_text.splitlines()
    while raw_lines and raw_lines[-1] == "":
        raw_lines.pop()

    hunks: List[Hunk] = []
    header: Optional[str] = None
    body: List[str] = []
    missing_newline = False

    for i, line in enumerate(raw_lines):
        if line.startswith("@@"):
            if header is not None:
                hunks.append(Hunk.from_header(header, body, missing_newline))
            header, body, missing_newline = line, [], False
            continue
        if header is None:
            continue
        if _starts_file_header(raw_lines, i):
            hunks.append(Hunk.from_header(header, body, missing_newline))
            header, body, missing_newline = None, [], False
            continue
        if line.startswith("\\"):
            missing_newline = True
            continue
        body.append(line)

    if header is not None:
        hunks.append(Hunk.from_header(header, body, missing_newline))
    return hunks


def hunks_to_patch(hunks: List[Hunk]) -> str:
    """Render hunks back into patch text (header then body, newline-joined)."""
    blocks: List[str] = []
    for hunk in hunks:
        block = [hunk.header, *hunk.lines]
        if hunk.missing_newline:
            block.append(NO_NEWLINE_MARKER)
        blocks.append("\n".join(block))
    return "\n".join(blocks)
