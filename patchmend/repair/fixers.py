# patchmend/repair/fixers.py
"""
Single-hunk repairs. Each takes a Hunk and the real file text and returns a
Hunk (the same object when nothing needed fixing). None of them mutate the
hunk they are given; a repaired hunk is rebuilt from a fresh ``lines`` list.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .._logging import resolve_logger
from ..models.hunk import (
    Hunk,
    is_addition,
    is_context,
    is_subtraction,
    line_body,
    parse_header,
)
from .anchor import resolve_hunk_start
from .hunks import closest_number, locate_lines

__all__ = [
    "fix_hunk_header",
    "fix_hunk_context",
    "fix_all_additions",
    "fix_accidental_deletions",
    "fix_hunk_deletion_too_short",
]

# Lines of lead-in context pulled from the file when a hunk has too few.
LEAD_CONTEXT_LINES = 4
# Below this many lines between the hunk start and its first deletion,
# the lead-in is rebuilt from LEAD_CONTEXT_LINES instead.
MIN_LEAD_CONTEXT = 3
# Real lines used as context when a hunk appends at end of file.
TAIL_CONTEXT_LINES = 5


# ---------- helpers ----------

def _contains_run(haystack: List[str], needle: List[str]) -> bool:
    """True if *needle* appears as contiguous lines of *haystack*."""
    n = len(needle)
    if n == 0:
        return True
    return any(haystack[i : i + n] == needle for i in range(len(haystack) - n + 1))


def _trimmed(lines: List[str]) -> List[str]:
    """Each line stripped, without blank lines at either end."""
    out = [ln.strip() for ln in lines]
    while out and not out[-1]:
        out.pop()
    while out and not out[0]:
        out.pop(0)
    return out


def _nearest_index(original_lines: List[str], matches, expected: int) -> Optional[int]:
    """0-based index of the trimmed line satisfying *matches* closest to 1-based *expected*."""
    numbers = [n for n, real in enumerate(original_lines, 1) if matches(real.strip())]
    nearest = closest_number(numbers, expected)
    return nearest - 1 if nearest is not None else None


def _recount_header(hunk: Hunk) -> Hunk:
    """Keep the header's start positions, refresh its line counts from the body."""
    old_start, _, new_start, _ = parse_header(hunk.header)
    removal_count = len(hunk.subtractions) + len(hunk.context_lines)
    addition_count = len(hunk.additions) + len(hunk.context_lines)
    header = f"@@ -{old_start},{removal_count} +{new_start},{addition_count} @@"
    return hunk.with_header(header, hunk.header_start)


def _align_lead(lead: List[str], window: List[str]) -> List[str]:
    """
    Rebuild the lines before the first deletion from the real *window*.

    Walks back from the deletion: each context entry takes the next real
    line, additions stay where they are. Real lines left over are prepended;
    context entries left over have no real counterpart and are dropped.
    """
    real = list(window)
    out: List[str] = []
    for line in reversed(lead):
        if is_addition(line):
            out.append(line)
        elif real:
            out.append(real.pop())
    out.extend(reversed(real))
    out.reverse()
    return out


def _repair_tail(lines: List[str], original_lines: List[str], first_line: int) -> List[str]:
    """
    Walk the hunk from its first deletion alongside the file starting at
    *first_line*. Lines equal to the file after trimming get the file's exact
    text; trailing context that disagrees with the file is cut. Once a line
    between the changes disagrees, the rest is kept verbatim.
    """
    changes = [i for i, ln in enumerate(lines) if not is_context(ln)]
    last_change = changes[-1] if changes else -1

    out: List[str] = []
    pos = first_line - 1
    for i, line in enumerate(lines):
        if is_addition(line):
            out.append(line)
            continue
        real: Optional[str] = original_lines[pos] if pos < len(original_lines) else None
        pos += 1
        body = line_body(line)
        if real is not None and body.strip() == real.strip():
            out.append(("-" if is_subtraction(line) else " ") + real)
            continue
        if i > last_change:
            break
        # Out of step with the file from here on.
        return out + lines[i:]
    return out


# ---------- repairs ----------

def fix_hunk_header(hunk: Hunk, original_text: str, *, logger=None, log: bool = False) -> Hunk:
    """
    Recompute the header from where the hunk really is.

    The start comes from the anchor, or from the occurrence of the first line
    nearest the claimed start. The header is rewritten when that start differs
    from the claimed one or the claimed counts disagree with the body.
    A hunk whose start cannot be resolved is returned unchanged.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    start = resolve_hunk_start(hunk, original_text)
    if start.line is None:
        log.debug(f"No start found for hunk {hunk.header!r}; header left as is")
        return hunk
    if start.line == hunk.header_start and hunk.counts_match_header():
        return hunk

    header_start = start.line
    removal_start = header_start + hunk.first_subtraction_line_index if hunk.subtractions else 0
    addition_start = header_start + hunk.first_addition_line_index if hunk.additions else 0
    if len(hunk.subtractions) <= 1 and len(hunk.additions) <= 1:
        # Single-line changes only carry the start line.
        removal_start = header_start
        addition_start = header_start

    removal_count = len(hunk.subtractions) + len(hunk.context_lines)
    addition_count = len(hunk.additions) + len(hunk.context_lines)
    header = f"@@ -{removal_start},{removal_count} +{addition_start},{addition_count} @@"

    log.debug(
        f"Header {hunk.header!r} -> {header!r} "
        f"(start {hunk.header_start} -> {header_start}, {start.confidence})"
    )
    return hunk.with_header(header, header_start)


def fix_hunk_context(hunk: Hunk, original_text: str, *, logger=None, log: bool = False) -> Hunk:
    """
    Replace the context before the first deletion with the real file lines,
    keeping any additions in place. Context and deletions from there on that
    only differ from the file in whitespace take the file's text, and
    trailing context that does not match the file is dropped.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if not hunk.subtractions:
        return hunk
    start = resolve_hunk_start(hunk, original_text)
    if start.line is None:
        return hunk

    original_lines = original_text.splitlines()
    sub_idx = next(i for i, ln in enumerate(hunk.lines) if is_subtraction(ln))
    lead = hunk.lines[:sub_idx]
    lead_original = sum(1 for ln in lead if not is_addition(ln))

    expected = start.line + lead_original
    sub_line = closest_number(locate_lines(original_text, hunk.lines[sub_idx]), expected)
    if sub_line is None:
        log.debug(f"First deletion of {hunk.header!r} not in file; context left as is")
        return hunk
    if sub_line < start.line or sub_line - start.line > max(LEAD_CONTEXT_LINES, lead_original):
        log.debug(
            f"First deletion of {hunk.header!r} at line {sub_line} is out of reach "
            f"of its start {start.line}; context left as is"
        )
        return hunk

    if sub_line - start.line >= MIN_LEAD_CONTEXT:
        context_start = max(1, start.line)
    else:
        context_start = max(1, sub_line - LEAD_CONTEXT_LINES)

    window = [" " + ln for ln in original_lines[context_start - 1 : sub_line - 1]]
    new_lines = _align_lead(lead, window) + _repair_tail(hunk.lines[sub_idx:], original_lines, sub_line)

    if new_lines == hunk.lines:
        return hunk
    log.debug(f"Context of {hunk.header!r} rebuilt from lines {context_start}-{sub_line - 1}")
    return hunk.with_lines(new_lines)


def fix_all_additions(hunk: Hunk, original_text: str, *, logger=None, log: bool = False) -> Hunk:
    """
    Pure insertions whose context is the end of the file are re-targeted as
    an append: the context becomes the file's last TAIL_CONTEXT_LINES lines,
    followed by the additions.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if hunk.subtractions or not hunk.additions or not hunk.context_lines:
        return hunk

    context = _trimmed([line_body(ln) for ln in hunk.context_lines])
    if not context:
        return hunk
    body = _trimmed([line_body(ln) for ln in hunk.lines])
    real = _trimmed(original_text.splitlines())
    if real[-len(context):] != context or body[: len(context)] != context:
        return hunk

    tail = original_text.splitlines()[-TAIL_CONTEXT_LINES:]
    new_lines = [" " + ln for ln in tail] + hunk.additions
    log.debug(f"Hunk {hunk.header!r} appends at end of file; context reset to last {len(tail)} lines")
    return hunk.with_lines(new_lines)


def fix_accidental_deletions(hunk: Hunk, original_text: str, *, logger=None, log: bool = False) -> Hunk:
    """
    Drop deletions of lines the hunk actually keeps.

    The hunk's original side is compared line by line with the file from
    ``header_start``. At a mismatch, if the line equals one of the hunk's
    deletions, that deletion is spurious and is removed; the file cursor
    stays put so the following lines line up again. Each mismatch removes at
    most one deletion. The drops are kept only if the remaining original side
    then matches the file at ``header_start``; otherwise the hunk is returned
    unchanged for the strict applier to reject.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    original_lines = original_text.splitlines()
    if _contains_run(original_lines, hunk.original_side) or hunk.header_start < 1:
        return hunk

    dropped: set[int] = set()
    cursor = hunk.header_start - 1
    for idx, line in enumerate(hunk.lines):
        if idx in dropped or is_addition(line):
            continue
        body = line_body(line)
        real = original_lines[cursor] if cursor < len(original_lines) else None
        if body == real:
            cursor += 1
            continue
        spurious = next(
            (
                j
                for j, cand in enumerate(hunk.lines)
                if j not in dropped and is_subtraction(cand) and line_body(cand) == body
            ),
            None,
        )
        if spurious is None:
            cursor += 1
            continue
        log.debug(f"Dropping accidental deletion {hunk.lines[spurious]!r} from {hunk.header!r}")
        dropped.add(spurious)

    if not dropped:
        return hunk
    repaired = hunk.with_lines([ln for j, ln in enumerate(hunk.lines) if j not in dropped])
    side = repaired.original_side
    at = hunk.header_start - 1
    if original_lines[at : at + len(side)] != side:
        log.debug(f"Dropping deletions does not line {hunk.header!r} up with the file; left as is")
        return hunk
    return _recount_header(repaired)


def fix_hunk_deletion_too_short(hunk: Hunk, original_text: str, *, logger=None, log: bool = False) -> Hunk:
    """
    Expand deletions that are only a prefix or suffix of a real line.

    The deletion becomes the full real line; when several lines fit, the one
    nearest the deletion's position under the hunk's anchor is used.
    Context lines next to it that were pieces of that same line are then
    removed, walking forward for a prefix match and backward for a suffix
    match, until a line is no longer part of the real line or equals the real
    neighbouring line.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    original_lines = original_text.splitlines()
    lines = list(hunk.lines)
    removed: set[int] = set()
    anchored = resolve_hunk_start(hunk, original_text).line
    start = anchored if anchored is not None else max(1, hunk.header_start)

    for idx, line in enumerate(hunk.lines):
        if idx in removed or not is_subtraction(line):
            continue
        deleted = line_body(line).strip()
        if not deleted or locate_lines(original_text, line):
            continue

        # The copy nearest to where this line sits in the hunk wins.
        expected = start + sum(1 for ln in hunk.lines[:idx] if not is_addition(ln))
        forwards = _nearest_index(original_lines, lambda real: real.startswith(deleted), expected)
        backwards = None
        if forwards is None:
            backwards = _nearest_index(original_lines, lambda real: real.endswith(deleted), expected)
        src = forwards if forwards is not None else backwards
        if src is None:
            continue

        actual = original_lines[src]
        lines[idx] = "-" + actual
        log.debug(f"Deletion {line!r} expanded to {lines[idx]!r}")

        step = 1 if forwards is not None else -1
        neighbour_idx = src + step
        neighbour = (
            original_lines[neighbour_idx].strip()
            if 0 <= neighbour_idx < len(original_lines)
            else None
        )
        j = idx + step
        while 0 <= j < len(lines) and j not in removed:
            cand = lines[j]
            piece = line_body(cand).strip()
            if not is_context(cand) or not piece or piece == neighbour or piece not in actual:
                break
            log.debug(f"Removing absorbed context {cand!r}")
            removed.add(j)
            j += step

    if not removed and lines == hunk.lines:
        return hunk
    return hunk.with_lines([ln for i, ln in enumerate(lines) if i not in removed])
