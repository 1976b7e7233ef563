# patchmend/apply/strict.py
"""
Exact unified-diff application.

Parsing goes through the ``patch`` library, which rejects hunks whose header
counts disagree with their bodies. Application is done here, in memory:
every hunk's old side has to match the file verbatim. The only leniency is
position; a hunk is searched for outward from where its header says it
starts, so a patch with drifted line numbers still lands as long as its
lines are exact.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import patch as patch_lib

from ..errors import PatchFailedError

__all__ = ["apply_patch", "try_apply_patch"]

_SYNTHETIC_HEADER = "--- a/file\n+++ b/file\n"


@dataclass
class _ParsedHunk:
    startsrc: int
    starttgt: int
    size: int = 0
    old: List[str] = field(default_factory=list)
    new: List[str] = field(default_factory=list)


def _detect_eol(s: str) -> str:
    if "\r\n" in s:
        return "\r\n"
    if "\r" in s:
        return "\r"
    return "\n"


def _has_file_header(text: str) -> bool:
    for line in text.splitlines():
        if line.startswith("@@"):
            return False
        if line.startswith("--- "):
            return True
    return False


def _raw_body_sizes(text: str) -> List[int]:
    """Body lines written under each '@@' header, not counting trailing blanks."""
    sizes: List[int] = []
    lines = text.splitlines()
    current: Optional[int] = None
    blanks = 0
    for i, line in enumerate(lines):
        if line.startswith("@@"):
            if current is not None:
                sizes.append(current)
            current, blanks = 0, 0
        elif current is None:
            continue
        elif line.startswith(("diff ", "Index: ")) or (
            line.startswith("--- ") and i + 1 < len(lines) and lines[i + 1].startswith("+++ ")
        ):
            sizes.append(current)
            current = None
        elif line == "":
            blanks += 1
        elif line[0] in " +-":
            current += blanks + 1
            blanks = 0
    if current is not None:
        sizes.append(current)
    return sizes


def _parse(patch_text: str) -> List[_ParsedHunk]:
    # '\ No newline' markers are read by apply_patch; the parser gets hunk lines only.
    text = "".join(ln + "\n" for ln in patch_text.splitlines() if not ln.startswith("\\"))
    if not _has_file_header(text):
        text = _SYNTHETIC_HEADER + text

    patch_set = patch_lib.fromstring(text.encode("utf-8"))
    if not patch_set:
        raise PatchFailedError("patch could not be parsed (malformed hunk or header counts do not match)")

    hunks: List[_ParsedHunk] = []
    for item in patch_set.items:
        for h in item.hunks:
            parsed = _ParsedHunk(startsrc=h.startsrc, starttgt=h.starttgt, size=len(h.text))
            for raw in h.text:
                line = raw.rstrip(b"\r\n").decode("utf-8")
                tag, body = line[:1], line[1:]
                if tag in (" ", "-"):
                    parsed.old.append(body)
                if tag in (" ", "+"):
                    parsed.new.append(body)
            if len(parsed.old) != h.linessrc or len(parsed.new) != h.linestgt:
                raise PatchFailedError(f"hunk #{len(hunks) + 1} is shorter than its header declares")
            hunks.append(parsed)
    if not hunks:
        raise PatchFailedError("patch contains no hunks")

    # The parser stops reading a hunk once its header counts are met; lines
    # written past that point would otherwise be dropped without notice.
    raw_sizes = _raw_body_sizes(text)
    if len(raw_sizes) != len(hunks):
        raise PatchFailedError("patch could not be parsed (unexpected hunk layout)")
    for n, (raw_size, h) in enumerate(zip(raw_sizes, hunks), 1):
        if raw_size > h.size:
            raise PatchFailedError(f"hunk #{n} is longer than its header declares")
    return hunks


def _find_block(lines: List[str], block: List[str], hint: int, lower: int) -> Optional[int]:
    """First index at or after *lower* where *block* matches, nearest *hint* first."""
    m = len(block)
    upper = len(lines) - m
    if upper < lower:
        return None
    hint = min(max(hint, lower), upper)
    for d in range(max(hint - lower, upper - hint) + 1):
        for pos in ((hint + d, hint - d) if d else (hint,)):
            if lower <= pos <= upper and lines[pos : pos + m] == block:
                return pos
    return None


def apply_patch(content: str, patch_text: str) -> str:
    """
    Apply *patch_text* to *content* and return the result.

    Raises PatchFailedError when the patch does not parse or a hunk's old
    side is not found verbatim. Line endings and the presence of a final
    newline follow *content*; an empty *content* gains a final newline
    unless the patch carries ``\\ No newline at end of file``.
    """
    if not patch_text.strip():
        return content

    hunks = _parse(patch_text)
    eol = _detect_eol(content)
    no_eol_marker = any(ln.startswith("\\") for ln in patch_text.splitlines())
    trailing_nl = content.endswith(("\r\n", "\n", "\r")) or (not content and not no_eol_marker)

    lines = content.splitlines()
    offset = 0
    lower = 0
    for n, h in enumerate(hunks, 1):
        if not h.old:
            # '-N,0' inserts after line N.
            pos = max(h.startsrc + offset, lower)
            if pos > len(lines):
                raise PatchFailedError(
                    f"hunk #{n} inserts after line {h.startsrc}, past the end of the file"
                )
            claimed = h.startsrc
        else:
            claimed = h.startsrc - 1 if h.startsrc > 0 else max(h.starttgt - 1, 0)
            pos = _find_block(lines, h.old, claimed + offset, lower)
            if pos is None:
                raise PatchFailedError(
                    f"hunk #{n} does not match the file (expected near line {claimed + 1})"
                )
        lines[pos : pos + len(h.old)] = h.new
        offset = pos - claimed + len(h.new) - len(h.old)
        lower = pos + len(h.new)

    if not lines:
        return ""
    return eol.join(lines) + (eol if trailing_nl else "")


def try_apply_patch(content: str, patch_text: str) -> Optional[str]:
    """Like apply_patch, but None instead of PatchFailedError."""
    try:
        return apply_patch(content, patch_text)
    except PatchFailedError:
        return None
