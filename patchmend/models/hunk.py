import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

HUNK_HEADER_RE = re.compile(r"^@@\s*-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s*@@")
NO_NEWLINE_MARKER = "\\ No newline at end of file"

# Anchor confidence levels
EXACT = "exact"
HEURISTIC = "heuristic"
NONE = "none"


def is_addition(line: str) -> bool:
    return line.startswith("+")


def is_subtraction(line: str) -> bool:
    return line.startswith("-")


def is_context(line: str) -> bool:
    """Anything without a +/- marker occupies a line of the original file."""
    return not (is_addition(line) or is_subtraction(line))


def line_body(line: str) -> str:
    """Drop the one-character marker; unmarked (corrupted) lines are returned as-is."""
    if line[:1] in (" ", "+", "-"):
        return line[1:]
    return line


def parse_header(header: str) -> Tuple[int, int, int, int]:
    """
    Return (old_start, old_len, new_start, new_len) from a hunk header.
    Omitted lengths default to 1; an unparseable header yields zeros.
    """
    m = HUNK_HEADER_RE.match(header.strip())
    if not m:
        return 0, 0, 0, 0
    return (
        int(m.group(1)),
        int(m.group(2) or "1"),
        int(m.group(3)),
        int(m.group(4) or "1"),
    )


def _first_index(lines: List[str], wanted, skipped) -> int:
    filtered = [ln for ln in lines if not skipped(ln)]
    for i, ln in enumerate(filtered):
        if wanted(ln):
            return i
    return 0


@dataclass
class Hunk:
    """
    One change region of a unified diff.

    ``header_start``/``header_length`` are what the patch *claims*; the
    derived lists are recomputed from ``lines`` on construction and must
    never be edited directly. Use ``with_lines`` to get a repaired copy.
    """

    header: str
    header_start: int = 0
    header_length: int = 0
    new_start: int = 0
    new_length: int = 0
    lines: List[str] = field(default_factory=list)
    missing_newline: bool = False
    additions: List[str] = field(init=False, default_factory=list)
    subtractions: List[str] = field(init=False, default_factory=list)
    context_lines: List[str] = field(init=False, default_factory=list)
    first_addition_line_index: int = field(init=False, default=0)
    first_subtraction_line_index: int = field(init=False, default=0)

    def __post_init__(self):
        self.lines = list(self.lines)
        self.additions = [ln for ln in self.lines if is_addition(ln)]
        self.subtractions = [ln for ln in self.lines if is_subtraction(ln)]
        self.context_lines = [ln for ln in self.lines if is_context(ln)]
        # Index among lines of the same side, the way a strict applier numbers them.
        self.first_addition_line_index = _first_index(self.lines, is_addition, is_subtraction)
        self.first_subtraction_line_index = _first_index(self.lines, is_subtraction, is_addition)

    @classmethod
    def from_header(cls, header: str, lines: List[str], missing_newline: bool = False) -> "Hunk":
        old_start, old_len, new_start, new_len = parse_header(header)
        return cls(
            header=header,
            header_start=old_start,
            header_length=old_len,
            new_start=new_start,
            new_length=new_len,
            lines=lines,
            missing_newline=missing_newline,
        )

    def with_lines(self, lines: List[str]) -> "Hunk":
        return replace(self, lines=list(lines))

    def with_header(self, header: str, header_start: int) -> "Hunk":
        _, old_len, new_start, new_len = parse_header(header)
        return replace(
            self,
            header=header,
            header_start=header_start,
            header_length=old_len,
            new_start=new_start,
            new_length=new_len,
        )

    @property
    def original_side(self) -> List[str]:
        """Lines that exist in the original file, markers stripped."""
        return [line_body(ln) for ln in self.lines if not is_addition(ln)]

    def counts_match_header(self) -> bool:
        return (
            self.header_length == len(self.subtractions) + len(self.context_lines)
            and self.new_length == len(self.additions) + len(self.context_lines)
        )


@dataclass
class AnchorResult:
    """Resolved first line of a hunk and how sure we are about it."""

    line: Optional[int]
    confidence: str = NONE

    def __bool__(self) -> bool:
        return self.line is not None
