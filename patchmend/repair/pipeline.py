# patchmend/repair/pipeline.py
from __future__ import annotations

import logging

from .._logging import resolve_logger
from ..apply.strict import try_apply_patch
from ..models.hunk import Hunk, line_body
from ..models.report import HunkCategories, HunkRepair, PatchRepairReport
from .anchor import resolve_hunk_start
from .fixers import (
    fix_accidental_deletions,
    fix_all_additions,
    fix_hunk_context,
    fix_hunk_deletion_too_short,
    fix_hunk_header,
)
from .hunks import hunks_to_patch, locate_lines, parse_hunks

__all__ = [
    "is_deleting_real_lines",
    "can_find_valid_lines",
    "hunk_is_empty",
    "fix_patch",
    "fix_patch_report",
    "categorize_hunks",
]


def is_deleting_real_lines(hunk: Hunk, original_text: str) -> bool:
    """Every deletion in the hunk names a line that exists in the file."""
    return all(locate_lines(original_text, ln) for ln in hunk.subtractions)


def can_find_valid_lines(hunk: Hunk, original_text: str) -> bool:
    return resolve_hunk_start(hunk, original_text).line is not None


def hunk_is_empty(hunk: Hunk) -> bool:
    """
    True for hunks that change nothing: no lines, no +/- lines at all, or
    additions that (trimmed, joined) read the same as the deletions.
    """
    if not hunk.lines:
        return True
    if not hunk.additions and not hunk.subtractions:
        return True
    added = "\n".join(line_body(ln) for ln in hunk.additions).strip()
    removed = "\n".join(line_body(ln) for ln in hunk.subtractions).strip()
    return added == removed


def _reparse(hunk: Hunk) -> Hunk:
    # Header repair works on the hunk as it will be written out.
    reparsed = parse_hunks(hunks_to_patch([hunk]))
    return reparsed[0] if len(reparsed) == 1 else hunk


def _exclude(entry: HunkRepair, reason: str, log) -> None:
    entry.status = "excluded"
    entry.reason = reason
    log.debug(f"Hunk #{entry.index + 1} {entry.original_header!r} excluded: {reason}")


def fix_patch_report(
    original_text: str,
    patch_text: str,
    *,
    logger=None,
    log: bool = False,
) -> PatchRepairReport:
    """
    Repair *patch_text* against *original_text* and say what happened to
    each hunk.

    Hunks are parsed, re-targeted when they append at end of file, have
    truncated deletions expanded, and are dropped when they delete lines the
    file does not have, cannot be located, or change nothing. Survivors get
    their context rebuilt, their header recomputed and accidental deletions
    removed. The report's ``patch`` is the repaired text; it is "" when no
    hunk survives.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    hunks = parse_hunks(patch_text)
    report = PatchRepairReport(
        hunks=[HunkRepair(index=i, original_header=h.header) for i, h in enumerate(hunks)]
    )
    log.debug(f"Repairing {len(hunks)} hunk(s)")

    staged: list[tuple[int, Hunk]] = []
    for i, hunk in enumerate(hunks):
        hunk = fix_all_additions(hunk, original_text, logger=log)
        hunk = fix_hunk_deletion_too_short(hunk, original_text, logger=log)

        if not is_deleting_real_lines(hunk, original_text):
            _exclude(report.hunks[i], "unlocatable_deletion", log)
            continue
        if not can_find_valid_lines(hunk, original_text):
            _exclude(report.hunks[i], "no_anchor", log)
            continue
        if hunk_is_empty(hunk):
            _exclude(report.hunks[i], "empty", log)
            continue

        staged.append((i, _reparse(fix_hunk_context(hunk, original_text, logger=log))))

    kept: list[Hunk] = []
    for i, hunk in staged:
        entry = report.hunks[i]
        entry.confidence = resolve_hunk_start(hunk, original_text).confidence

        hunk = fix_hunk_header(hunk, original_text, logger=log)
        hunk = fix_accidental_deletions(hunk, original_text, logger=log)
        if hunk_is_empty(hunk):
            _exclude(entry, "empty", log)
            continue

        entry.header = hunk.header
        kept.append(hunk)

    report.patch = hunks_to_patch(kept)
    log.debug(f"Kept {len(kept)} of {len(hunks)} hunk(s)")
    return report


def fix_patch(original_text: str, patch_text: str, *, logger=None, log: bool = False) -> str:
    """Repaired patch text, or "" when nothing in the patch can be applied."""
    return fix_patch_report(original_text, patch_text, logger=logger, log=log).patch


def categorize_hunks(original_text: str, patch_text: str) -> HunkCategories:
    """
    Split a patch's hunks into those that strictly apply to *original_text*
    on their own and those that do not. Each hunk lands in exactly one list,
    in patch order.
    """
    categories = HunkCategories()
    for hunk in parse_hunks(patch_text):
        if try_apply_patch(original_text, hunks_to_patch([hunk])) is not None:
            categories.valid_hunks.append(hunk)
        else:
            categories.invalid_hunks.append(hunk)
    return categories
