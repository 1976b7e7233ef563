from .anchor import find_first_line_number, resolve_hunk_start
from .fixers import (
    fix_accidental_deletions,
    fix_all_additions,
    fix_hunk_context,
    fix_hunk_deletion_too_short,
    fix_hunk_header,
)
from .hunks import closest_number, hunks_to_patch, locate_lines, parse_hunks
from .pipeline import (
    can_find_valid_lines,
    categorize_hunks,
    fix_patch,
    fix_patch_report,
    hunk_is_empty,
    is_deleting_real_lines,
)

__all__ = [
    "locate_lines",
    "closest_number",
    "parse_hunks",
    "hunks_to_patch",
    "find_first_line_number",
    "resolve_hunk_start",
    "fix_hunk_header",
    "fix_hunk_context",
    "fix_all_additions",
    "fix_accidental_deletions",
    "fix_hunk_deletion_too_short",
    "is_deleting_real_lines",
    "can_find_valid_lines",
    "hunk_is_empty",
    "fix_patch",
    "fix_patch_report",
    "categorize_hunks",
]
