from .apply import apply_patch, try_apply_patch
from .core import patch_file
from .diagnostics import (
    DEFAULT_ERRORS_PATH,
    load_patch_errors,
    replay_patch_errors,
    save_patch_error,
)
from .errors import PatchError, PatchFailedError
from .lint import lint_file
from .models import (
    EXACT,
    HEURISTIC,
    NONE,
    AnchorResult,
    Hunk,
    HunkCategories,
    HunkRepair,
    PatchRepairReport,
    ReplayResult,
)
from .repair import (
    can_find_valid_lines,
    categorize_hunks,
    closest_number,
    find_first_line_number,
    fix_accidental_deletions,
    fix_all_additions,
    fix_hunk_context,
    fix_hunk_deletion_too_short,
    fix_hunk_header,
    fix_patch,
    fix_patch_report,
    hunk_is_empty,
    hunks_to_patch,
    is_deleting_real_lines,
    locate_lines,
    parse_hunks,
    resolve_hunk_start,
)

__all__ = [
    "patch_file",
    "fix_patch",
    "fix_patch_report",
    "categorize_hunks",
    "apply_patch",
    "try_apply_patch",
    "parse_hunks",
    "hunks_to_patch",
    "locate_lines",
    "closest_number",
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
    "save_patch_error",
    "load_patch_errors",
    "replay_patch_errors",
    "DEFAULT_ERRORS_PATH",
    "lint_file",
    "Hunk",
    "AnchorResult",
    "HunkRepair",
    "PatchRepairReport",
    "HunkCategories",
    "ReplayResult",
    "EXACT",
    "HEURISTIC",
    "NONE",
    "PatchError",
    "PatchFailedError",
]
