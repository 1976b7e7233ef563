# patchmend/core.py
import logging
import os
from typing import Callable, Dict, Optional, Tuple

from ._logging import resolve_logger
from .apply.strict import apply_patch, try_apply_patch
from .diagnostics import DEFAULT_ERRORS_PATH, save_patch_error
from .errors import PatchError, PatchFailedError
from .lint import lint_file
from .repair.hunks import hunks_to_patch
from .repair.pipeline import categorize_hunks, fix_patch
from .utils.fs import read_text, write_text_atomic

__all__ = ["patch_file", "SUCCESS_MESSAGE"]

SUCCESS_MESSAGE = "Patch applied successfully. Read {path} to verify the changes."


def _apply_repaired(original: str, fixed: str) -> str:
    """Strictly apply the repaired patch, once more with a final newline if it lacks one."""
    try:
        return apply_patch(original, fixed)
    except PatchFailedError:
        if fixed.endswith("\n"):
            raise
    return apply_patch(original, fixed + "\n")


def _apply_partial(original: str, fixed: str) -> Tuple[Optional[str], str]:
    """Apply only the hunks that apply on their own. Returns (content, note)."""
    categories = categorize_hunks(original, fixed)
    if not categories.valid_hunks:
        return None, ""
    content = apply_patch(original, hunks_to_patch(categories.valid_hunks))
    total = len(categories.valid_hunks) + len(categories.invalid_hunks)
    note = f"Applied {len(categories.valid_hunks)} of {total} hunk(s)."
    if categories.invalid_hunks:
        headers = "\n".join(f"  {h.header}" for h in categories.invalid_hunks)
        note += f" These hunks could not be applied:\n{headers}"
    return content, note


def patch_file(
    file_path: str,
    patch: str,
    *,
    errors_path: str = DEFAULT_ERRORS_PATH,
    lint_commands: Optional[Dict[str, str]] = None,
    partial: bool = False,
    create_missing: bool = True,
    logger=None,
    log: bool = False,
    log_callback: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Apply an LLM-written unified diff to *file_path*.

    Tiered like a careful human would do it:
    - Tier 1: strict apply of the patch as given.
    - Tier 2: repair the patch against the file (fix_patch), then strict apply.
    - Tier 3 (``partial=True``): apply the repaired hunks that apply on their own.

    The file is written once, atomically, and only on success. Failures are
    returned as a message (never raised) and recorded in *errors_path*.

    Returns:
        A human-readable result: the success line (plus lint output when a
        ``lint_commands`` entry matches the file) or the failure reason.
    """
    plog = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    def _log(msg: str):
        plog.debug(msg)
        if log_callback:
            log_callback(msg)

    original = ""
    fixed = ""
    note = ""
    try:
        if not os.path.exists(file_path):
            if not create_missing:
                raise FileNotFoundError(f"File not found: {file_path}")
            _log(f"  - {file_path} does not exist. Creating it.")
            write_text_atomic(file_path, "")
        original = read_text(file_path)

        _log("  - Tier 1: Attempting strict apply...")
        new_content = try_apply_patch(original, patch)
        if new_content is not None:
            _log("  ✔ Tier 1: Success.")
        else:
            _log("  - Tier 2: Repairing patch...")
            fixed = fix_patch(original, patch, logger=plog)
            if not fixed.strip():
                raise PatchFailedError("no hunk of the patch could be matched to the file")
            try:
                new_content = _apply_repaired(original, fixed)
                _log("  ✔ Tier 2: Success.")
            except PatchFailedError as e:
                if not partial:
                    raise
                _log(f"  - Tier 2 failed: {e}")
                _log("  - Tier 3: Applying the hunks that apply on their own...")
                new_content, note = _apply_partial(original, fixed)
                if new_content is None:
                    raise
                _log(f"  ✔ Tier 3: {note.splitlines()[0]}")
                save_patch_error(
                    f"Partially applied: {note}", patch, fixed, original, errors_path=errors_path
                )

        write_text_atomic(file_path, new_content)
    except (OSError, ValueError, PatchError) as e:
        _log(f"  ✘ Patch failed: {e}")
        save_patch_error(str(e), patch, fixed, original, errors_path=errors_path)
        return f"Failed to apply patch to {file_path}: {e}"

    message = SUCCESS_MESSAGE.format(path=file_path)
    if note:
        message += "\n" + note
    lint_output = lint_file(file_path, lint_commands)
    if lint_output:
        message += f"\n\nLinting Result:\n{lint_output}"
    return message
