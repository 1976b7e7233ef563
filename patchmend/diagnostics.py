# patchmend/diagnostics.py
"""
Failure log for patch_file.

Every failed (or partially applied) patch is appended to a JSON array on
disk with the patch as sent, the repaired patch and the file it was meant
for, so failures can be replayed once the repairs improve.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List

from ._logging import resolve_logger
from .apply.strict import apply_patch
from .errors import PatchFailedError
from .models.report import ReplayResult
from .repair.pipeline import fix_patch
from .utils.fs import read_text, write_text_atomic

__all__ = [
    "DEFAULT_ERRORS_PATH",
    "save_patch_error",
    "load_patch_errors",
    "replay_patch_errors",
]

log = logging.getLogger(__name__)

DEFAULT_ERRORS_PATH = os.path.join(".patchmend", "patch_file", "errors.json")


def _read_records(path: str) -> List[Dict[str, Any]]:
    if not os.path.exists(path):
        return []
    try:
        data = json.loads(read_text(path) or "[]")
    except ValueError as e:
        log.warning(f"Unreadable patch error log {path} ({e}); starting a new one")
        return []
    if not isinstance(data, list):
        log.warning(f"Patch error log {path} is not a JSON array; starting a new one")
        return []
    return data


def save_patch_error(
    error: str,
    original_patch: str,
    fixed_patch: str,
    file_content: str,
    *,
    errors_path: str = DEFAULT_ERRORS_PATH,
) -> bool:
    """
    Append a failure record. Returns False (and logs) if the log could not
    be written; the caller's own result is never affected.
    """
    record = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "error": error,
        "originalPatch": original_patch,
        "fixedPatch": fixed_patch,
        "fileContent": file_content,
    }
    try:
        records = _read_records(errors_path)
        records.append(record)
        write_text_atomic(errors_path, json.dumps(records, indent=2) + "\n")
    except OSError as e:
        log.warning(f"Could not save patch error to {errors_path}: {e}")
        return False
    log.debug(f"Patch error saved to {errors_path} ({len(records)} record(s))")
    return True


def load_patch_errors(errors_path: str = DEFAULT_ERRORS_PATH) -> List[Dict[str, Any]]:
    return _read_records(errors_path)


def replay_patch_errors(
    errors_path: str = DEFAULT_ERRORS_PATH,
    *,
    logger=None,
    log: bool = False,
) -> List[ReplayResult]:
    """
    Re-run fix_patch on every saved failure and strictly apply the result
    to the saved file content. Nothing is written; the returned list says
    which records would now succeed.
    """
    rlog = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    results: List[ReplayResult] = []
    for i, record in enumerate(load_patch_errors(errors_path)):
        content = record.get("fileContent") or ""
        fixed = fix_patch(content, record.get("originalPatch") or "", logger=rlog)
        result = ReplayResult(
            index=i,
            timestamp=record.get("timestamp", ""),
            error=record.get("error", ""),
            fixed_patch=fixed,
            applied=False,
        )
        if not fixed:
            result.detail = "repair produced an empty patch"
        else:
            try:
                apply_patch(content, fixed)
                result.applied = True
            except PatchFailedError as e:
                result.detail = str(e)
        rlog.debug(f"Record #{i}: {'applies' if result.applied else 'still fails'}")
        results.append(result)
    return results
