# patchmend/lint.py
from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import Dict, Optional

import pathspec

__all__ = ["find_lint_command", "lint_file"]

log = logging.getLogger(__name__)


def _pattern_for(key: str) -> str:
    """'py' and '.py' mean '*.py'; anything with glob characters is used as is."""
    key = key.strip()
    if any(ch in key for ch in "*?[/"):
        return key
    return "*." + key.lstrip(".")


def find_lint_command(file_path: str, lint_commands: Dict[str, str]) -> Optional[str]:
    """First command whose extension or gitignore-style pattern matches *file_path*."""
    rel = os.path.relpath(os.path.abspath(file_path)).replace(os.sep, "/")
    for key, command in lint_commands.items():
        spec = pathspec.PathSpec.from_lines("gitwildmatch", [_pattern_for(key)])
        if spec.match_file(rel):
            return command
    return None


def lint_file(file_path: str, lint_commands: Optional[Dict[str, str]]) -> str:
    """
    Run the lint command configured for *file_path* and return its combined
    output, stripped. ``$1`` in the command is replaced with the quoted path.
    Returns "" when no command applies.
    """
    if not lint_commands:
        return ""
    command = find_lint_command(file_path, lint_commands)
    if command is None:
        return ""

    cmd = command.replace("$1", shlex.quote(file_path))
    log.debug(f"Linting {file_path}: {cmd}")
    try:
        proc = subprocess.run(cmd, shell=True, capture_output=True, text=True, check=False)
    except OSError as e:
        log.warning(f"Lint command failed to start: {e}")
        return f"Lint command failed to start: {e}"
    return (proc.stdout + proc.stderr).strip()
