from dataclasses import dataclass, field
from typing import List, Optional

from .hunk import NONE, Hunk


@dataclass
class HunkRepair:
    """What the repair pipeline did with one input hunk."""

    index: int
    original_header: str
    status: str = "kept"  # "kept", "excluded"
    reason: Optional[str] = None  # "unlocatable_deletion", "no_anchor", "empty"
    confidence: str = NONE
    header: Optional[str] = None


@dataclass
class PatchRepairReport:
    """Outcome of fix_patch_report: the repaired text plus per-hunk detail."""

    patch: str = ""
    hunks: List[HunkRepair] = field(default_factory=list)

    @property
    def kept(self) -> List[HunkRepair]:
        return [h for h in self.hunks if h.status == "kept"]

    @property
    def excluded(self) -> List[HunkRepair]:
        return [h for h in self.hunks if h.status == "excluded"]


@dataclass
class HunkCategories:
    """Hunks that strictly apply on their own vs. those that do not."""

    valid_hunks: List[Hunk] = field(default_factory=list)
    invalid_hunks: List[Hunk] = field(default_factory=list)


@dataclass
class ReplayResult:
    """One saved patch failure re-run through the current repair pipeline."""

    index: int
    timestamp: str
    error: str
    fixed_patch: str
    applied: bool
    detail: Optional[str] = None
