from .hunk import EXACT, HEURISTIC, NONE, AnchorResult, Hunk
from .report import HunkCategories, HunkRepair, PatchRepairReport, ReplayResult

__all__ = [
    "Hunk",
    "AnchorResult",
    "EXACT",
    "HEURISTIC",
    "NONE",
    "HunkRepair",
    "PatchRepairReport",
    "HunkCategories",
    "ReplayResult",
]
