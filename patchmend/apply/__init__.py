from .strict import apply_patch, try_apply_patch

__all__ = ["apply_patch", "try_apply_patch"]
