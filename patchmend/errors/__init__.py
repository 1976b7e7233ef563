from .patch import PatchError, PatchFailedError

__all__ = ["PatchError", "PatchFailedError"]
