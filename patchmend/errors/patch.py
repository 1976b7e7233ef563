class PatchError(Exception):
    """Base class for patch repair and application errors."""


class PatchFailedError(PatchError):
    """A patch could not be parsed or does not apply cleanly to the content."""
