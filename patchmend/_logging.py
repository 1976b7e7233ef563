"""
Opt-in logging for the repair engine.

Every public entry point accepts ``logger=None`` and ``log=False``:

    from patchmend._logging import resolve_logger

    def fix_something(hunk, original_text, *, logger=None, log: bool = False):
        log = resolve_logger(logger=logger, enabled=log, name=__name__)
        log.debug("hunk %s: header rewritten", hunk.header)

Nothing is emitted unless the caller passes a logger or sets ``log=True``;
the library never writes to stdout/stderr on its own.
"""
from __future__ import annotations

import logging


class NoopLogger:
    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.DEBUG,
) -> logging.Logger | NoopLogger:
    """
    Pick the logger a call should write to.

    - A passed ``logger`` always wins (anything with ``.debug`` works).
    - ``enabled=True`` returns the named stdlib logger, set to ``level`` and
      propagating to the root so pytest's caplog sees it.
    - Otherwise a NoopLogger.
    """
    if logger is not None:
        return logger
    if enabled:
        lg = logging.getLogger(name or "patchmend")
        lg.setLevel(level)
        lg.propagate = True
        return lg
    return NoopLogger()
