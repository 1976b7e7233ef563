import contextlib
import os
import shutil
import tempfile


def read_text(path: str) -> str:
    """Read a UTF-8 file without translating its line endings."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text_atomic(path: str, text: str) -> None:
    """
    Replace *path* with *text* in one step.

    The content is staged to a tempfile in the destination directory and
    promoted with os.replace(), so readers see either the old file or the
    new one. The tempfile is removed if anything fails.
    """
    dirpath = os.path.dirname(os.path.abspath(path))
    os.makedirs(dirpath, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".pm-", suffix=".tmp", dir=dirpath)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if os.path.exists(path):
            shutil.copymode(path, tmp)
        os.replace(tmp, path)  # atomic within a filesystem
    except BaseException:
        with contextlib.suppress(OSError):
            if os.path.exists(tmp):
                os.remove(tmp)
        raise
