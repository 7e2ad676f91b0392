"""Filesystem helpers."""

import os
import stat
import tempfile
from pathlib import Path


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, or the umask default for a new file."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def safe_write(path: Path, content: str | bytes) -> Path:
    """
    Atomic write to file.
    Writes to a temp file in the same directory, fsyncs, then renames over
    the target. The temp file is removed if anything fails and the error
    propagates. The result keeps the replaced file's mode, or gets the
    umask default when new (mkstemp alone would leave it 0600).
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".tmp_{path.name}_")
    if isinstance(content, str):
        content = content.encode("utf-8")

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(tmp_path, _target_mode(path))
        # Same filesystem, so the rename is atomic
        os.replace(tmp_path, path)

    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    return path
