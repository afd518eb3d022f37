# src/homedash/util/fs.py
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger("homedash.util.fs")


def ensure_under_root(root: str | Path, target: str | Path) -> Path:
    """
    Resolve `target` so it is guaranteed to be inside `root`.
    Relative targets are interpreted under `root`.
    """
    root_p = Path(root).resolve()
    tgt_p = Path(target)
    if not tgt_p.is_absolute():
        tgt_p = root_p / tgt_p
    tgt_p = tgt_p.resolve()
    try:
        tgt_p.relative_to(root_p)
    except ValueError:
        raise ValueError(f"path escapes root: {target}")
    return tgt_p


def atomic_write_bytes(target: str | Path, data: bytes, *, fsync: bool = True) -> Path:
    """
    Write `data` to a uniquely named temp file next to `target`, then
    os.replace() it over `target`. Readers see either the old file or the
    complete new one. OSError propagates; the temp file is removed on failure.
    """
    target = Path(target)
    dirpath = target.parent
    dirpath.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}-", suffix=".tmp", dir=dirpath)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            if fsync:
                os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove temp file %s", tmp_name, exc_info=True)
        raise

    if fsync:
        _fsync_dir(dirpath)
    return target


def _fsync_dir(dirpath: Path) -> None:
    # not supported everywhere (e.g. Windows); the rename already happened
    try:
        dir_fd = os.open(dirpath, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        logger.debug("Directory fsync failed for %s", dirpath, exc_info=True)
    finally:
        os.close(dir_fd)
