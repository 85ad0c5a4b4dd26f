from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from wbedit.errors import from_os_error

LOGGER = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"

CONFIG_HEADER = "// Waybar Configuration\n"


def backup_path_for(path: Path, timestamp: datetime, counter: int = 0) -> Path:
    """Return the sibling backup path for `path` at `timestamp`.

    The marker and timestamp go between the stem and the extension, or at the
    end when there is no extension. A non-zero `counter` disambiguates
    backups taken within the same second.

    **Example**
    - `config.jsonc` -> `config.backup.2024-01-15-14-30-00.jsonc`
    - `config` -> `config.backup.2024-01-15-14-30-00`
    - `style.css`, counter 2 -> `style.backup.2024-01-15-14-30-00-2.css`
    """

    stamp = timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)
    if counter:
        stamp = f"{stamp}-{counter}"
    return path.with_name(f"{path.stem}{BACKUP_MARKER}{stamp}{path.suffix}")


def is_backup_name(filename: str) -> bool:
    return BACKUP_MARKER in filename


def _open_new_backup(path: Path, timestamp: datetime) -> tuple[Path, BinaryIO]:
    counter = 0
    while True:
        backup = backup_path_for(path, timestamp, counter)
        try:
            # Exclusive create: an existing backup is never overwritten.
            return backup, backup.open("xb")
        except FileExistsError:
            counter += 1


def create_backup(path: Path, timestamp: datetime | None = None) -> Path:
    """Copy `path` to a new, never-before-used backup path and return it.

    On failure no backup file is left behind.
    """

    timestamp = timestamp or datetime.now()
    try:
        with path.open("rb") as src:
            backup, dst = _open_new_backup(path, timestamp)
            try:
                with dst:
                    shutil.copyfileobj(src, dst)
                    dst.flush()
                    os.fsync(dst.fileno())
                shutil.copystat(path, backup)
            except OSError:
                _remove_quietly(backup)
                raise
    except OSError as exc:
        raise from_os_error(exc, f"Failed to back up {path}") from exc

    LOGGER.info("Backed up %s -> %s", path, backup)
    return backup


def write_atomic(path: Path, content: str) -> None:
    """Replace the full content of `path` in one rename.

    Content goes to a uniquely named temporary sibling which is fsynced and
    then renamed over the target, so readers see either the old file or the
    new one. A symlinked target is followed and the real file is replaced.
    """

    path = path.resolve()
    temp_path: Path | None = None
    try:
        orig_mode = path.stat().st_mode if path.exists() else None
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        temp_path = Path(temp_name)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        if orig_mode is not None:
            os.chmod(temp_path, orig_mode & 0o777)
        os.replace(temp_path, path)
    except OSError as exc:
        if temp_path is not None:
            _remove_quietly(temp_path)
        raise from_os_error(exc, f"Failed to write {path}") from exc


def write_with_backup(path: Path, content: str) -> Path | None:
    """Back up `path` if it exists, then replace it with `content`.

    Returns the backup path, or None when there was nothing to back up. If
    the write fails after the backup was made, the backup is removed again so
    the call leaves no trace.
    """

    backup = create_backup(path) if path.exists() else None
    try:
        write_atomic(path, content)
    except Exception:
        if backup is not None:
            _remove_quietly(backup)
        raise
    LOGGER.info("Wrote %s", path)
    return backup


def add_config_comments(content: str) -> str:
    if content.startswith(CONFIG_HEADER):
        return content
    return f"{CONFIG_HEADER}{content}"


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.warning("Could not remove %s: %s", path, exc)
