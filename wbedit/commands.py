from __future__ import annotations

import logging
from pathlib import Path

from wbedit.errors import ConfigValidationError, NotFoundError, from_os_error
from wbedit.jsonc import strip_comments, validate_json
from wbedit.paths import ConfigPaths, iter_backup_files
from wbedit.schema.models import WaybarConfigFile
from wbedit.writer import add_config_comments, write_with_backup

LOGGER = logging.getLogger(__name__)


def _read_text(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(f"{what} not found: {path}") from exc
    except OSError as exc:
        raise from_os_error(exc, str(path)) from exc


def detect_config_paths(config_dir: Path | None = None) -> ConfigPaths:
    """Default paths, with `config_file` pointing at whichever config exists."""

    paths = ConfigPaths.default(config_dir)
    if not paths.config_exists():
        raise NotFoundError(
            f"Waybar config directory not found at: {paths.config_dir}"
        )

    actual = ConfigPaths.detect_config_file(Path(paths.config_dir))
    if actual is not None:
        paths = paths.model_copy(update={"config_file": str(actual)})
    LOGGER.debug("Using config %s and style %s", paths.config_file, paths.style_file)
    return paths


def load_config(path: Path) -> WaybarConfigFile:
    """Read a JSONC config and check it parses once comments are removed.

    The returned content is the raw file text, comments included.
    """

    content = _read_text(path, "Config file")
    validate_json(strip_comments(content))
    return WaybarConfigFile(content=content, path=str(path))


def save_config(path: Path, content: str) -> Path | None:
    validate_json(content)
    return write_with_backup(path, add_config_comments(content))


def load_css(path: Path) -> str:
    return _read_text(path, "CSS file")


def save_css(path: Path, content: str) -> Path | None:
    if not content.strip():
        raise ConfigValidationError("CSS content cannot be empty")
    return write_with_backup(path, content)


def list_backups(config_dir: Path) -> list[str]:
    return [p.name for p in iter_backup_files(config_dir)]


def restore_backup(backup_path: Path, target_path: Path) -> Path | None:
    """Replace `target_path` with the content of `backup_path`.

    The current target is itself backed up first, so a restore can be undone.
    """

    content = _read_text(backup_path, "Backup file")
    backup = write_with_backup(target_path, content)
    LOGGER.info("Restored %s from %s", target_path, backup_path)
    return backup
