from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel

from wbedit.errors import ConfigError, from_os_error
from wbedit.writer import is_backup_name

CONFIG_DIR_ENV = "WBEDIT_CONFIG_DIR"
CONFIG_CANDIDATES = ("config.jsonc", "config")
DEFAULT_CONFIG_FILE = "config.jsonc"
DEFAULT_STYLE_FILE = "style.css"


def default_config_dir() -> Path:
    """Resolve the Waybar config directory from the environment.

    Order: WBEDIT_CONFIG_DIR, $XDG_CONFIG_HOME/waybar, $HOME/.config/waybar.
    """

    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "waybar"
    home = os.getenv("HOME")
    if not home:
        raise ConfigError("HOME environment variable not set")
    return Path(home) / ".config" / "waybar"


class ConfigPaths(BaseModel):
    config_dir: str
    config_file: str
    style_file: str

    @classmethod
    def default(cls, config_dir: Path | None = None) -> ConfigPaths:
        base = config_dir if config_dir is not None else default_config_dir()
        return cls(
            config_dir=str(base),
            config_file=str(base / DEFAULT_CONFIG_FILE),
            style_file=str(base / DEFAULT_STYLE_FILE),
        )

    @staticmethod
    def detect_config_file(config_dir: Path) -> Path | None:
        for name in CONFIG_CANDIDATES:
            candidate = config_dir / name
            if candidate.exists():
                return candidate
        return None

    def config_exists(self) -> bool:
        return Path(self.config_dir).exists()

    def ensure_config_dir(self) -> None:
        try:
            Path(self.config_dir).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise from_os_error(exc, self.config_dir) from exc


def iter_backup_files(config_dir: Path) -> list[Path]:
    """Backups in `config_dir`, newest first.

    Timestamps sort lexically, so a reverse name sort puts the latest backup
    of each file first.
    """

    try:
        files = [
            p
            for p in config_dir.iterdir()
            if p.is_file() and is_backup_name(p.name)
        ]
    except OSError as exc:
        raise from_os_error(exc, str(config_dir)) from exc
    return sorted(files, key=lambda p: p.name, reverse=True)
