from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from wbedit.commands import (
    detect_config_paths,
    list_backups,
    load_config,
    load_css,
    restore_backup,
    save_config,
    save_css,
)
from wbedit.compositor import compositor_info, is_compositor_running
from wbedit.errors import AppError, from_os_error
from wbedit.jsonc import read_jsonc, strip_comments, validate_json
from wbedit.paths import default_config_dir
from wbedit.process import WaybarController

LOGGER = logging.getLogger(__name__)


def _emit(value: Any) -> None:
    if isinstance(value, BaseModel):
        print(value.model_dump_json(indent=2))
    else:
        print(json.dumps(value, ensure_ascii=False, indent=2))


def _read_input(path: str | None) -> str:
    """Read text from `path`, or from stdin when path is None or '-'."""

    if path is None or path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise from_os_error(exc, path) from exc


def _report_backup(target: Path, backup: Path | None) -> None:
    if backup is not None:
        print(f"Saved {target} (backup: {backup.name})")
    else:
        print(f"Saved {target}")


def run_paths(args: argparse.Namespace) -> None:
    _emit(detect_config_paths(args.config_dir))


def run_strip(args: argparse.Namespace) -> None:
    sys.stdout.write(strip_comments(_read_input(args.input)))


def run_validate(args: argparse.Namespace) -> None:
    text = _read_input(args.input)
    validate_json(text if args.strict else strip_comments(text))
    print("OK")


def run_parse(args: argparse.Namespace) -> None:
    _emit(read_jsonc(Path(args.input)))


def run_load(args: argparse.Namespace) -> None:
    path = Path(args.path) if args.path else _config_file(args)
    _emit(load_config(path))


def run_save(args: argparse.Namespace) -> None:
    path = Path(args.path) if args.path else _config_file(args)
    _report_backup(path, save_config(path, _read_input(args.input)))


def run_load_css(args: argparse.Namespace) -> None:
    path = Path(args.path) if args.path else _style_file(args)
    sys.stdout.write(load_css(path))


def run_save_css(args: argparse.Namespace) -> None:
    path = Path(args.path) if args.path else _style_file(args)
    _report_backup(path, save_css(path, _read_input(args.input)))


def run_backups(args: argparse.Namespace) -> None:
    config_dir = args.config_dir or default_config_dir()
    _emit(list_backups(config_dir))


def run_restore(args: argparse.Namespace) -> None:
    backup_path = Path(args.backup)
    if not backup_path.is_absolute() and not backup_path.exists():
        backup_path = (args.config_dir or default_config_dir()) / backup_path
    target = Path(args.target)
    backup = restore_backup(backup_path, target)
    print(f"Restored {target} from {backup_path.name}")
    if backup is not None:
        print(f"Previous content kept as {backup.name}")


def run_process(args: argparse.Namespace) -> None:
    controller = WaybarController()
    if args.command == "reload":
        sent = controller.reload()
        print("Reload signal sent" if sent else "Waybar is not running")
    elif args.command == "start":
        started = controller.start()
        print("Waybar started" if started else "Waybar is already running")
    elif args.command == "stop":
        stopped = controller.stop()
        print("Waybar stopped" if stopped else "Waybar is not running")
    elif args.command == "restart":
        controller.restart()
        print("Waybar restarted")
    else:
        _emit({"running": controller.is_running(), "pids": controller.pids()})


def run_compositor(args: argparse.Namespace) -> None:
    if args.check:
        running = is_compositor_running(args.check)
        print("yes" if running else "no")
        return
    _emit(compositor_info())


def _config_file(args: argparse.Namespace) -> Path:
    return Path(detect_config_paths(args.config_dir).config_file)


def _style_file(args: argparse.Namespace) -> Path:
    return Path(detect_config_paths(args.config_dir).style_file)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Waybar config directory (default: WBEDIT_CONFIG_DIR or ~/.config/waybar)",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    parser = argparse.ArgumentParser(
        description=(
            "Waybar configuration editor\n"
            "\n"
            "Edit config.jsonc / style.css with automatic backups:\n"
            "  wbedit save < config.json && wbedit reload\n"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sub = subparsers.add_parser(
        "paths", help="Show detected config paths", parents=[common]
    )
    sub.set_defaults(func=run_paths)

    sub = subparsers.add_parser(
        "strip", help="Remove comments from JSONC", parents=[common]
    )
    sub.add_argument("input", nargs="?", help="Input file (default: stdin)")
    sub.set_defaults(func=run_strip)

    sub = subparsers.add_parser(
        "validate", help="Check that JSONC parses after stripping", parents=[common]
    )
    sub.add_argument("input", nargs="?", help="Input file (default: stdin)")
    sub.add_argument(
        "--strict", action="store_true", help="Reject comments (plain JSON only)"
    )
    sub.set_defaults(func=run_validate)

    sub = subparsers.add_parser(
        "parse", help="Print a JSONC file as plain JSON", parents=[common]
    )
    sub.add_argument("input", help="Input file")
    sub.set_defaults(func=run_parse)

    sub = subparsers.add_parser("load", help="Load the config file", parents=[common])
    sub.add_argument("path", nargs="?", help="Config path (default: detected)")
    sub.set_defaults(func=run_load)

    sub = subparsers.add_parser(
        "save", help="Save JSON to the config file with backup", parents=[common]
    )
    sub.add_argument("path", nargs="?", help="Config path (default: detected)")
    sub.add_argument("-i", "--input", help="JSON input file (default: stdin)")
    sub.set_defaults(func=run_save)

    sub = subparsers.add_parser(
        "load-css", help="Print the style file", parents=[common]
    )
    sub.add_argument("path", nargs="?", help="Style path (default: detected)")
    sub.set_defaults(func=run_load_css)

    sub = subparsers.add_parser(
        "save-css", help="Save CSS to the style file with backup", parents=[common]
    )
    sub.add_argument("path", nargs="?", help="Style path (default: detected)")
    sub.add_argument("-i", "--input", help="CSS input file (default: stdin)")
    sub.set_defaults(func=run_save_css)

    sub = subparsers.add_parser(
        "backups", help="List backups, newest first", parents=[common]
    )
    sub.set_defaults(func=run_backups)

    sub = subparsers.add_parser(
        "restore", help="Restore a file from a backup", parents=[common]
    )
    sub.add_argument("backup", help="Backup path or name inside the config dir")
    sub.add_argument("target", help="File to restore")
    sub.set_defaults(func=run_restore)

    for name, help_text in (
        ("reload", "Send SIGUSR2 to Waybar"),
        ("start", "Start Waybar if it is not running"),
        ("stop", "Stop Waybar"),
        ("restart", "Stop and start Waybar"),
        ("status", "Show whether Waybar is running"),
    ):
        sub = subparsers.add_parser(name, help=help_text, parents=[common])
        sub.set_defaults(func=run_process)

    sub = subparsers.add_parser(
        "compositor", help="Detect the Wayland compositor", parents=[common]
    )
    sub.add_argument(
        "--check", metavar="NAME", help="Check whether NAME is the running compositor"
    )
    sub.set_defaults(func=run_compositor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        args.func(args)
    except (AppError, ValidationError) as exc:
        LOGGER.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(1, f"{parser.prog}: {exc}\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
