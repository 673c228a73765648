"""Command-line front door for trydir.

Parses CLI options, resolves the tries root, and either prints a shell
pipeline directly (clone, fast create) or runs the interactive selector.
Stdout only ever carries one shell-evaluable line; help and diagnostics go
to stderr so the shell wrapper never evaluates them.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from loguru import logger

from . import __version__
from .config import load_settings
from .git_uri import generate_clone_directory_name, is_git_uri
from .logs import setup_logging
from .selector import ActionType, Selection, TrySelector
from .storage import fast_create_target_if_no_exact
from .text import dir_assign_for_shell, is_fish_shell, join_shell, shell_escape
from .ui_theme import DEFAULT_THEME, UITheme, colors_enabled, resolve_theme

POSIX_INIT_TEMPLATE = """try() {{
  script_path='{script}';
  case "$1" in
    -h|--help|--version)
      /usr/bin/env "$script_path" "$@" 2>/dev/tty
      return;;
    cd|init|clone)
      case "$2" in
        -h|--help|--version)
          /usr/bin/env "$script_path" "$@" 2>/dev/tty
          return;;
      esac;;
  esac
  cmd=$(/usr/bin/env "$script_path" --path '{tries}' cd "$@" 2>/dev/tty);
  [ $? -eq 0 ] && eval "$cmd" || echo "$cmd";
}}"""

FISH_INIT_TEMPLATE = """function try
  set -l script_path '{script}'
  set -l cmd (/usr/bin/env $script_path --path '{tries}' cd $argv 2>/dev/tty | string collect)
  test $status -eq 0 && eval $cmd || echo $cmd
end"""


class _StderrArgumentParser(argparse.ArgumentParser):
    """Argument parser that keeps help text off stdout."""

    def print_help(self, file=None) -> None:
        super().print_help(file if file is not None else sys.stderr)


def build_cd_query(rest: list[str]) -> str:
    """Join query words, dropping a leading ``--`` separator and a redundant ``cd``."""
    parts = list(rest)
    if parts and parts[0] == "--":
        parts.pop(0)
    if parts and parts[0] == "cd":
        parts.pop(0)
    return " ".join(parts)


def clone_command_parts(git_uri: str, directory: Path, environ: Mapping[str, str]) -> list[str]:
    return [
        dir_assign_for_shell(directory, environ),
        'mkdir -p "$dir"',
        f"git clone {shell_escape(git_uri)} \"$dir\"",
        'touch "$dir"',
        'cd "$dir"',
    ]


def create_command_parts(directory: Path, environ: Mapping[str, str]) -> list[str]:
    return [dir_assign_for_shell(directory, environ), 'mkdir -p "$dir"', 'touch "$dir"', 'cd "$dir"']


def selection_command_parts(selection: Selection, environ: Mapping[str, str]) -> list[str]:
    """Translate a selector result into shell steps; cancel yields none."""
    if selection.kind is ActionType.CANCEL or selection.path is None:
        return []
    if selection.kind is ActionType.CREATE_NEW:
        return create_command_parts(selection.path, environ)
    return [dir_assign_for_shell(selection.path, environ), 'touch "$dir"', 'cd "$dir"']


def init_script(script_path: Path, tries_path: Path, environ: Mapping[str, str]) -> str:
    """Return the shell function that wraps ``script_path`` for ``eval``."""
    template = FISH_INIT_TEMPLATE if is_fish_shell(environ) else POSIX_INIT_TEMPLATE
    script = str(script_path).replace("'", "'\\''")
    tries = str(tries_path).replace("'", "'\\''")
    return template.format(script=script, tries=tries)


def _emit(parts: list[str]) -> None:
    if parts:
        sys.stdout.write(join_shell(parts) + "\n")
        sys.stdout.flush()


def run_cd_flow(
    query: str,
    base_path: Path,
    environ: Mapping[str, str],
    theme: UITheme = DEFAULT_THEME,
) -> None:
    """Resolve ``query`` into a clone, a fast create, or an interactive pick."""
    trimmed = query.strip()
    if trimmed and is_git_uri(trimmed):
        dir_name = generate_clone_directory_name(trimmed)
        if dir_name is None:
            logger.warning("Unable to parse git URI: {}", trimmed)
            return
        _emit(clone_command_parts(trimmed, base_path / dir_name, environ))
        return

    if trimmed:
        target = fast_create_target_if_no_exact(base_path, trimmed)
        if target is not None:
            logger.debug("no exact match for {!r}; creating {}", trimmed, target)
            _emit(create_command_parts(target, environ))
            return

    base_path.mkdir(parents=True, exist_ok=True)
    selector = TrySelector(base_path, query, theme=theme)
    selection = selector.run()
    if selection is not None:
        _emit(selection_command_parts(selection, environ))


def _script_path() -> Path:
    candidate = Path(sys.argv[0])
    if candidate.name and candidate.exists():
        return candidate.resolve()
    return Path("trydir")


def build_parser() -> argparse.ArgumentParser:
    parser = _StderrArgumentParser(
        prog="trydir",
        description="Interactive selector for dated experiment directories.",
    )
    parser.add_argument("--path", type=Path, default=None, help="Override the tries directory.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    parser.add_argument("--version", action="store_true", help="Print version to stderr and exit.")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Print the shell function wrapping trydir.")
    init_parser.add_argument("--path", dest="init_path", type=Path, default=None, help="Tries directory for the alias.")
    init_parser.add_argument("abs_path", nargs="?", type=Path, default=None, help="Absolute tries directory.")

    cd_parser = subparsers.add_parser("cd", help="Interactive selector; prints shell cd commands.")
    cd_parser.add_argument("query", nargs=argparse.REMAINDER, help="Query terms.")

    clone_parser = subparsers.add_parser("clone", help="Clone a git repo into a dated directory.")
    clone_parser.add_argument("git_uri", help="Git URI (https://... or git@...).")
    clone_parser.add_argument("name", nargs="?", default=None, help="Directory name override.")
    return parser


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> None:
    """Parse arguments and dispatch to ``init``, ``cd`` (default), or ``clone``."""
    env = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)
    if args.version:
        sys.stderr.write(f"trydir {__version__}\n")
        return

    settings = load_settings(args.path, args.log_file, env)
    setup_logging(settings.log_file)
    base_path = settings.tries_path

    try:
        if args.command == "init":
            tries_path = args.init_path
            if tries_path is None and args.abs_path is not None and args.abs_path.is_absolute():
                tries_path = args.abs_path
            sys.stdout.write(init_script(_script_path(), tries_path or base_path, env) + "\n")
            return

        if args.command == "clone":
            dir_name = generate_clone_directory_name(args.git_uri, args.name)
            if dir_name is None:
                logger.error("Unable to parse git URI: {}", args.git_uri)
                raise SystemExit(1)
            _emit(clone_command_parts(args.git_uri, base_path / dir_name, env))
            return

        query = build_cd_query(args.query) if args.command == "cd" else ""
        theme = resolve_theme(settings.theme_name, no_color=not colors_enabled(os.isatty(2), env))
        run_cd_flow(query, base_path, env, theme)
    except OSError as exc:
        logger.error("{}", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
