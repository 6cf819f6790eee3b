"""Configuration: argument parser, config file loader, and SyncConfig assembly."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

from gh_org_sync.models import (
    DEFAULT_DEV_HOME,
    ConfigurationError,
    ExplicitCredentials,
    SyncConfig,
    UseDefaultCredentials,
)

CONFIG_FILE = '.ghorgsyncrc.toml'

logger = logging.getLogger(__name__)


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all gh-org-sync flags."""
    # Lazy import to avoid circular dependency with __init__.py
    from gh_org_sync import __version__

    parser = argparse.ArgumentParser(
        description="Clone and update every repository of a GitHub organization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s my-org                        # Clone/update all repos into ~/dev/my-org
  %(prog)s my-org --teams                # Only repos owned by my teams
  %(prog)s my-org --list                 # Show what would be synced
  %(prog)s my-org --dev-home ~/src       # Use another development root
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('org', nargs='?', default=None,
                       help='GitHub organization (default: org_name from config file)')
    parser.add_argument('--teams', dest='scope_to_teams', action='store_true',
                       help='Only sync repositories owned by teams you belong to')
    parser.add_argument('--dev-home', default=str(DEFAULT_DEV_HOME),
                       help=f'Development root, must exist (default: {DEFAULT_DEV_HOME})')
    parser.add_argument('--token', default=None,
                       help='API token (default: credentials from ~/.netrc)')
    parser.add_argument('--api-url', default=None,
                       help='API base URL, e.g. for GitHub Enterprise')
    parser.add_argument('--timeout', type=float, default=None,
                       help='HTTP request timeout in seconds')
    parser.add_argument('--list', dest='list_only', action='store_true',
                       help='List resolved repositories and exit without touching the disk')
    parser.add_argument('--clone-only', action='store_true',
                       help='Clone missing repositories but do not update existing ones')
    parser.add_argument('--json', dest='json_output', action='store_true',
                       help='Output results as JSON (suppresses normal output)')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')
    parser.add_argument('--no-color', dest='color', action='store_false',
                       help='Disable colored output (also off when stdout is not a terminal)')
    parser.add_argument('--config', type=str, default=None,
                       help=f'Path to config file (default: {CONFIG_FILE} in current dir or home)')

    return parser


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load .ghorgsyncrc.toml from explicit path, search dir, or home dir.

    Returns empty dict if not found or tomllib is unavailable.
    """
    candidates = [Path(config_path)] if config_path else [search_dir / CONFIG_FILE, Path.home() / CONFIG_FILE]
    for path in candidates:
        if path.is_file():
            if tomllib is None:
                logger.warning("Found %s but tomllib/tomli not available (Python 3.11+ or pip install tomli). Ignoring.", path)
                return {}
            try:
                with open(path, 'rb') as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    if config_path:
        logger.warning("Config file '%s' not found. Ignoring.", config_path)
    return {}


def explicit_cli_options(parser: argparse.ArgumentParser, argv: list[str]) -> set[str]:
    """Return the dests of options that were spelled out on the command line."""
    explicit = set()
    for action in parser._actions:
        if action.dest in ('help', 'version'):
            continue
        for opt_string in action.option_strings:
            if any(arg == opt_string or arg.startswith(opt_string + '=') for arg in argv):
                explicit.add(action.dest)
                break
    return explicit


def build_config(
    args: argparse.Namespace,
    file_config: dict[str, Any],
    cli_explicit: set[str],
) -> SyncConfig:
    """Merge parsed CLI args over file values into a SyncConfig.

    Raises:
        ConfigurationError: if no organization is given anywhere.
    """
    def effective(dest: str, toml_key: str):
        if dest in cli_explicit:
            return getattr(args, dest)
        if toml_key in file_config:
            return file_config[toml_key]
        return getattr(args, dest)

    org_name = args.org or file_config.get('org_name')
    if not org_name:
        raise ConfigurationError("No organization given (pass it or set org_name in the config file)")

    forge_params = dict(file_config.get('forge', {}))
    for dest, key in (('token', 'token'), ('api_url', 'api_url'), ('timeout', 'timeout')):
        value = getattr(args, dest)
        if value is not None:
            forge_params[key] = value
    credentials = ExplicitCredentials(forge_params) if forge_params else UseDefaultCredentials()

    return SyncConfig(
        org_name=org_name,
        dev_home=Path(effective('dev_home', 'dev_home')).expanduser(),
        scope_to_teams=effective('scope_to_teams', 'scope_to_teams'),
        credentials=credentials,
        clone_only=effective('clone_only', 'clone_only'),
        verbose=effective('verbose', 'verbose'),
        json_output=effective('json_output', 'json_output'),
        color=effective('color', 'color'),
    )


def parse_config(argv: list[str] | None = None) -> tuple[argparse.Namespace, SyncConfig]:
    """Parse argv (default sys.argv[1:]), read the config file, build a SyncConfig."""
    argv = sys.argv[1:] if argv is None else argv
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    file_config = load_config_file(Path.cwd(), args.config)
    return args, build_config(args, file_config, explicit_cli_options(parser, argv))
