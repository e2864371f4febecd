"""CLI-specific configuration management."""

import argparse
from typing import Any, Dict, Optional

from .. import __version__
from ..core.models import STATUS_FILTERS
from .config import LOG_FORMATS, LOG_LEVELS


def _non_negative_int(value: str) -> int:
    """argparse type for skip counts."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {number}")
    return number


class CLIConfigManager:
    """Manages CLI argument parsing and conversion to configuration."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="queuecast",
            description="queuecast - Manage TV show files with weekly scheduling",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s config symlink-dir ~/Broadcast
  %(prog)s add "/media/shows/The Expanse"
  %(prog)s list running
  %(prog)s update              # weekly sweep over all programs
  %(prog)s update 1a2b3c4d     # advance one program now
  %(prog)s skip 1a2b3c4d 2
            """
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"queuecast {__version__}"
        )

        # Global options
        parser.add_argument(
            "--config",
            type=str,
            help="Path to YAML configuration file"
        )
        parser.add_argument(
            "--config-dir",
            type=str,
            help="Directory holding the catalog (overrides QUEUECAST_CONFIG_DIR)"
        )
        parser.add_argument(
            "--log-level",
            choices=list(LOG_LEVELS),
            help="Set logging level (default: INFO)"
        )
        parser.add_argument(
            "--log-format",
            choices=list(LOG_FORMATS),
            help="Set log format (default: standard)"
        )
        parser.add_argument(
            "--log-file",
            type=str,
            help="Also write logs to this file (rotated)"
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        add_parser = subparsers.add_parser("add", help="Add directory to database")
        add_parser.add_argument("directory", help="Directory containing the episode files")
        add_parser.add_argument(
            "--replace",
            action="store_true",
            help="Overwrite an existing program with the same name"
        )

        list_parser = subparsers.add_parser("list", help="List programs")
        list_parser.add_argument(
            "filter",
            nargs="?",
            default="all",
            choices=list(STATUS_FILTERS),
            help="Only show programs in this state (default: all)"
        )

        update_parser = subparsers.add_parser(
            "update",
            help="Update symlinks for programs (all programs by default, or specific program)"
        )
        update_parser.add_argument(
            "program",
            nargs="?",
            help="Program hash to advance immediately, ignoring the weekly schedule"
        )

        remove_parser = subparsers.add_parser("remove", help="Remove program from database")
        remove_parser.add_argument("program", help="Program hash")

        stop_parser = subparsers.add_parser("stop", help="Stop program from broadcasting")
        stop_parser.add_argument("program", help="Program hash")

        skip_parser = subparsers.add_parser("skip", help="Skip episodes")
        skip_parser.add_argument("program", help="Program hash")
        skip_parser.add_argument(
            "count",
            nargs="?",
            type=_non_negative_int,
            default=1,
            help="Number of episodes to skip (default: 1)"
        )

        self._add_config_command(subparsers)

        return parser

    def _add_config_command(self, subparsers):
        """Add the config subcommand and its settings."""
        config_parser = subparsers.add_parser("config", help="Configure settings")
        config_subparsers = config_parser.add_subparsers(dest="config_command", help="Settings")

        symlink_parser = config_subparsers.add_parser("symlink-dir", help="Set the symlink directory")
        symlink_parser.add_argument("path", help="Directory the now-airing links are created in")

        config_subparsers.add_parser("show", help="Show the catalog location and settings")

    def parse_args(self, args: Optional[list] = None) -> argparse.Namespace:
        """Parse command line arguments."""
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.error("No command specified. Use --help for usage information.")

        if parsed_args.command == "config" and not parsed_args.config_command:
            self.parser.error("No setting specified. Use 'queuecast config --help' for configuration options.")

        return parsed_args

    def args_to_config_dict(self, args: argparse.Namespace) -> Dict[str, Any]:
        """Convert parsed arguments to dictionary for config loading."""
        config_dict = {}

        if getattr(args, 'config_dir', None):
            config_dict['config_dir'] = args.config_dir
        if getattr(args, 'log_level', None):
            config_dict['log_level'] = args.log_level
        if getattr(args, 'log_format', None):
            config_dict['log_format'] = args.log_format
        if getattr(args, 'log_file', None):
            config_dict['log_file'] = args.log_file

        return config_dict
