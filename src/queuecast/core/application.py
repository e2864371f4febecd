"""Main application logic for queuecast."""

import argparse
import sys
from typing import Callable, Optional, TextIO

from .errors import QueuecastError
from .logging import get_logger, setup_logging
from .models import Catalog, Program, STATUS_FILTERS
from .registry import ProgramRegistry
from .rollover import RolloverAction, RolloverEngine
from ..io.catalog_store import CatalogStore

logger = get_logger(__name__)


def format_program_line(program: Program) -> str:
    """Render one `list` row: ``<hash> [<name>] (<cur>/<total> episodes) - <Status>``."""
    return (
        f"{program.hash} [{program.name}] "
        f"({program.current_episode}/{program.episode_count} episodes) - {program.status.value}"
    )


class Application:
    """Runs one command: load the catalog, perform one operation, save the catalog."""

    def __init__(self, store_factory: Callable[..., CatalogStore] = CatalogStore,
                 engine_factory: Callable[..., RolloverEngine] = RolloverEngine,
                 output: Optional[TextIO] = None):
        """Initialize the application.

        Args:
            store_factory: Builds the catalog store from (config_dir, catalog_file)
            engine_factory: Builds the rollover engine from a catalog
            output: Stream for command output (defaults to stdout)
        """
        self.store_factory = store_factory
        self.engine_factory = engine_factory
        self.output = output

    def _print(self, text: str) -> None:
        print(text, file=self.output or sys.stdout)

    def _setup_file_logging(self, config) -> None:
        """Reconfigure logging with the loaded settings."""
        setup_logging(
            level=config.log_level,
            format_type=config.log_format,
            log_file=config.log_file,
            max_file_size_mb=config.log_max_file_size_mb,
            backup_count=config.log_backup_count
        )

    def run(self, args: argparse.Namespace) -> int:
        """Run the application with parsed arguments.

        The catalog is saved after the operation whether it succeeded or not;
        a failed operation never committed its mutation.

        Args:
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        from ..config import ConfigLoader
        from ..config.cli_config import CLIConfigManager

        try:
            config = ConfigLoader().load_config(
                config_file=getattr(args, 'config', None),
                cli_args=CLIConfigManager().args_to_config_dict(args)
            )
        except (ValueError, QueuecastError) as e:
            logger.error(f"Configuration error: {e}")
            return 1

        self._setup_file_logging(config)
        config.log_config()

        store = self.store_factory(config.config_dir, config.catalog_file)
        try:
            catalog = store.load()
        except QueuecastError as e:
            # No partial recovery from an unreadable catalog
            logger.error(f"Cannot load catalog: {e}")
            return 1

        try:
            exit_code = self.dispatch(args, catalog, store)
        except QueuecastError as e:
            logger.error(str(e))
            exit_code = 1

        try:
            store.save(catalog)
        except QueuecastError as e:
            logger.error(f"Cannot save catalog: {e}")
            return 1

        return exit_code

    def dispatch(self, args: argparse.Namespace, catalog: Catalog, store: CatalogStore) -> int:
        """Perform the command named by args on the loaded catalog."""
        registry = ProgramRegistry(catalog)

        if args.command == "add":
            program = registry.add(args.directory, replace=getattr(args, 'replace', False))
            self._print(f"Added program '{program.name}' with hash '{program.hash}'")
            return 0

        if args.command == "list":
            status = STATUS_FILTERS.get(getattr(args, 'filter', None) or "all")
            for program in registry.list_programs(status):
                self._print(format_program_line(program))
            return 0

        if args.command == "update":
            return self.run_update_command(catalog, getattr(args, 'program', None))

        if args.command == "remove":
            program = registry.remove(args.program)
            self._print(f"Removed program '{program.name}'")
            return 0

        if args.command == "stop":
            program = registry.stop(args.program)
            self._print(f"Stopped program '{program.name}'")
            return 0

        if args.command == "skip":
            program = registry.get(args.program)
            registry.skip(args.program, args.count)
            self._print(f"Skipped {args.count} episodes for program '{program.name}'")
            return 0

        if args.command == "config":
            return self.run_config_command(args, catalog, registry, store)

        logger.error(f"Unknown command: {args.command}")
        return 1

    def run_update_command(self, catalog: Catalog, program_hash: Optional[str]) -> int:
        """Run a targeted rollover or a sweep over every program."""
        engine = self.engine_factory(catalog)
        outcomes = engine.update(program_hash)

        # Failures were already reported by the engine
        for outcome in outcomes:
            if outcome.action in (RolloverAction.PUBLISHED, RolloverAction.FINISHED):
                self._print(outcome.get_summary())
            elif outcome.succeeded:
                logger.debug(outcome.get_summary())

        return 0 if all(outcome.succeeded for outcome in outcomes) else 1

    def run_config_command(self, args: argparse.Namespace, catalog: Catalog,
                           registry: ProgramRegistry, store: CatalogStore) -> int:
        """Change or show settings stored in the catalog."""
        if args.config_command == "symlink-dir":
            path = registry.set_symlink_dir(args.path)
            self._print(f"Set symlink directory to: {path}")
            return 0

        if args.config_command == "show":
            self._print(f"catalog: {store.catalog_path}")
            self._print(f"symlink-dir: {catalog.symlink_dir if catalog.symlink_dir else '(not set)'}")
            self._print(f"programs: {len(catalog.programs)}")
            return 0

        self._print("Use 'queuecast config --help' for configuration options")
        return 1
