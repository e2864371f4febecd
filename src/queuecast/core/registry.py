"""Program registry: catalog entry management."""

import os
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import (
    FilesystemError,
    InvalidInputError,
    NoMediaFoundError,
    ProgramExistsError,
    ProgramNotFoundError,
)
from .identifier import generate_hash
from .logging import get_logger
from .models import Catalog, Episode, Program, ProgramStatus
from ..io.episode_scanner import scan_episodes

logger = get_logger(__name__)


class ProgramRegistry:
    """Adds, removes and edits programs of an in-memory catalog.

    Every operation mutates the catalog at most once; persisting it is the
    caller's job.
    """

    def __init__(self, catalog: Catalog,
                 scanner: Callable[[Path], List[Episode]] = scan_episodes):
        """Initialize the registry.

        Args:
            catalog: Catalog to operate on
            scanner: Episode discovery function (injected for tests)
        """
        self.catalog = catalog
        self.scanner = scanner
        self.logger = get_logger(__name__)

    def get(self, program_hash: str) -> Program:
        """Look up a program by hash.

        Raises:
            ProgramNotFoundError: if no program has this hash
        """
        try:
            return self.catalog.programs[program_hash]
        except KeyError:
            raise ProgramNotFoundError(program_hash) from None

    def add(self, directory: Union[str, Path], replace: bool = False) -> Program:
        """Register a directory as a new program.

        The program name is the directory's final path segment.

        Args:
            directory: Directory holding the program's episode files
            replace: Overwrite an existing program with the same hash

        Returns:
            The new program, in Ready state

        Raises:
            InvalidInputError: if the directory is missing or not a directory
            NoMediaFoundError: if the directory holds no video files
            ProgramExistsError: if the program exists and replace is False
        """
        # abspath collapses "..", so the name is the real final segment
        dir_path = Path(os.path.abspath(os.path.expanduser(str(directory))))
        if not dir_path.is_dir():
            if dir_path.exists():
                raise InvalidInputError(f"Not a directory: {dir_path}")
            raise InvalidInputError(f"Directory does not exist: {dir_path}")

        name = dir_path.name
        if not name:
            raise InvalidInputError(f"Invalid directory name: {dir_path}")

        episodes = self.scanner(dir_path)
        if not episodes:
            raise NoMediaFoundError(f"No video files found in directory: {dir_path}")

        program_hash = generate_hash(name)
        if program_hash in self.catalog.programs:
            if not replace:
                raise ProgramExistsError(program_hash, name)
            self.logger.warning(f"Replacing existing program '{name}' ({program_hash})")

        program = Program(
            name=name,
            hash=program_hash,
            directory=dir_path,
            episodes=list(episodes),
        )
        self.catalog.programs[program_hash] = program
        self.logger.info(f"Added program '{name}' with hash '{program_hash}' ({len(episodes)} episodes)")
        return program

    def remove(self, program_hash: str) -> Program:
        """Delete a program from the catalog and return it."""
        program = self.get(program_hash)
        del self.catalog.programs[program_hash]
        self.logger.info(f"Removed program '{program.name}'")
        return program

    def stop(self, program_hash: str) -> Program:
        """Halt a program regardless of its current status."""
        program = self.get(program_hash)
        program.status = ProgramStatus.STOPPED
        self.logger.info(f"Stopped program '{program.name}'")
        return program

    def skip(self, program_hash: str, count: int = 1) -> int:
        """Move a program's cursor forward without publishing.

        The cursor is clamped to the number of episodes. Status and timestamps
        are left alone.

        Returns:
            The new cursor value
        """
        if count < 0:
            raise InvalidInputError(f"Skip count must not be negative: {count}")
        program = self.get(program_hash)
        program.current_episode = min(program.current_episode + count, program.episode_count)
        self.logger.info(
            f"Skipped {count} episodes for program '{program.name}' "
            f"(now at {program.current_episode}/{program.episode_count})"
        )
        return program.current_episode

    def list_programs(self, status: Optional[ProgramStatus] = None) -> List[Program]:
        """Programs sorted by name then hash, optionally restricted to one status."""
        programs = [
            program for program in self.catalog.programs.values()
            if status is None or program.status == status
        ]
        return sorted(programs, key=lambda program: (program.name, program.hash))

    def set_symlink_dir(self, path: Union[str, Path]) -> Path:
        """Create and store the directory links are published in.

        Raises:
            InvalidInputError: if the path exists and is not a directory
            FilesystemError: if the directory cannot be created
        """
        dir_path = Path(path).expanduser().absolute()
        if dir_path.exists() and not dir_path.is_dir():
            raise InvalidInputError(f"Not a directory: {dir_path}")
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create symlink directory {dir_path}: {e}") from e

        self.catalog.symlink_dir = dir_path
        self.logger.info(f"Set symlink directory to: {dir_path}")
        return dir_path
