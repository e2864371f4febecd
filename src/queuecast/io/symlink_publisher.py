"""Publishes the current episode of a program as a symbolic link."""

import os
import re
from pathlib import Path
from typing import List, Union

from ..core.errors import FilesystemError
from ..core.logging import get_logger
from ..core.models import Episode

logger = get_logger(__name__)


def link_base_name(program_name: str) -> str:
    """Program part of a link name: spaces become underscores."""
    return program_name.replace(" ", "_")


def link_name(program_name: str, episode: Episode) -> str:
    """Build the link file name, e.g. ``My_Show_ep03.mkv``."""
    name = f"{link_base_name(program_name)}_ep{episode.episode_number:02d}"
    if episode.extension:
        name = f"{name}.{episode.extension}"
    return name


class SymlinkPublisher:
    """Keeps at most one "now airing" link per program in the symlink directory."""

    def __init__(self):
        self.logger = get_logger(__name__)

    def _link_pattern(self, program_name: str) -> "re.Pattern[str]":
        return re.compile(rf"^{re.escape(link_base_name(program_name))}_ep\d+(\.[^.]+)?$")

    def _points_into(self, link: Path, directory: Path) -> bool:
        """Whether a link's target file sits directly in directory."""
        target = Path(os.readlink(link))
        if not target.is_absolute():
            target = link.parent / target
        return Path(os.path.abspath(target)).parent == Path(os.path.abspath(directory))

    def find_links(self, symlink_dir: Union[str, Path], program_name: str) -> List[Path]:
        """List existing links in symlink_dir that belong to program_name."""
        directory = Path(symlink_dir)
        if not directory.is_dir():
            return []
        pattern = self._link_pattern(program_name)
        try:
            return sorted(
                entry for entry in directory.iterdir()
                if entry.is_symlink() and pattern.match(entry.name)
            )
        except OSError as e:
            raise FilesystemError(f"Cannot list symlink directory {directory}: {e}") from e

    def publish(self, symlink_dir: Union[str, Path], program_name: str, episode: Episode) -> Path:
        """Point the program's link at episode, replacing any previous link.

        Earlier links of the program are those matching its link name pattern
        whose target lies in the episode's directory.

        Args:
            symlink_dir: Directory the links are published in (created if missing)
            program_name: Name of the program the episode belongs to
            episode: Episode to publish

        Returns:
            Path of the created link

        Raises:
            FilesystemError: if the directory, removal or link creation fails
        """
        directory = Path(symlink_dir)
        target = directory / link_name(program_name, episode)
        source = Path(episode.path).absolute()

        try:
            directory.mkdir(parents=True, exist_ok=True)

            # Same-named programs in other directories keep their links
            for stale in self.find_links(directory, program_name):
                if stale != target and self._points_into(stale, source.parent):
                    self.logger.debug(f"Removing previous link {stale}")
                    stale.unlink()

            # is_symlink() catches dangling links that exists() reports as missing
            if target.is_symlink() or target.exists():
                target.unlink()

            os.symlink(source, target)
        except FilesystemError:
            raise
        except OSError as e:
            raise FilesystemError(f"Cannot publish {source} as {target}: {e}") from e

        self.logger.info(f"Created symlink for {program_name} episode {episode.episode_number}: {target}")
        return target
