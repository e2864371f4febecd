"""Episode discovery for program directories."""

from pathlib import Path
from typing import Iterable, List, Union

from ..core.errors import DirectoryNotFoundError, FilesystemError, PathNotADirectoryError
from ..core.logging import get_logger
from ..core.models import Episode, VIDEO_EXTENSIONS

logger = get_logger(__name__)


def is_video_file(path: Path, extensions: Iterable[str] = VIDEO_EXTENSIONS) -> bool:
    """Check whether a path is a regular file with an allowed video extension."""
    suffix = path.suffix[1:] if path.suffix else ""
    return suffix in extensions and path.is_file()


def scan_episodes(directory: Union[str, Path]) -> List[Episode]:
    """List the video files of a directory as numbered episodes.

    Files are ordered by file name and numbered from 1 in that order. Only the
    top level of the directory is scanned.

    Args:
        directory: Program directory to scan

    Returns:
        Ordered episodes; empty when the directory holds no video files

    Raises:
        DirectoryNotFoundError: if the directory does not exist
        PathNotADirectoryError: if the path is not a directory
        FilesystemError: if the directory cannot be listed
    """
    dir_path = Path(directory).absolute()
    if not dir_path.exists():
        raise DirectoryNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise PathNotADirectoryError(f"Not a directory: {dir_path}")

    try:
        candidates = [entry for entry in dir_path.iterdir() if is_video_file(entry)]
    except OSError as e:
        raise FilesystemError(f"Cannot list directory {dir_path}: {e}") from e

    candidates.sort(key=lambda entry: entry.name)
    episodes = [
        Episode(path=entry, episode_number=index)
        for index, entry in enumerate(candidates, start=1)
    ]

    logger.debug(f"Found {len(episodes)} episodes in {dir_path}")
    return episodes
