"""Data models and enums for queuecast."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class ProgramStatus(Enum):
    """Lifecycle states of a program."""
    READY = "Ready"
    RUNNING = "Running"
    FINISHED = "Finished"
    STOPPED = "Stopped"


# Names accepted by `queuecast list <filter>`
STATUS_FILTERS: Dict[str, Optional[ProgramStatus]] = {
    "all": None,
    "running": ProgramStatus.RUNNING,
    "ran": ProgramStatus.FINISHED,
    "ready": ProgramStatus.READY,
    "stopped": ProgramStatus.STOPPED,
}

_FRACTION = re.compile(r"\.(\d{6})\d+")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp as ISO-8601 in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601/RFC-3339 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z`` and fractional seconds longer than microseconds,
    which older catalog files contain.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(r".\1", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Episode:
    """A single media file of a program."""
    path: Path
    episode_number: int  # 1-based rank in file name order

    @property
    def extension(self) -> str:
        """File extension without the leading dot ('' when there is none)."""
        return self.path.suffix[1:] if self.path.suffix else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': str(self.path),
            'episode_number': self.episode_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Episode':
        return cls(path=Path(data['path']), episode_number=int(data['episode_number']))


@dataclass
class Program:
    """A tracked series bound to a source directory and an ordered episode list."""

    name: str
    hash: str
    directory: Path
    episodes: List[Episode] = field(default_factory=list)
    current_episode: int = 0  # zero-based cursor into episodes, may equal len(episodes)
    start_date: Optional[datetime] = None
    last_update: Optional[datetime] = None
    status: ProgramStatus = ProgramStatus.READY

    @property
    def episode_count(self) -> int:
        return len(self.episodes)

    @property
    def remaining(self) -> int:
        """Number of episodes not yet published."""
        return self.episode_count - self.current_episode

    @property
    def is_exhausted(self) -> bool:
        return self.current_episode >= self.episode_count

    @property
    def next_episode(self) -> Optional[Episode]:
        """The episode the next rollover will publish, if any."""
        if self.is_exhausted:
            return None
        return self.episodes[self.current_episode]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'hash': self.hash,
            'directory': str(self.directory),
            'episodes': [episode.to_dict() for episode in self.episodes],
            'current_episode': self.current_episode,
            'start_date': format_timestamp(self.start_date),
            'last_update': format_timestamp(self.last_update),
            'status': self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Program':
        """Create from dictionary.

        Raises:
            KeyError, ValueError, TypeError: when the record is malformed
        """
        episodes = [Episode.from_dict(item) for item in data.get('episodes', [])]
        current_episode = int(data.get('current_episode', 0))
        if not 0 <= current_episode <= len(episodes):
            raise ValueError(
                f"current_episode {current_episode} out of range for {len(episodes)} episodes"
            )
        status = ProgramStatus(data.get('status', ProgramStatus.READY.value))
        if status == ProgramStatus.FINISHED and current_episode != len(episodes):
            raise ValueError(
                f"Finished program has {len(episodes) - current_episode} unpublished episodes"
            )
        return cls(
            name=data['name'],
            hash=data['hash'],
            directory=Path(data['directory']),
            episodes=episodes,
            current_episode=current_episode,
            start_date=parse_timestamp(data.get('start_date')),
            last_update=parse_timestamp(data.get('last_update')),
            status=status,
        )


@dataclass
class Catalog:
    """The entire persisted state: all programs and the global symlink directory."""

    programs: Dict[str, Program] = field(default_factory=dict)
    symlink_dir: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'programs': {key: program.to_dict() for key, program in self.programs.items()},
            'symlink_dir': str(self.symlink_dir) if self.symlink_dir is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Catalog':
        if not isinstance(data, dict):
            raise ValueError("catalog root must be an object")
        programs_data = data.get('programs')
        if programs_data is None:
            programs_data = {}
        if not isinstance(programs_data, dict):
            raise ValueError("'programs' must be an object keyed by program hash")
        programs = {}
        for key, value in programs_data.items():
            program = Program.from_dict(value)
            if program.hash != key:
                raise ValueError(f"program stored under '{key}' has hash '{program.hash}'")
            programs[key] = program
        symlink_dir = data.get('symlink_dir')
        return cls(
            programs=programs,
            symlink_dir=Path(symlink_dir) if symlink_dir else None,
        )


# Fixed allow-list of episode file extensions (case-sensitive, without dot)
VIDEO_EXTENSIONS = frozenset({'mp4', 'mkv', 'avi', 'mov'})
