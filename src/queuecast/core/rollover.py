"""Rollover engine: advances programs on a weekly cadence and publishes their links."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .errors import ConfigurationMissingError, ProgramNotFoundError, QueuecastError
from .logging import get_logger
from .models import Catalog, Program, ProgramStatus, utc_now
from ..io.symlink_publisher import SymlinkPublisher

logger = get_logger(__name__)

CADENCE = timedelta(days=7)


class RolloverAction(Enum):
    """What a rollover attempt did to a program."""
    PUBLISHED = "published"
    FINISHED = "finished"
    NOT_DUE = "not_due"
    INACTIVE = "inactive"
    FAILED = "failed"


@dataclass
class RolloverOutcome:
    """Result of one rollover attempt on one program."""
    program_hash: str
    program_name: str
    action: RolloverAction
    episode_number: Optional[int] = None
    link_path: Optional[Path] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.action != RolloverAction.FAILED

    def get_summary(self) -> str:
        """Generate a human-readable one-line summary."""
        label = f"{self.program_hash} [{self.program_name}]"
        if self.action == RolloverAction.PUBLISHED:
            return f"{label} now airing episode {self.episode_number}: {self.link_path}"
        if self.action == RolloverAction.FINISHED:
            return f"{label} finished - no episodes remain"
        if self.action == RolloverAction.NOT_DUE:
            return f"{label} not due yet"
        if self.action == RolloverAction.INACTIVE:
            return f"{label} is not running - skipped"
        return f"{label} failed: {self.error}"


def is_due(last_update: Optional[datetime], now: datetime, cadence: timedelta = CADENCE) -> bool:
    """Cadence gate for non-forced rollovers.

    A program that was never updated is always due. Otherwise it is due once
    the whole days elapsed since ``last_update`` reach the cadence; partial
    days are truncated, so exactly 7 x 24 hours is due and one second less is not.
    """
    if last_update is None:
        return True
    return (now - last_update).days >= cadence.days


class RolloverEngine:
    """Drives the program state machine over a catalog.

    ``Ready -> Running -> Finished`` on rollover; ``Stopped`` and ``Finished``
    programs are never touched. The cursor only moves after the episode's
    link was published successfully.
    """

    def __init__(self, catalog: Catalog, publisher: Optional[SymlinkPublisher] = None,
                 clock: Callable[[], datetime] = utc_now, cadence: timedelta = CADENCE):
        """Initialize the rollover engine.

        Args:
            catalog: Catalog whose programs are advanced in place
            publisher: Link publisher (defaults to SymlinkPublisher)
            clock: Source of the current time as an aware UTC datetime
            cadence: Minimum interval between non-forced rollovers, in whole days

        Raises:
            ValueError: if cadence is shorter than one day
        """
        if cadence < timedelta(days=1):
            raise ValueError(f"cadence must be at least one day, got {cadence}")
        self.catalog = catalog
        self.publisher = publisher or SymlinkPublisher()
        self.clock = clock
        self.cadence = cadence
        self.logger = get_logger(__name__)

    def rollover(self, program: Program, force: bool = False) -> RolloverOutcome:
        """Apply one rollover to a program.

        Args:
            program: Program to advance (mutated in place)
            force: Skip the cadence gate

        Returns:
            Outcome describing the transition taken

        Raises:
            ConfigurationMissingError: if a publish is needed and no symlink directory is set
            FilesystemError: if the link cannot be published; the cursor is left unchanged
        """
        now = self.clock()

        if program.status in (ProgramStatus.STOPPED, ProgramStatus.FINISHED):
            return self._outcome(program, RolloverAction.INACTIVE)

        due = force or is_due(program.last_update, now, self.cadence)

        # Checked before any mutation so a Ready program stays Ready
        if due and not program.is_exhausted and self.catalog.symlink_dir is None:
            raise ConfigurationMissingError(
                "Symlink directory not configured. Use 'queuecast config symlink-dir <path>' to set it."
            )

        if program.status == ProgramStatus.READY:
            program.status = ProgramStatus.RUNNING
            program.start_date = now
            self.logger.info(f"Started program '{program.name}'")

        if not due:
            return self._outcome(program, RolloverAction.NOT_DUE)

        if program.is_exhausted:
            program.status = ProgramStatus.FINISHED
            self.logger.info(f"Program '{program.name}' finished after {program.episode_count} episodes")
            return self._outcome(program, RolloverAction.FINISHED)

        episode = program.next_episode
        link_path = self.publisher.publish(self.catalog.symlink_dir, program.name, episode)

        program.current_episode += 1
        program.last_update = now
        return self._outcome(program, RolloverAction.PUBLISHED,
                             episode_number=episode.episode_number, link_path=link_path)

    def update(self, program_hash: Optional[str] = None) -> List[RolloverOutcome]:
        """Roll over one program (forced) or sweep every program (cadence-gated).

        A targeted update raises on failure. A sweep records failures as
        FAILED outcomes and keeps going with the remaining programs.
        """
        if program_hash is not None:
            program = self.catalog.programs.get(program_hash)
            if program is None:
                raise ProgramNotFoundError(program_hash)
            return [self.rollover(program, force=True)]

        outcomes = []
        for key in sorted(self.catalog.programs):
            program = self.catalog.programs[key]
            try:
                outcomes.append(self.rollover(program, force=False))
            except (QueuecastError, OSError) as e:
                self.logger.error(f"Error updating program {key}: {e}")
                outcomes.append(self._outcome(program, RolloverAction.FAILED, error=e))

        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        published = sum(1 for outcome in outcomes if outcome.action == RolloverAction.PUBLISHED)
        self.logger.info(f"Sweep complete: {len(outcomes)} programs, {published} published, {failed} failed")
        return outcomes

    def _outcome(self, program: Program, action: RolloverAction, **kwargs) -> RolloverOutcome:
        return RolloverOutcome(program_hash=program.hash, program_name=program.name,
                               action=action, **kwargs)
