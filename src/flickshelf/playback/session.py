"""Driving a media player across the parts of one video.

The player itself (the playback transport) lives outside this package. A
PlayerSession keeps track of which part is loaded, turns seek and skip
requests into transport calls, and feeds status notifications back into the
video's playback state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from flickshelf.errors import UnplayableError
from flickshelf.playback import position as timeline
from flickshelf.playback.position import SeekInstruction, SeekWithinPart
from flickshelf.playback.tracker import PlaybackTracker
from flickshelf.state.models import BaseVideo

logger = logging.getLogger(__name__)


class PlaybackTransport(Protocol):
    """The media player a session controls."""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek_within_current_resource(self, offset: int) -> None: ...

    def load_resource(self, locator: str) -> None: ...


@dataclass
class PlaybackStatus:
    """A periodic status notification from the transport."""

    position: int  # Milliseconds into the loaded part
    duration: int | None = None
    is_playing: bool = True
    finished: bool = False  # The loaded part reached its end


class PlayerSession:
    """Plays one video, possibly spread over several part files."""

    def __init__(
        self,
        video: BaseVideo,
        transport: PlaybackTransport,
        resolve: Callable[[str], str],
        tracker: PlaybackTracker,
        skip_short: int = 15000,
        skip_long: int = 30000,
    ) -> None:
        """Initialize the session.

        Args:
            video: The video to play.
            transport: Player that loads and plays part files.
            resolve: Turns a store-relative part path into a locator the
                transport understands.
            tracker: Records playback state changes.
            skip_short: Milliseconds for the short skip buttons.
            skip_long: Milliseconds for the long skip buttons.
        """
        self.video = video
        self.transport = transport
        self.resolve = resolve
        self.tracker = tracker
        self.skip_short = skip_short
        self.skip_long = skip_long

        self.part_index = 0
        self.local_position = 0
        self.is_playing = False

    @property
    def position(self) -> int:
        """Current position in the video's global timeline."""
        return timeline.global_position(
            self.video.part_durations, self.part_index, self.local_position
        )

    @property
    def total_duration(self) -> int:
        return self.video.total_duration

    def start(self) -> None:
        """Load the part to resume from and start playing.

        Raises:
            UnplayableError: If that part has not been downloaded.
        """
        part_index, offset = timeline.resume_point(self.video)
        path = self.video.parts[part_index].path
        if path is None:
            raise UnplayableError(self.video.id, part_index)

        logger.debug("Starting %s at part %d offset %d", self.video.id, part_index, offset)
        self.transport.load_resource(self.resolve(path))
        if offset:
            self.transport.seek_within_current_resource(offset)
        self.part_index = part_index
        self.local_position = offset
        self.play()

    def play(self) -> None:
        self.transport.play()
        self.is_playing = True

    def pause(self) -> None:
        self.transport.pause()
        self.is_playing = False

    def toggle(self) -> None:
        """Toggle between playing and paused."""
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, target: int) -> SeekInstruction:
        """Move to a global position.

        Raises:
            UnplayableError: If the target part is not downloaded. The
                current part stays loaded.
        """
        instruction = timeline.seek(self.video, self.part_index, target)
        self._apply(instruction)
        return instruction

    def skip(self, delta: int) -> SeekInstruction:
        """Move relative to the current position.

        Raises:
            UnplayableError: If the target part is not downloaded.
        """
        instruction = timeline.skip(self.video, self.part_index, self.position, delta)
        self._apply(instruction)
        return instruction

    def skip_forward(self, long: bool = False) -> SeekInstruction:
        return self.skip(self.skip_long if long else self.skip_short)

    def skip_back(self, long: bool = False) -> SeekInstruction:
        return self.skip(-(self.skip_long if long else self.skip_short))

    def _apply(self, instruction: SeekInstruction) -> None:
        if isinstance(instruction, SeekWithinPart):
            self.transport.seek_within_current_resource(instruction.offset)
        else:
            logger.debug(
                "Switching %s from part %d to part %d",
                self.video.id,
                instruction.from_part,
                instruction.part_index,
            )
            self.transport.load_resource(self.resolve(instruction.path))
            self.transport.seek_within_current_resource(instruction.offset)
            if self.is_playing:
                self.transport.play()
        self.part_index = instruction.part_index
        self.local_position = instruction.offset

    def on_status(self, status: PlaybackStatus) -> None:
        """Handle a status notification from the transport.

        Records progress and moves on to the next part when the loaded one
        finishes.

        Raises:
            UnplayableError: If the next part has not been downloaded.
                Playback stops at the end of the current part.
        """
        part_duration = self.video.parts[self.part_index].duration
        self.local_position = min(max(status.position, 0), part_duration)
        self.is_playing = status.is_playing

        if not status.finished:
            self.tracker.record_position(self.video, self.position)
            return

        if self.part_index == len(self.video.parts) - 1:
            self.is_playing = False
            self.tracker.mark_played(self.video)
            return

        self._advance()

    def _advance(self) -> None:
        """Load the start of the next part."""
        next_index = self.part_index + 1
        path = self.video.parts[next_index].path
        next_start = timeline.global_position(self.video.part_durations, next_index, 0)
        self.tracker.record_position(self.video, next_start)

        if path is None:
            self.is_playing = False
            logger.warning("Part %d of %s is not downloaded, stopping", next_index, self.video.id)
            raise UnplayableError(self.video.id, next_index)

        self.transport.load_resource(self.resolve(path))
        self.part_index = next_index
        self.local_position = 0
        self.transport.play()
        self.is_playing = True
