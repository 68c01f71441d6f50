"""Playback state updates.

Playback state is the only mutable part of the media graph. Every change
goes through PlaybackTracker so that each update is a single
read-modify-write per video, even if several observers react to the same
player event.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Union

from flickshelf.state.models import BaseVideo, InProgress, Played, Unplayed

logger = logging.getLogger(__name__)

State = Union[Unplayed, InProgress, Played]
StateUpdate = Callable[[BaseVideo], State]


class PlaybackTracker:
    """Applies playback state changes atomically per video."""

    def __init__(self, played_threshold: int = 0) -> None:
        """Initialize the tracker.

        Args:
            played_threshold: A position within this many milliseconds of the
                end counts as watched. Default is 0 (only the very end).
        """
        self.played_threshold = played_threshold
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, video: BaseVideo) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(video.id)
            if lock is None:
                lock = threading.Lock()
                self._locks[video.id] = lock
            return lock

    def update(self, video: BaseVideo, change: StateUpdate) -> State:
        """Replace a video's playback state with the result of change.

        Args:
            video: The video to update.
            change: Called with the video under its lock; returns the new state.

        Returns:
            The state that was stored.
        """
        with self._lock_for(video):
            new_state = change(video)
            video.playback_state = new_state
            return new_state

    def record_position(self, video: BaseVideo, position: int) -> State:
        """Record the current global position of a video.

        Positions at (or within played_threshold of) the end mark the video
        as played. A zero position leaves an unplayed video unplayed.
        """

        def change(v: BaseVideo) -> State:
            total = v.total_duration
            clamped = max(position, 0)
            if clamped >= total - self.played_threshold:
                return Played()
            if clamped == 0 and isinstance(v.playback_state, Unplayed):
                return v.playback_state
            return InProgress(position=clamped)

        return self.update(video, change)

    def mark_played(self, video: BaseVideo) -> State:
        """Mark a video as watched."""
        logger.debug("Marking %s as played", video.id)
        return self.update(video, lambda v: Played())

    def mark_unplayed(self, video: BaseVideo) -> State:
        """Reset a video to unwatched."""
        logger.debug("Marking %s as unplayed", video.id)
        return self.update(video, lambda v: Unplayed())
