"""Multi-part playback: timeline math, state tracking and player sessions."""

from flickshelf.playback.position import (
    PartPosition,
    SeekInstruction,
    SeekWithinPart,
    SwitchPart,
    global_position,
    locate,
    resume_point,
    seek,
    skip,
)
from flickshelf.playback.session import PlaybackStatus, PlaybackTransport, PlayerSession
from flickshelf.playback.tracker import PlaybackTracker

__all__ = [
    # Timeline
    "PartPosition",
    "SeekInstruction",
    "SeekWithinPart",
    "SwitchPart",
    "global_position",
    "locate",
    "resume_point",
    "seek",
    "skip",
    # Session
    "PlaybackStatus",
    "PlaybackTracker",
    "PlaybackTransport",
    "PlayerSession",
]
