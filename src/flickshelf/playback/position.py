"""Multi-part timeline arithmetic.

A video may be split into several independently downloaded parts. These
functions treat the parts as one continuous timeline: they convert between a
global position (milliseconds into the whole video) and a part-local position,
and turn seek/skip requests into instructions for the player.

Everything here is pure. Nothing touches the playback transport or the
video's playback state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple, Union

from flickshelf.errors import UnplayableError
from flickshelf.state.models import BaseVideo, InProgress


class PartPosition(NamedTuple):
    """A position expressed as (part index, offset within that part)."""

    part_index: int
    offset: int


@dataclass(frozen=True)
class SeekWithinPart:
    """Seek inside the media resource that is already loaded."""

    part_index: int
    offset: int
    global_position: int


@dataclass(frozen=True)
class SwitchPart:
    """Unload the current resource, load another part, then seek in it."""

    from_part: int
    part_index: int
    offset: int
    global_position: int
    path: str  # Store-relative path of the part to load


SeekInstruction = Union[SeekWithinPart, SwitchPart]


def global_position(durations: Sequence[int], part_index: int, offset: int) -> int:
    """Convert a part-local position into a global timeline position.

    Args:
        durations: Duration of each part in milliseconds.
        part_index: Index of the part the offset is relative to.
        offset: Milliseconds into that part.

    Returns:
        Milliseconds from the start of the first part.

    Raises:
        ValueError: If part_index does not name a part.
    """
    if not 0 <= part_index < len(durations):
        raise ValueError(f"Part index {part_index} out of range (0-{len(durations) - 1})")
    return sum(durations[:part_index]) + offset


def locate(durations: Sequence[int], position: int) -> PartPosition:
    """Find the part containing a global timeline position.

    The position is clamped to [0, total). A position exactly on a boundary
    between two parts resolves to the start of the later part; a position at
    or past the end resolves to the last millisecond of the last non-empty
    part. Download state is not considered.

    Args:
        durations: Duration of each part in milliseconds.
        position: Milliseconds into the whole video.

    Returns:
        The (part index, offset) pair for the position.
    """
    total = sum(durations)
    if total <= 0:
        return PartPosition(0, 0)

    remaining = min(max(position, 0), total - 1)
    for index, duration in enumerate(durations):
        if remaining < duration:
            return PartPosition(index, remaining)
        remaining -= duration

    # remaining < total guarantees a part was found above
    raise AssertionError("position not contained in any part")


def seek(video: BaseVideo, current_part_index: int, target: int) -> SeekInstruction:
    """Plan a seek to a global timeline position.

    Args:
        video: The video being played.
        current_part_index: Index of the part currently loaded in the player.
        target: Global position to move to, in milliseconds.

    Returns:
        SeekWithinPart if the target lies in the current part, otherwise
        SwitchPart naming the part file to load.

    Raises:
        UnplayableError: If the target part has not been downloaded.
    """
    durations = video.part_durations
    part_index, offset = locate(durations, target)
    part = video.parts[part_index]

    if part.path is None:
        raise UnplayableError(video.id, part_index)

    resolved = global_position(durations, part_index, offset)
    if part_index == current_part_index:
        return SeekWithinPart(part_index=part_index, offset=offset, global_position=resolved)

    return SwitchPart(
        from_part=current_part_index,
        part_index=part_index,
        offset=offset,
        global_position=resolved,
        path=part.path,
    )


def skip(
    video: BaseVideo, current_part_index: int, current_position: int, delta: int
) -> SeekInstruction:
    """Plan a relative jump, e.g. the +15s / -30s buttons.

    Args:
        video: The video being played.
        current_part_index: Index of the part currently loaded.
        current_position: Current global position in milliseconds.
        delta: Milliseconds to move; negative skips back.

    Returns:
        The seek instruction for the clamped target.

    Raises:
        UnplayableError: If the target part has not been downloaded.
    """
    target = min(max(current_position + delta, 0), video.total_duration)
    return seek(video, current_part_index, target)


def resume_point(video: BaseVideo) -> PartPosition:
    """Get where playback of a video should start."""
    state = video.playback_state
    if isinstance(state, InProgress):
        return locate(video.part_durations, state.position)
    return PartPosition(0, 0)
