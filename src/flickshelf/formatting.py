"""Text formatting helpers for durations and episode labels."""

from __future__ import annotations


def _pad(value: int) -> str:
    return f"{value:02d}"


def format_duration(millis: int) -> str:
    """Format a duration as M:SS or H:MM:SS.

    Sub-second remainders are dropped.

    Examples:
        >>> format_duration(65_000)
        '1:05'
        >>> format_duration(3_725_000)
        '1:02:05'
    """
    secs = max(millis, 0) // 1000
    mins, secs = divmod(secs, 60)
    hours, mins = divmod(mins, 60)
    if hours:
        return f"{hours}:{_pad(mins)}:{_pad(secs)}"
    return f"{mins}:{_pad(secs)}"


def episode_code(season_index: int, episode_index: int) -> str:
    """Format an episode number like s01e05."""
    return f"s{_pad(season_index)}e{_pad(episode_index)}"


def format_progress(position: int, total: int) -> str:
    """Format a playback position against a total, e.g. "12:00 / 45:30"."""
    return f"{format_duration(position)} / {format_duration(total)}"
