"""Exception hierarchy for FlickShelf.

All errors raised by the core derive from FlickShelfError so callers can
decide on presentation in one place.
"""

from __future__ import annotations


class FlickShelfError(Exception):
    """Base exception for FlickShelf errors."""

    pass


class DecodeError(FlickShelfError):
    """The snapshot could not be turned into a media state.

    Attributes:
        field: Location of the offending value (an id or a dotted path).
        reason: Short machine-friendly description of the failure.
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecodeError):
            return NotImplemented
        return (self.field, self.reason) == (other.field, other.reason)

    def __hash__(self) -> int:
        return hash((self.field, self.reason))


class UnplayableError(FlickShelfError):
    """A seek or skip targeted a part that has not been downloaded."""

    def __init__(self, video_id: str, part_index: int, message: str | None = None) -> None:
        self.video_id = video_id
        self.part_index = part_index
        if message is None:
            message = f"Part {part_index + 1} of {video_id} is not downloaded"
        super().__init__(message)


class StorePermissionError(FlickShelfError, PermissionError):
    """Access to the backing store was denied."""

    pass


class StateNotLoadedError(FlickShelfError):
    """The media state was requested before the initial load resolved."""

    pass


def get_friendly_message(error: BaseException) -> str:
    """Get a user-facing message for an error.

    Args:
        error: The exception to describe.

    Returns:
        A short sentence suitable for the console.
    """
    if isinstance(error, DecodeError):
        if error.reason == "unresolved":
            return f"The library snapshot refers to '{error.field}', which does not exist."
        return f"The library snapshot is invalid at '{error.field}' ({error.reason})."
    if isinstance(error, UnplayableError):
        return f"{error}. Wait for the download to finish and try again."
    if isinstance(error, StorePermissionError):
        return f"Permission denied while reading the store: {error}"
    if isinstance(error, StateNotLoadedError):
        return "The library is still loading."
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error.filename or error}"
    if isinstance(error, OSError) and error.filename:
        return f"Could not read {error.filename}: {error.strerror or error}"
    return str(error) or type(error).__name__
