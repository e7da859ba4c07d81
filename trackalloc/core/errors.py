from __future__ import annotations


class RailwayError(Exception):
    """Base class for every error raised by trackalloc."""


class NullInputError(RailwayError, TypeError):
    """A required argument was None."""


class InvalidArgumentError(RailwayError, ValueError):
    """A structurally impossible value (bad length, offset, endpoint...)."""


class InvalidTrackError(RailwayError, ValueError):
    """Adding a section would connect one endpoint to two sections."""


class PreconditionError(InvalidArgumentError):
    """The allocator was handed inputs that break its contract."""


class FormatError(RailwayError, ValueError):
    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class TrackReadError(RailwayError, OSError):
    """The track description could not be read from storage."""


def require(value, name: str):
    # None checks shared by the value types
    if value is None:
        raise NullInputError(f"{name} must not be None")
    return value
