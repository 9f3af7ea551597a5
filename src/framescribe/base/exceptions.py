"""Exception hierarchy for framescribe.base module."""


class FrameScribeError(Exception):
    """Base exception for all framescribe errors."""

    pass


class SourceUnreadableError(FrameScribeError):
    """Raised when the source video cannot be probed or streamed."""

    pass


class ProbeError(SourceUnreadableError):
    """Raised when ffprobe cannot report a duration for the source."""

    pass


class ExtractionError(FrameScribeError):
    """Raised when a single frame or audio extraction task fails."""

    pass


class WorkspaceError(FrameScribeError):
    """Raised when a scratch workspace cannot be allocated."""

    pass
