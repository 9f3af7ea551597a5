from .exceptions import ExtractionError, FrameScribeError, ProbeError, SourceUnreadableError, WorkspaceError
from .extraction import ExtractedMedia, MediaExtractor
from .media import MediaClip, MediaKind, VideoSource
from .probe import ProbeResult, VideoProbe
from .segments import Window, plan_windows
from .transcript import AnalysisResult, AnalysisStatus, Transcript, TranscriptSegment
from .workspace import Workspace, scratch_space, with_scratch_space

__all__ = [
    # Exceptions
    "FrameScribeError",
    "SourceUnreadableError",
    "ProbeError",
    "ExtractionError",
    "WorkspaceError",
    # Media
    "VideoSource",
    "MediaKind",
    "MediaClip",
    "VideoProbe",
    "ProbeResult",
    "MediaExtractor",
    "ExtractedMedia",
    # Planning
    "Window",
    "plan_windows",
    # Results
    "AnalysisStatus",
    "AnalysisResult",
    "TranscriptSegment",
    "Transcript",
    # Workspace
    "Workspace",
    "scratch_space",
    "with_scratch_space",
]
