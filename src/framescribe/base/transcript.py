from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from framescribe.base.media import MediaKind
from framescribe.base.segments import Window

DEFAULT_SEGMENT_DELIMITER = "\n\n---\n\n"


class AnalysisStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one remote analysis call for one clip.

    Attributes:
        window: Window the analyzed clip belongs to.
        kind: Modality of the clip.
        text: Caption or transcription, empty when the call failed.
        status: Whether the remote call produced text.
        error: The failure that degraded this result, if any.
    """

    window: Window
    kind: MediaKind
    text: str
    status: AnalysisStatus = AnalysisStatus.OK
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is AnalysisStatus.OK

    @classmethod
    def failed(cls, window: Window, kind: MediaKind, error: Exception) -> AnalysisResult:
        return cls(window=window, kind=kind, text="", status=AnalysisStatus.FAILED, error=error)


def format_timestamp(seconds: int) -> str:
    """Format whole seconds as HH:MM:SS."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class TranscriptSegment:
    window: Window
    visual_summary: str = ""
    audio_transcription: str = ""

    @property
    def is_degraded(self) -> bool:
        """True when one or both modality texts are missing."""
        return not self.visual_summary or not self.audio_transcription

    def render(self) -> str:
        header = f"[{format_timestamp(self.window.start_second)} - {format_timestamp(self.window.end_second)}]"
        return f"{header}\nVisual: {self.visual_summary}\nAudio: {self.audio_transcription}"


@dataclass
class Transcript:
    segments: list[TranscriptSegment]

    def __post_init__(self) -> None:
        self.segments = sorted(self.segments, key=lambda segment: segment.window.index)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def degraded_segments(self) -> list[TranscriptSegment]:
        return [segment for segment in self.segments if segment.is_degraded]

    def render(self, delimiter: str = DEFAULT_SEGMENT_DELIMITER) -> str:
        """Render segments in ascending window order into one text blob."""
        return delimiter.join(segment.render() for segment in self.segments)
