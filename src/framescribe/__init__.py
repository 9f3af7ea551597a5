from .ai import (
    AnalyzerConfig,
    PipelineConfig,
    RemoteAnalyzerClient,
    TranscriptionOutcome,
    TranscriptPipeline,
    transcribe_video,
)
from .base import Transcript, TranscriptSegment, VideoSource, Window, plan_windows

__all__ = [
    "AnalyzerConfig",
    "PipelineConfig",
    "RemoteAnalyzerClient",
    "TranscriptPipeline",
    "TranscriptionOutcome",
    "transcribe_video",
    "Transcript",
    "TranscriptSegment",
    "VideoSource",
    "Window",
    "plan_windows",
]
