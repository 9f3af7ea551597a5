"""Turns a video into a time-ordered caption and transcription text."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import aiofiles

from framescribe.ai.client import RemoteAnalyzerClient
from framescribe.ai.config import AnalyzerConfig, PipelineConfig, load_config
from framescribe.base.exceptions import SourceUnreadableError, WorkspaceError
from framescribe.base.extraction import ExtractedMedia, MediaExtractor
from framescribe.base.media import MediaClip, MediaKind, VideoSource
from framescribe.base.probe import VideoProbe
from framescribe.base.segments import Window, plan_windows
from framescribe.base.transcript import AnalysisResult, Transcript, TranscriptSegment
from framescribe.base.workspace import Workspace, scratch_space

logger = logging.getLogger(__name__)

DEFAULT_USER = "framescribe"
SOURCE_DIRNAME = "source"


class Analyzer(Protocol):
    async def analyze(self, clip: MediaClip, kind: MediaKind, user: str) -> AnalysisResult: ...


@dataclass
class TranscriptionOutcome:
    """What the calling layer gets back: the rendered text plus a success flag."""

    text: str
    success: bool
    error: str | None = None
    transcript: Transcript | None = None


class TranscriptPipeline:
    """Probe, plan, extract, analyze and assemble one video per ``run`` call.

    Windows are analyzed concurrently; within a window the frame caption and the
    audio transcription run concurrently too. Per-clip failures leave empty text
    in that window's segment. Only an unreadable source aborts the run.
    """

    def __init__(
        self,
        client: Analyzer,
        config: PipelineConfig | None = None,
        probe: VideoProbe | None = None,
        extractor: MediaExtractor | None = None,
    ):
        self.client = client
        self.config = config if config is not None else PipelineConfig()
        self.probe = probe if probe is not None else VideoProbe()
        self.extractor = extractor if extractor is not None else MediaExtractor()

    async def _write_source(self, source: VideoSource, workspace: Workspace) -> Path:
        source_dir = workspace.root / SOURCE_DIRNAME
        path = source_dir / source.safe_filename
        try:
            source_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(source.data)
        except OSError as e:
            raise SourceUnreadableError(f"Cannot stage {source.filename}: {e}") from e
        return path

    async def _probe_duration(self, source_path: Path) -> int:
        # The worker thread cannot be interrupted, so a cancelled run still waits
        # for ffprobe to release the staged file before the workspace goes away.
        probe_task = asyncio.ensure_future(asyncio.to_thread(self.probe.duration, source_path))
        try:
            return await asyncio.shield(probe_task)
        except asyncio.CancelledError:
            await asyncio.gather(probe_task, return_exceptions=True)
            raise

    async def _analyze_clip(self, clip: MediaClip | None, kind: MediaKind, user: str) -> str:
        if clip is None:
            return ""
        result = await self.client.analyze(clip, kind, user)
        return result.text if result.ok else ""

    async def _analyze_window(self, window: Window, media: ExtractedMedia, user: str) -> TranscriptSegment:
        visual_summary, audio_transcription = await asyncio.gather(
            self._analyze_clip(media.frame_for(window), MediaKind.IMAGE, user),
            self._analyze_clip(media.audio_for(window), MediaKind.AUDIO, user),
        )
        return TranscriptSegment(
            window=window, visual_summary=visual_summary, audio_transcription=audio_transcription
        )

    async def _analyze_windows(
        self, windows: list[Window], media: ExtractedMedia, user: str
    ) -> list[TranscriptSegment]:
        tasks = [asyncio.ensure_future(self._analyze_window(window, media, user)) for window in windows]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def run(
        self, source: VideoSource, interval_seconds: int | None = None, user: str = DEFAULT_USER
    ) -> Transcript:
        """Build the transcript of ``source``.

        Args:
            source: Uploaded video bytes and filename.
            interval_seconds: Window length. Defaults to the configured interval.
            user: Opaque user identifier forwarded to the remote service.

        Raises:
            SourceUnreadableError: If the video cannot be staged, probed or read.
            WorkspaceError: If no scratch directory can be allocated.
        """
        interval = interval_seconds if interval_seconds is not None else self.config.interval_seconds
        if interval <= 0:
            raise ValueError("interval_seconds must be positive")

        async with scratch_space(self.config.scratch_root) as workspace:
            source_path = await self._write_source(source, workspace)
            duration = await self._probe_duration(source_path)
            windows = plan_windows(duration, interval)
            logger.info("%s: %ds of video, %d windows of %ds", source.filename, duration, len(windows), interval)

            if not windows:
                logger.warning("%s has zero duration, nothing to extract", source.filename)
                return Transcript(segments=[])

            media = await self.extractor.extract(source_path, windows, workspace)
            segments = await self._analyze_windows(windows, media, user)

        transcript = Transcript(segments=segments)
        degraded = len(transcript.degraded_segments)
        if degraded:
            logger.warning("%d of %d segments are missing caption or transcription text", degraded, len(transcript))
        return transcript

    async def transcribe(
        self, source: VideoSource, interval_seconds: int | None = None, user: str = DEFAULT_USER
    ) -> TranscriptionOutcome:
        """Like ``run``, but reports fatal source errors through the success flag."""
        try:
            transcript = await self.run(source, interval_seconds, user)
        except (SourceUnreadableError, WorkspaceError) as e:
            logger.error("Transcription of %s failed: %s", source.filename, e)
            return TranscriptionOutcome(text="", success=False, error=str(e))

        return TranscriptionOutcome(
            text=transcript.render(self.config.segment_delimiter), success=True, transcript=transcript
        )


async def transcribe_video(
    source: VideoSource,
    interval_seconds: int | None = None,
    user: str = DEFAULT_USER,
    analyzer_config: AnalyzerConfig | None = None,
    pipeline_config: PipelineConfig | None = None,
) -> TranscriptionOutcome:
    """Transcribe one uploaded video with a short-lived analyzer client.

    Missing configuration is read from ``framescribe.toml`` or ``pyproject.toml``.
    """
    if analyzer_config is None or pipeline_config is None:
        loaded_analyzer, loaded_pipeline = load_config()
        analyzer_config = analyzer_config if analyzer_config is not None else loaded_analyzer
        pipeline_config = pipeline_config if pipeline_config is not None else loaded_pipeline

    async with RemoteAnalyzerClient(analyzer_config) as client:
        pipeline = TranscriptPipeline(client, pipeline_config)
        return await pipeline.transcribe(source, interval_seconds, user)
