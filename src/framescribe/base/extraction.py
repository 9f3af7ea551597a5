from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from framescribe.base.exceptions import ExtractionError, SourceUnreadableError
from framescribe.base.media import MediaClip, MediaKind
from framescribe.base.segments import Window
from framescribe.base.workspace import Workspace

logger = logging.getLogger(__name__)

FRAME_PATTERN = "frame-%04d.jpg"
FRAME_GLOB = "frame-*.jpg"


@dataclass
class ExtractedMedia:
    """Frames and audio clips produced for a segment plan.

    Frames are paired to windows by ordinal position, so there are at most as many
    frames as windows. Audio clips exist only for windows whose extraction succeeded.
    """

    frames: list[MediaClip] = field(default_factory=list)
    audio_clips: list[MediaClip] = field(default_factory=list)

    def frame_for(self, window: Window) -> MediaClip | None:
        return next((clip for clip in self.frames if clip.window.index == window.index), None)

    def audio_for(self, window: Window) -> MediaClip | None:
        return next((clip for clip in self.audio_clips if clip.window.index == window.index), None)


class MediaExtractor:
    """Cuts one audio clip per window and samples frames in a single ffmpeg pass."""

    def __init__(self, ffmpeg_binary: str = "ffmpeg", audio_format: str = "mp3", jpeg_quality: int = 2):
        self.ffmpeg_binary = ffmpeg_binary
        self.audio_format = audio_format
        self.jpeg_quality = jpeg_quality

    async def _run_ffmpeg(self, args: list[str], description: str) -> None:
        """Run ffmpeg without blocking the event loop.

        Raises:
            ExtractionError: If ffmpeg cannot be started or exits with a non-zero code.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.ffmpeg_binary,
                "-hide_banner",
                "-loglevel",
                "error",
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExtractionError(f"Cannot run {self.ffmpeg_binary} for {description}: {e}") from e

        try:
            _, stderr = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ExtractionError(f"FFmpeg failed for {description} (exit {process.returncode}): {message}")

    def audio_path(self, window: Window, workspace: Workspace) -> Path:
        return workspace.audio_dir / f"audio_{window.start_second:04d}.{self.audio_format}"

    async def extract_audio(self, source: Path, window: Window, workspace: Workspace) -> MediaClip:
        """Extract the audio bounded by ``window`` into its own clip."""
        output = self.audio_path(window, workspace)
        await self._run_ffmpeg(
            [
                "-ss",
                str(window.start_second),
                "-t",
                str(window.length_seconds),
                "-i",
                str(source),
                "-vn",
                "-y",
                str(output),
            ],
            description=f"audio of {window}",
        )
        if not output.exists() or output.stat().st_size == 0:
            raise ExtractionError(f"FFmpeg produced no audio for {window}")
        return MediaClip(window=window, kind=MediaKind.AUDIO, path=output)

    async def extract_frames(self, source: Path, effective_interval: int, workspace: Workspace) -> list[Path]:
        """Sample the whole video once at ``1 / effective_interval`` frames per second.

        A failed pass is logged and whatever frames were written are still returned.
        """
        try:
            await self._run_ffmpeg(
                [
                    "-i",
                    str(source),
                    "-vf",
                    f"fps=1/{effective_interval}",
                    "-q:v",
                    str(self.jpeg_quality),
                    "-y",
                    str(workspace.frames_dir / FRAME_PATTERN),
                ],
                description="frame sampling",
            )
        except ExtractionError as e:
            logger.error("Frame extraction failed: %s", e)

        return sorted(workspace.frames_dir.glob(FRAME_GLOB))

    async def _extract_audio_or_none(self, source: Path, window: Window, workspace: Workspace) -> MediaClip | None:
        try:
            return await self.extract_audio(source, window, workspace)
        except ExtractionError as e:
            logger.error("Audio extraction failed for %s: %s", window, e)
            return None

    async def extract(self, source: str | Path, windows: Sequence[Window], workspace: Workspace) -> ExtractedMedia:
        """Produce frames and audio clips for every window of the plan.

        Per-window failures degrade to missing clips. Frames are paired to windows
        positionally up to ``min(frame_count, window_count)``.

        Raises:
            SourceUnreadableError: If the source file does not exist.
        """
        source = Path(source)
        if not source.is_file():
            raise SourceUnreadableError(f"Source video not found: {source}")

        workspace.reset_output_dirs()
        if not windows:
            return ExtractedMedia()

        # The first window is never clipped unless the whole video is shorter than
        # one interval, so its length equals min(interval_seconds, duration).
        effective_interval = windows[0].length_seconds

        audio_tasks = [self._extract_audio_or_none(source, window, workspace) for window in windows]
        frame_paths, *audio_results = await asyncio.gather(
            self.extract_frames(source, effective_interval, workspace), *audio_tasks
        )

        audio_clips = [clip for clip in audio_results if clip is not None]
        if len(frame_paths) != len(windows):
            logger.warning(
                "Sampled %d frames for %d windows, pairing the first %d",
                len(frame_paths),
                len(windows),
                min(len(frame_paths), len(windows)),
            )
        frames = [
            MediaClip(window=window, kind=MediaKind.IMAGE, path=path) for window, path in zip(windows, frame_paths)
        ]

        logger.info(
            "Extracted %d frames and %d/%d audio clips", len(frames), len(audio_clips), len(windows)
        )
        return ExtractedMedia(frames=frames, audio_clips=audio_clips)
