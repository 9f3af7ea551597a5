from __future__ import annotations

import json
import math
import subprocess
from dataclasses import dataclass
from pathlib import Path

from framescribe.base.exceptions import ProbeError


@dataclass(frozen=True)
class ProbeResult:
    """Duration report for a source video."""

    duration_seconds: float

    @property
    def duration(self) -> int:
        """Whole seconds, rounded up so a partial trailing second still gets a window."""
        return math.ceil(self.duration_seconds)


class VideoProbe:
    """Reads the duration of a media container with ffprobe."""

    def __init__(self, ffprobe_binary: str = "ffprobe"):
        self.ffprobe_binary = ffprobe_binary

    def _run_ffprobe(self, video_path: str | Path) -> dict:
        """Run ffprobe and return parsed JSON output."""
        cmd = [
            self.ffprobe_binary,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-print_format",
            "json",
            str(video_path),
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
            return json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            raise ProbeError(f"FFprobe error: {e.stderr}") from e
        except json.JSONDecodeError as e:
            raise ProbeError(f"Error parsing FFprobe output: {e}") from e
        except OSError as e:
            raise ProbeError(f"Cannot run {self.ffprobe_binary}: {e}") from e

    def probe(self, video_path: str | Path) -> ProbeResult:
        if not Path(video_path).exists():
            raise ProbeError(f"Video file not found: {video_path}")

        probe_data = self._run_ffprobe(video_path)

        try:
            raw = probe_data["format"]["duration"]
            duration_seconds = float(raw)
        except KeyError as e:
            raise ProbeError(f"Missing required metadata field: {e}") from e
        except (TypeError, ValueError) as e:
            raise ProbeError(f"Unreadable duration: {e}") from e

        if not math.isfinite(duration_seconds) or duration_seconds < 0:
            raise ProbeError(f"Invalid duration: {duration_seconds}")

        return ProbeResult(duration_seconds=duration_seconds)

    def duration(self, video_path: str | Path) -> int:
        """Returns the source duration in whole seconds.

        A zero duration is valid input and yields an empty segment plan downstream.

        Raises:
            ProbeError: If the file is missing or is not a decodable media container.
        """
        return self.probe(video_path).duration
