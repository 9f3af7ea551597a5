from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from framescribe.base.segments import Window

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class MediaKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"


@dataclass(frozen=True)
class MediaClip:
    """A single-modality artifact extracted for one window."""

    window: Window
    kind: MediaKind
    path: Path


@dataclass
class VideoSource:
    """Uploaded video bytes together with the client's original filename."""

    data: bytes
    filename: str

    @classmethod
    def from_path(cls, path: str | Path) -> VideoSource:
        path = Path(path)
        return cls(data=path.read_bytes(), filename=path.name)

    @property
    def safe_filename(self) -> str:
        """Filename usable inside a scratch directory, keeping the extension."""
        name = Path(self.filename).name
        cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
        return cleaned or "source.mp4"
