from pathlib import Path

import pytest

from framescribe.base.media import MediaClip, MediaKind
from framescribe.base.segments import Window


@pytest.fixture
def image_clip(tmp_path: Path) -> MediaClip:
    path = tmp_path / "frame-0001.jpg"
    path.write_bytes(b"\xff\xd8\xff")
    return MediaClip(window=Window(index=0, start_second=0, length_seconds=10), kind=MediaKind.IMAGE, path=path)


@pytest.fixture
def audio_clip(tmp_path: Path) -> MediaClip:
    path = tmp_path / "audio_0000.mp3"
    path.write_bytes(b"ID3")
    return MediaClip(window=Window(index=0, start_second=0, length_seconds=10), kind=MediaKind.AUDIO, path=path)
