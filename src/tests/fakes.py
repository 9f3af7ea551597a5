from __future__ import annotations

import asyncio
import random

from framescribe.base.media import MediaClip, MediaKind
from framescribe.base.transcript import AnalysisResult


class FakeAnalyzer:
    """In-memory analyzer that answers with the clip's window and modality.

    Calls finish in random order so tests can check that assembly does not depend
    on completion order. ``failures`` maps (window index, kind) to an error.
    """

    def __init__(self, failures: dict[tuple[int, MediaKind], Exception] | None = None, max_delay: float = 0.01):
        self.failures = failures or {}
        self.max_delay = max_delay
        self.calls: list[tuple[int, MediaKind, str]] = []

    async def analyze(self, clip: MediaClip, kind: MediaKind, user: str) -> AnalysisResult:
        self.calls.append((clip.window.index, kind, user))
        await asyncio.sleep(random.uniform(0, self.max_delay))
        error = self.failures.get((clip.window.index, kind))
        if error is not None:
            return AnalysisResult.failed(clip.window, kind, error)
        return AnalysisResult(window=clip.window, kind=kind, text=f"{kind.value} {clip.window.index}")
