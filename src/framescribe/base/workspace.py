"""Request-scoped scratch directories."""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from framescribe.base.exceptions import WorkspaceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FRAMES_DIRNAME = "frames"
AUDIO_DIRNAME = "audio"


@dataclass(frozen=True)
class Workspace:
    """Scratch directory owned by exactly one pipeline invocation."""

    root: Path

    @property
    def frames_dir(self) -> Path:
        return self.root / FRAMES_DIRNAME

    @property
    def audio_dir(self) -> Path:
        return self.root / AUDIO_DIRNAME

    def reset_output_dirs(self) -> None:
        """Recreate empty frames/ and audio/ directories."""
        for directory in (self.frames_dir, self.audio_dir):
            if directory.exists():
                shutil.rmtree(directory)
            directory.mkdir(parents=True)


def _make_prefix() -> str:
    return f"framescribe-{time.monotonic_ns()}-"


@asynccontextmanager
async def scratch_space(root: str | Path | None = None) -> AsyncIterator[Workspace]:
    """Allocate a uniquely named scratch directory and remove it on every exit path.

    Args:
        root: Parent directory for the workspace. Defaults to the system temp dir.

    Raises:
        WorkspaceError: If the directory cannot be created.
    """
    try:
        path = Path(tempfile.mkdtemp(prefix=_make_prefix(), dir=root))
    except OSError as e:
        raise WorkspaceError(f"Cannot create scratch directory under {root or tempfile.gettempdir()}: {e}") from e

    logger.debug("Allocated workspace %s", path)
    try:
        yield Workspace(root=path)
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed workspace %s", path)


async def with_scratch_space(fn: Callable[[Workspace], Awaitable[T]], root: str | Path | None = None) -> T:
    """Run ``fn`` inside a fresh workspace and return its result."""
    async with scratch_space(root) as workspace:
        return await fn(workspace)
