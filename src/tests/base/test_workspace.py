import asyncio

import pytest

from framescribe.base.exceptions import WorkspaceError
from framescribe.base.workspace import scratch_space, with_scratch_space


def test_workspace_removed_after_success(tmp_path):
    async def scenario():
        async with scratch_space(tmp_path) as workspace:
            workspace.reset_output_dirs()
            (workspace.audio_dir / "audio_0000.mp3").write_bytes(b"data")
            assert workspace.frames_dir.is_dir()
            return workspace.root

    root = asyncio.run(scenario())
    assert not root.exists()


def test_workspace_removed_after_error(tmp_path):
    seen = []

    async def scenario():
        async with scratch_space(tmp_path) as workspace:
            seen.append(workspace.root)
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())
    assert not seen[0].exists()


def test_workspace_removed_after_cancellation(tmp_path):
    seen = []

    async def hold():
        async with scratch_space(tmp_path) as workspace:
            seen.append(workspace.root)
            await asyncio.sleep(10)

    async def scenario():
        task = asyncio.create_task(hold())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert not seen[0].exists()


def test_concurrent_workspaces_are_distinct(tmp_path):
    async def scenario():
        async with scratch_space(tmp_path) as first, scratch_space(tmp_path) as second:
            return first.root, second.root

    first, second = asyncio.run(scenario())
    assert first != second


def test_with_scratch_space_returns_result(tmp_path):
    async def body(workspace):
        return workspace.root

    root = asyncio.run(with_scratch_space(body, root=tmp_path))
    assert root.parent == tmp_path
    assert not root.exists()


def test_unusable_root_raises(tmp_path):
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("x")

    async def scenario():
        async with scratch_space(not_a_dir):
            pass

    with pytest.raises(WorkspaceError):
        asyncio.run(scenario())


def test_reset_output_dirs_clears_previous_files(tmp_path):
    async def scenario():
        async with scratch_space(tmp_path) as workspace:
            workspace.reset_output_dirs()
            (workspace.frames_dir / "frame-0001.jpg").write_bytes(b"old")
            workspace.reset_output_dirs()
            return list(workspace.frames_dir.iterdir())

    assert asyncio.run(scenario()) == []
