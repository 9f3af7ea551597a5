import json
import subprocess
from unittest.mock import patch

import pytest

from framescribe.base.exceptions import ProbeError, SourceUnreadableError
from framescribe.base.probe import VideoProbe


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"not really a video")
    return path


def _completed(stdout: str) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["ffprobe"], returncode=0, stdout=stdout, stderr="")


@patch("framescribe.base.probe.subprocess.run")
def test_duration_rounds_up(mock_run, video_file):
    mock_run.return_value = _completed(json.dumps({"format": {"duration": "24.2"}}))

    assert VideoProbe().duration(video_file) == 25
    cmd = mock_run.call_args.args[0]
    assert cmd[0] == "ffprobe"
    assert cmd[-1] == str(video_file)


@patch("framescribe.base.probe.subprocess.run")
def test_zero_duration_is_valid(mock_run, video_file):
    mock_run.return_value = _completed(json.dumps({"format": {"duration": "0.000000"}}))

    assert VideoProbe().duration(video_file) == 0


def test_missing_file_raises(tmp_path):
    with pytest.raises(ProbeError):
        VideoProbe().duration(tmp_path / "missing.mp4")


@patch("framescribe.base.probe.subprocess.run")
def test_undecodable_container_raises(mock_run, video_file):
    mock_run.side_effect = subprocess.CalledProcessError(
        returncode=1, cmd=["ffprobe"], stderr="Invalid data found when processing input"
    )

    with pytest.raises(ProbeError, match="Invalid data"):
        VideoProbe().duration(video_file)


@patch("framescribe.base.probe.subprocess.run")
def test_missing_duration_field_raises(mock_run, video_file):
    mock_run.return_value = _completed(json.dumps({"format": {}}))

    with pytest.raises(ProbeError):
        VideoProbe().duration(video_file)


@patch("framescribe.base.probe.subprocess.run")
def test_unparseable_duration_raises(mock_run, video_file):
    mock_run.return_value = _completed(json.dumps({"format": {"duration": "N/A"}}))

    with pytest.raises(ProbeError):
        VideoProbe().duration(video_file)


@patch("framescribe.base.probe.subprocess.run")
def test_garbage_output_raises(mock_run, video_file):
    mock_run.return_value = _completed("not json")

    with pytest.raises(ProbeError):
        VideoProbe().duration(video_file)


def test_probe_error_is_fatal_source_error():
    assert issubclass(ProbeError, SourceUnreadableError)
