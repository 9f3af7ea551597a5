from framescribe.base.media import MediaKind, VideoSource
from framescribe.base.segments import Window
from framescribe.base.transcript import (
    AnalysisResult,
    AnalysisStatus,
    Transcript,
    TranscriptSegment,
    format_timestamp,
)


def test_format_timestamp():
    assert format_timestamp(0) == "00:00:00"
    assert format_timestamp(75) == "00:01:15"
    assert format_timestamp(3725) == "01:02:05"


def test_segment_render():
    segment = TranscriptSegment(
        window=Window(index=1, start_second=60, length_seconds=60),
        visual_summary="a dog on a beach",
        audio_transcription="hello there",
    )

    assert segment.render() == "[00:01:00 - 00:02:00]\nVisual: a dog on a beach\nAudio: hello there"
    assert not segment.is_degraded


def test_transcript_orders_by_window_index():
    windows = [Window(index=i, start_second=i * 10, length_seconds=10) for i in range(3)]
    segments = [TranscriptSegment(window=w, visual_summary=f"v{w.index}", audio_transcription="a") for w in windows]

    transcript = Transcript(segments=[segments[2], segments[0], segments[1]])

    assert [s.window.index for s in transcript.segments] == [0, 1, 2]
    rendered = transcript.render(delimiter="|")
    assert rendered.split("|")[0].startswith("[00:00:00 - 00:00:10]")
    assert rendered.count("|") == 2


def test_empty_transcript_renders_empty_text():
    assert Transcript(segments=[]).render() == ""


def test_degraded_segments():
    window = Window(index=0, start_second=0, length_seconds=10)
    transcript = Transcript(
        segments=[
            TranscriptSegment(window=window, visual_summary="caption", audio_transcription=""),
        ]
    )

    assert len(transcript.degraded_segments) == 1


def test_failed_result_has_empty_text():
    window = Window(index=0, start_second=0, length_seconds=10)
    error = RuntimeError("boom")

    result = AnalysisResult.failed(window, MediaKind.AUDIO, error)

    assert result.status is AnalysisStatus.FAILED
    assert result.text == ""
    assert result.error is error
    assert not result.ok


def test_video_source_safe_filename():
    assert VideoSource(data=b"", filename="../../etc/my video (1).mp4").safe_filename == "my_video_1_.mp4"
    assert VideoSource(data=b"", filename="...").safe_filename == "source.mp4"


def test_video_source_from_path(tmp_path):
    path = tmp_path / "clip.mov"
    path.write_bytes(b"abc")

    source = VideoSource.from_path(path)

    assert source.data == b"abc"
    assert source.filename == "clip.mov"
