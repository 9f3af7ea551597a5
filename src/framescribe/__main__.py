"""Command line entry point: ``framescribe VIDEO``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from framescribe.ai.config import load_config
from framescribe.ai.exceptions import ConfigError
from framescribe.ai.pipeline import DEFAULT_USER, transcribe_video
from framescribe.base.media import VideoSource
from framescribe.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Caption and transcribe a video window by window.")
    parser.add_argument("video", type=Path, help="Video file to transcribe")
    parser.add_argument("--interval", type=int, default=None, help="Window length in seconds")
    parser.add_argument("--user", default=DEFAULT_USER, help="User identifier sent to the remote service")
    parser.add_argument("--output", type=Path, default=None, help="Write the transcript here instead of stdout")
    parser.add_argument("--log-level", default=None, help="debug, info, warning or error")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.interval is not None and args.interval <= 0:
        logger.error("--interval must be positive")
        return 2
    if not args.video.is_file():
        logger.error("Video file not found: %s", args.video)
        return 1

    try:
        analyzer_config, pipeline_config = load_config()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    outcome = asyncio.run(
        transcribe_video(
            VideoSource.from_path(args.video),
            interval_seconds=args.interval,
            user=args.user,
            analyzer_config=analyzer_config,
            pipeline_config=pipeline_config,
        )
    )
    if not outcome.success:
        logger.error("Transcription failed: %s", outcome.error)
        return 1

    if args.output is not None:
        args.output.write_text(outcome.text, encoding="utf-8")
        logger.info("Transcript written to %s", args.output)
    else:
        print(outcome.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
