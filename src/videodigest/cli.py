#!/usr/bin/env python3
"""
videodigest CLI - Turn a video file into searchable text.

Usage:
    videodigest talk.mp4
    videodigest talk.mp4 --json
    videodigest talk.mp4 --quiet
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from videodigest.exceptions import VideodigestError, VideoProcessingError
from videodigest.operations.processor import create_video_processor
from videodigest.tools.progress import create_console_reporter


async def _process(args) -> int:
    path: Path = args.file
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"ERROR: Could not read {path}: {e}")
        return 1

    processor = create_video_processor()
    if not processor.vision.is_available():
        print("ERROR: OpenAI provider unavailable (is OPENAI_API_KEY set?)")
        return 1
    reporter = create_console_reporter(verbose=not args.quiet)

    try:
        result = await processor.process_video(data, path.name, on_progress=reporter)
    except VideoProcessingError as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result.combined_content)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Turn a video file into searchable text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s talk.mp4
    %(prog)s talk.mp4 --json
    %(prog)s talk.mp4 --quiet
        """,
    )
    parser.add_argument("file", type=Path, help="Video file to process")
    parser.add_argument(
        "--json", action="store_true",
        help="Print the full result as JSON instead of the text document",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Suppress progress output and informational logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(_process(args))
    except VideodigestError as e:
        # Configuration and provider setup errors surface before processing
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
