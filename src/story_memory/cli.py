#!/usr/bin/env python3
"""
Story Memory CLI: reconcile and diff summary snapshots from the terminal.

Usage:
    story-memory merge base.json chunk1.json chunk2.json -o merged.json
    story-memory diff before.json after.json
    story-memory diff before.json after.json --json
    story-memory chunk story.txt --limit 4000
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console

from .config import Settings, load_settings
from .diff import diff_summaries, print_summary_diff
from .memory import Summary, chunk_text, reconcile_summaries

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def load_summary(path: str) -> Summary:
    """Load a Summary from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return Summary.model_validate(json.load(f))


def cmd_merge(args: argparse.Namespace, threshold: float) -> int:
    base = load_summary(args.base)
    batches = [load_summary(path) for path in args.updates]
    merged = reconcile_summaries(
        batches, base=base, threshold=threshold, show_progress=args.progress
    )

    payload = merged.model_dump_json(indent=2)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote merged summary to %s", args.output)
    else:
        print(payload)
    return EXIT_OK


def cmd_diff(args: argparse.Namespace, threshold: float) -> int:
    old = load_summary(args.old)
    new = load_summary(args.new)
    diff = diff_summaries(old, new, threshold=threshold)

    if args.json:
        print(diff.model_dump_json(indent=2))
    else:
        print_summary_diff(diff, Console(), changes_only=args.changes_only)

    if args.exit_code and diff.has_changes:
        return EXIT_DIFFERENCES
    return EXIT_OK


def cmd_chunk(args: argparse.Namespace, settings: Settings) -> int:
    text = Path(args.story).read_text(encoding="utf-8")
    limit = args.limit if args.limit is not None else settings.chunk_limit
    if limit <= 0:
        raise ValueError(f"chunk limit must be positive, got {limit}")
    chunks = chunk_text(text, limit=limit)
    logger.info("Split %s into %d chunks of at most %d", args.story, len(chunks), limit)
    print(json.dumps(chunks, indent=2, ensure_ascii=False))
    return EXIT_OK


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="story-memory", description="Reconcile and diff story summaries"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity cutoff for fuzzy matching (default from settings)",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge = subparsers.add_parser("merge", help="Reconcile snapshots into one summary")
    merge.add_argument("base", help="Accumulated summary JSON")
    merge.add_argument("updates", nargs="+", help="Extraction batches, in chunk order")
    merge.add_argument("-o", "--output", default=None, help="Write result to file")
    merge.add_argument("--progress", action="store_true", help="Show a progress bar")

    diff = subparsers.add_parser("diff", help="Show what changed between snapshots")
    diff.add_argument("old", help="Summary JSON before")
    diff.add_argument("new", help="Summary JSON after")
    diff.add_argument("--json", action="store_true", help="Print the diff as JSON")
    diff.add_argument(
        "--changes-only", action="store_true", help="Hide unchanged entries"
    )
    diff.add_argument(
        "--exit-code",
        action="store_true",
        help="Exit with status 1 when the snapshots differ",
    )

    chunk = subparsers.add_parser("chunk", help="Split a story into extraction chunks")
    chunk.add_argument("story", help="Story text file")
    chunk.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum chunk length in characters (default from settings)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(args.env_file)
    except ValidationError as e:
        logger.error("Invalid settings: %s", e)
        return EXIT_ERROR

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    threshold = (
        args.threshold if args.threshold is not None else settings.similarity_threshold
    )

    try:
        if args.command == "chunk":
            return cmd_chunk(args, settings)
        commands = {"merge": cmd_merge, "diff": cmd_diff}
        return commands[args.command](args, threshold)
    except (OSError, ValueError, ValidationError) as e:
        logger.error("%s failed: %s", args.command, e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
