"""Console entry point for the thumbnail extractor."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

import yaml
from loguru import logger
from pydantic import ValidationError

from . import __version__
from .batch import BatchSummary, build_driver
from .config import AppConfig, load_config
from .table import TableError, read_headers

USAGE_NOTES = """\
The CSV file needs a header row labeling these columns (in any order):
  Film ID                 = film id
  Title card timecode     = timecode for title card thumbnail
  Image 1 timecode        = timecode for image thumbnail 1
  Image 2 timecode        = timecode for image thumbnail 2
  Image 3 timecode        = timecode for image thumbnail 3
  Done                    = optional, rows marked "x" are skipped
  Published               = optional, TRUE/FALSE

Timecodes should be formatted as h:mm:ss or hh:mm:ss.
"""


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stdout, level=level, format="{time:HH:mm:ss} | {level: <7} | {message}")


def _load_config(path: Path) -> AppConfig:
    if not path.exists():
        logger.debug("Using default configuration; no {} found", path)
    return load_config(path)


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    data = config.model_dump()
    if args.output_path is not None:
        data["paths"]["output_dir"] = args.output_path
    if args.movie_root is not None:
        data["paths"]["movie_root"] = args.movie_root
    for key in ("n_frames", "offset", "offset_direction", "fps", "timeout", "image_as_default"):
        value = getattr(args, key)
        if value is not None:
            data["extract"][key] = value
    if args.dry_run:
        data["extract"]["dry_run"] = True
    if args.shard_scheme is not None:
        data["locator"]["shard_scheme"] = args.shard_scheme
    if args.shard_digits is not None:
        data["locator"]["shard_digits"] = args.shard_digits
    return AppConfig.model_validate(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thumbnailer",
        description="Extract thumbnails from source mp4s based on film ID & timecode",
        epilog=USAGE_NOTES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("csv", nargs="?", help="CSV file containing film ids and timecodes to extract")
    parser.add_argument("--csv-file", dest="csv_file", help="Same as the positional CSV argument")
    parser.add_argument("--film-id", type=int, default=0, help="Film ID to extract (if csv not specified)")
    parser.add_argument("--timecode", help="Timecode to extract (if csv not specified)")
    parser.add_argument("--titlecard", action="store_true", help="Treat a single timecode as the title card")
    parser.add_argument(
        "--image-as-default",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Copy the image 1 jpg to <id %%06d>.jpg as the default image (csv only)",
    )
    parser.add_argument("--n-frames", type=int, help="Number of frames to extract at each timecode")
    parser.add_argument("--offset", type=float, help="Number of seconds before each timecode to begin extracting")
    parser.add_argument("--offset-direction", choices=["before", "after"], help="Apply the offset before or after the timecode")
    parser.add_argument("--fps", type=int, help="Frame rate for seconds->frames conversion")
    parser.add_argument("--output-path", help="Root folder for thumbnail output")
    parser.add_argument("--movie-root", help="Root of the sharded source movie tree")
    parser.add_argument("--shard-scheme", choices=["hundreds", "leading_digits"], help="Movie tree sharding layout")
    parser.add_argument("--shard-digits", type=int, help="Leading digits used by the leading_digits layout")
    parser.add_argument("--timeout", type=float, help="Seconds before a single ffmpeg run is abandoned")
    parser.add_argument("--dry-run", action="store_true", help="Dry run (don't create thumbnails)")
    parser.add_argument("--config", default="thumbnailer.yaml", help="Path to YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = _apply_overrides(_load_config(Path(args.config)), args)
    except ValidationError as exc:
        parser.error(f"Invalid configuration:\n{exc}")
    except yaml.YAMLError as exc:
        parser.error(f"Invalid configuration file {args.config}:\n{exc}")

    csv_arg = args.csv_file or args.csv
    if csv_arg:
        csv_path = Path(csv_arg)
        if not csv_path.is_file():
            parser.error(f"Input file {csv_path} does not exist!")
        try:
            read_headers(csv_path)
        except TableError as exc:
            parser.error(str(exc))
    elif args.film_id > 0:
        if not args.timecode:
            parser.error("Must specify a timecode to extract.")
    else:
        parser.error("Must specify a csv file, or a film id and timecode.")

    driver = build_driver(config)
    if config.extract.dry_run:
        logger.info("Dry run: nothing will be written")
    summary: BatchSummary
    if csv_arg:
        summary = driver.run_table(csv_path)
    else:
        summary = driver.run_single(args.film_id, args.timecode, args.titlecard)
    if summary.failed:
        logger.warning("{} extraction(s) failed", summary.failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
