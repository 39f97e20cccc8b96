"""Main module for the photo batch CLI."""

import sys
import argparse
from typing import List, Optional

from . import __version__
from .core.presets import FILTER_PRESETS
from .process_images import add_process_arguments
from .process_images import main as process_images_main


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-batch",
        description="Photo Batch - resize, tone and re-encode photos into one archive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Re-encode a folder as JPEG, archive written to ./out
  photo-batch process --input-dir photos --output-dir out

  # Resize to 640px, vintage look, WebP at quality 80, from and to S3
  photo-batch process --source-bucket my-photos --source-prefix trip \\
                      --dest-bucket my-exports --resize 640 640 \\
                      --preset vintage --format webp --quality 80

  # List tone presets
  photo-batch presets
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process", help="Transform a batch of images into a ZIP archive"
    )
    add_process_arguments(process_parser)

    subparsers.add_parser("presets", help="List the available tone presets")
    subparsers.add_parser("version", help="Show version information")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the unified command-line interface of Photo Batch.

    The "process" command is validated here and then handed, unchanged, to
    the `main` function of `process_images.py`, which stays usable as a
    standalone script.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "process":
        sys.exit(process_images_main(argv[1:]))

    elif args.command == "presets":
        for name, tone in FILTER_PRESETS.items():
            settings = ", ".join(
                f"{key}={value}" for key, value in tone.model_dump().items() if value
            )
            print(f"{name:<10} {settings or '(no adjustment)'}")
        sys.exit(0)

    elif args.command == "version":
        print("Photo Batch CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
