#!/usr/bin/env python3
"""
Batch Photo Transform CLI

Discovers images (local folder or S3) → Resizes / tones / re-encodes each one
→ Packs the results into a single ZIP archive delivered to a folder or S3.
"""

import sys
import argparse
from typing import Any, Dict, List, Optional

from .core import (
    BatchOutcome,
    ConfigurationError,
    InvalidSpecError,
    LoggingReporter,
    OutputFormat,
    TransformSpec,
    get_logger,
    get_preset,
)
from .core.config import JobConfig, apply_overrides, build_job_config, load_transform_spec
from .core.delivery import LocalArchiveSink, S3ArchiveSink
from .core.factories import BatchPipelineFactory, LoggerFactory, S3ClientFactory
from .core.logging_config import PACKAGE_LOGGER, debug_level_name, set_debug_logging, setup_logger
from .core.presets import preset_names
from .core.protocols import ArchiveSink, JobReporter, S3ClientProtocol
from .core.services import BatchTransformService
from .core.sources import S3ImageDiscoveryService, discover_local_images

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ALL_FAILED = 2
EXIT_INTERRUPTED = 130

CLI_LOGGER = f"{PACKAGE_LOGGER}.cli"


def add_process_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the batch job arguments on ``parser``."""
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input-dir", help="Local folder with source images")
    source.add_argument("--source-bucket", help="Source S3 bucket")
    parser.add_argument("--source-prefix", default="", help="Source S3 prefix")
    parser.add_argument(
        "--recursive", action="store_true", help="Scan subfolders of --input-dir"
    )

    dest = parser.add_mutually_exclusive_group(required=True)
    dest.add_argument("--output-dir", help="Local folder the archive is written to")
    dest.add_argument("--dest-bucket", help="Destination S3 bucket for the archive")
    parser.add_argument("--dest-prefix", default="", help="Destination S3 prefix")
    parser.add_argument(
        "--archive-name", default=None, help="Archive file name (default: batch-processed-<ms>.zip)"
    )

    parser.add_argument("--spec-file", default=None, help="JSON transform spec to start from")
    parser.add_argument(
        "--preset",
        type=str.lower,
        default=None,
        choices=preset_names(),
        help="Tone preset applied before individual tone flags",
    )
    parser.add_argument(
        "--resize",
        nargs=2,
        type=int,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Enable resizing to the given target box",
    )
    parser.add_argument(
        "--stretch",
        action="store_true",
        help="Resize to exactly WIDTH x HEIGHT instead of keeping the aspect ratio",
    )
    parser.add_argument("--brightness", type=float, default=None, help="Brightness, -100..100")
    parser.add_argument("--contrast", type=float, default=None, help="Contrast, -100..100")
    parser.add_argument("--saturation", type=float, default=None, help="Saturation, -100..100")
    parser.add_argument("--blur", type=float, default=None, help="Blur radius in px, 0..20")
    parser.add_argument("--grayscale", action="store_true", help="Convert to grayscale")
    parser.add_argument("--sepia", action="store_true", help="Apply a sepia tone")
    parser.add_argument(
        "--format",
        dest="output_format",
        type=str.lower,
        default=None,
        choices=[f.value for f in OutputFormat],
        help="Output format (default: jpeg)",
    )
    parser.add_argument("--quality", type=int, default=None, help="Quality 1..100 for jpeg/webp")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the batch transform job.

    Returns:
        An `argparse.Namespace` object containing the parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Resize, tone and re-encode a batch of photos into one ZIP archive"
    )
    add_process_arguments(parser)
    return parser.parse_args(argv)


def spec_from_args(args: argparse.Namespace) -> TransformSpec:
    """
    Build the transform spec: spec file, then preset, then individual flags.

    Raises:
        InvalidSpecError: If the combined options are out of range
    """
    base = load_transform_spec(args.spec_file) if args.spec_file else TransformSpec()
    overrides: Dict[str, Any] = {}

    tone: Dict[str, Any] = {}
    if args.preset:
        tone.update(get_preset(args.preset).model_dump())
    for name in ("brightness", "contrast", "saturation", "blur"):
        value = getattr(args, name)
        if value is not None:
            tone[name] = value
    if args.grayscale:
        tone["grayscale"] = True
    if args.sepia:
        tone["sepia"] = True
    if tone:
        overrides["tone"] = tone

    resize: Dict[str, Any] = {}
    if args.resize:
        width, height = args.resize
        resize.update(enabled=True, target_width=width, target_height=height)
    if args.stretch:
        resize["preserve_aspect_ratio"] = False
    if resize:
        overrides["resize"] = resize

    if args.output_format:
        overrides["output_format"] = args.output_format
    if args.quality is not None:
        overrides["quality"] = args.quality

    return apply_overrides(base, overrides)


def config_from_args(args: argparse.Namespace) -> JobConfig:
    """Assemble and validate the job configuration."""
    return build_job_config(
        input_dir=args.input_dir,
        recursive=args.recursive,
        source_bucket=args.source_bucket,
        source_prefix=args.source_prefix,
        output_dir=args.output_dir,
        dest_bucket=args.dest_bucket,
        dest_prefix=args.dest_prefix,
        archive_name=args.archive_name,
        spec=spec_from_args(args),
        debug=args.debug,
    )


def log_configuration(config: JobConfig) -> None:
    """Log the job configuration."""
    logger = setup_logger(CLI_LOGGER, debug_level_name(config.debug))
    spec = config.spec
    source = (
        f"s3://{config.source_bucket}/{config.source_prefix}"
        if config.reads_from_s3
        else str(config.input_dir)
    )
    destination = (
        f"s3://{config.dest_bucket}/{config.dest_prefix}"
        if config.writes_to_s3
        else str(config.output_dir)
    )

    logger.info("=" * 80)
    logger.info("BATCH PHOTO TRANSFORM")
    logger.info("=" * 80)
    logger.info(f"  Source:       {source}")
    logger.info(f"  Destination:  {destination}")
    if spec.resize.enabled:
        mode = "keep aspect" if spec.resize.preserve_aspect_ratio else "stretch"
        logger.info(
            f"  Resize:       {spec.resize.target_width}x{spec.resize.target_height} ({mode})"
        )
    else:
        logger.info("  Resize:       off")
    logger.info(f"  Tone:         {spec.tone.model_dump()}")
    quality = f" q={spec.quality}" if spec.output_format.is_lossy else ""
    logger.info(f"  Output:       {spec.output_format.value}{quality}")
    logger.info("=" * 80)


def run_batch(
    config: JobConfig,
    s3_client: Optional[S3ClientProtocol] = None,
    service: Optional[BatchTransformService] = None,
    reporter: Optional[JobReporter] = None,
) -> BatchOutcome:
    """
    Discover sources, run the batch and deliver the archive.

    Every component built here logs through one pipeline logger, at DEBUG
    when the job asks for it.
    """
    logger = setup_logger(CLI_LOGGER, debug_level_name(config.debug))
    pipeline_logger = LoggerFactory.create_logger(PACKAGE_LOGGER, debug_level_name(config.debug))

    if (config.reads_from_s3 or config.writes_to_s3) and s3_client is None:
        s3_client = S3ClientFactory.create_s3_client()

    if config.reads_from_s3:
        sources = S3ImageDiscoveryService(s3_client, pipeline_logger).discover(
            config.source_bucket, config.source_prefix
        )
    else:
        sources = discover_local_images(config.input_dir, recursive=config.recursive)

    if not sources:
        logger.warning("No images found to process.")

    sink: ArchiveSink
    if config.writes_to_s3:
        sink = S3ArchiveSink(s3_client, config.dest_bucket, config.dest_prefix, pipeline_logger)
    else:
        sink = LocalArchiveSink(config.output_dir, pipeline_logger)

    service = service or BatchPipelineFactory.create_service(logger=pipeline_logger)
    return service.process(
        sources,
        config.spec,
        sink,
        reporter=reporter or LoggingReporter(pipeline_logger),
        archive_name=config.archive_name,
    )


def exit_code_for(outcome: BatchOutcome) -> int:
    """0 when anything succeeded (or there was nothing to do), 2 when every item failed."""
    summary = outcome.summary
    if summary.total and not summary.succeeded_count:
        return EXIT_ALL_FAILED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the batch transform job.

    Parses arguments, validates the transform spec and job configuration, runs the
    batch and delivers the archive. Fatal configuration problems return 1,
    a batch where every item failed returns 2.
    """
    logger = get_logger(CLI_LOGGER)
    try:
        args = parse_args(argv)
        config = config_from_args(args)

        if config.debug:
            set_debug_logging(logger)

        log_configuration(config)
        outcome = run_batch(config)

        logger.info(f"Finished: {outcome.summary.describe()}")
        if outcome.location:
            logger.info(f"Archive: {outcome.location}")
        return exit_code_for(outcome)

    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user.")
        return EXIT_INTERRUPTED
    except (InvalidSpecError, ConfigurationError) as e:
        logger.error(f"Invalid job: {e}")
        return EXIT_FATAL
    except Exception as e:
        logger.error(f"Processing failed: {e}", exc_info=True)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
