"""Factory classes for creating configured service instances."""

from typing import Any, Optional

import boto3

from .engine import ImageTransformEngine
from .observability import MetricsCollector, StructuredLogger
from .protocols import LoggerProtocol, S3ClientProtocol
from .runner import BatchRunner
from .services import BatchTransformService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: Optional[str] = None) -> LoggerProtocol:
        """Create a context-aware logger configured from the environment."""
        return StructuredLogger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class BatchPipelineFactory:
    """Factory for creating the complete batch pipeline."""

    @staticmethod
    def create_service(
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> BatchTransformService:
        """Create a service with its own runner and engine."""
        if logger is None:
            logger = LoggerFactory.create_logger("photo-batch")

        engine = ImageTransformEngine(logger=logger)
        runner = BatchRunner(engine=engine, logger=logger, metrics_collector=metrics_collector)
        return BatchTransformService(runner, logger)
