"""Error handling decorators and the batch failure ledger."""

import functools
import logging
import time
from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import PhotoBatchError, S3Error
from .models import TransformFailure

RETRYABLE_S3_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
)


def with_error_handling(func):
    """
    A decorator to wrap functions with standardized error handling.

    Pipeline errors pass through untouched; boto errors become S3Error,
    chained to the original. Anything else propagates as it is.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + "." + func.__name__)
        try:
            return func(*args, **kwargs)
        except PhotoBatchError:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise S3Error(f"S3 operation failed in {func.__name__}: {e}") from e
    return wrapper


def _is_retryable(error: S3Error) -> bool:
    cause = error.__cause__
    if isinstance(cause, ClientError):
        code = cause.response.get("Error", {}).get("Code")
        return code in RETRYABLE_S3_ERROR_CODES
    return False


def retry_s3_operation(max_attempts=3, initial_delay=1.0, backoff_factor=2.0):
    """
    Decorator to retry throttled S3 operations with exponential backoff.

    Only S3Error chained to a retryable ClientError code is retried, every
    other error is raised on the first attempt.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + "." + func.__name__)
            delay = initial_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except S3Error as e:
                    if not _is_retryable(e):
                        logger.error(f"S3 operation '{func.__name__}' failed with non-retryable error: {e}")
                        raise
                    if attempt >= max_attempts:
                        logger.error(
                            f"S3 operation '{func.__name__}' failed after {max_attempts} attempts. Error: {e}"
                        )
                        raise
                    logger.info(
                        f"S3 operation '{func.__name__}' throttled. Attempt {attempt}/{max_attempts}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
            raise S3Error(f"S3 operation '{func.__name__}' failed after {max_attempts} attempts")
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Context manager that collects per-item failures of a run and logs a
    summary when the run ends.
    """
    def __init__(self, operation_name="Batch transform"):
        self.operation_name = operation_name
        self.failures: List[TransformFailure] = []
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        elif self.failures:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.failures)} failed item(s)."
            )
            for i, failure in enumerate(self.failures):
                self.logger.error(
                    f"  Failure {i + 1}/{len(self.failures)} for item '{failure.source_id}': "
                    f"{failure.reason.value}: {failure.message}"
                )
        else:
            self.logger.info(f"{self.operation_name} completed without failures.")
        return False

    def add_failure(self, failure: TransformFailure) -> None:
        """Record a failed item from inside the 'with' block."""
        self.failures.append(failure)
        self.logger.debug(
            f"Failure added for item '{failure.source_id}' in {self.operation_name}: {failure.message}"
        )
