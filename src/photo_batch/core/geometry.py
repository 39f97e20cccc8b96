"""Output dimension math for the resize step."""

import math
from typing import Tuple

from .models import ResizeSpec


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero, never below 1."""
    return max(1, int(math.floor(value + 0.5)))


def resolve_dimensions(
    source_width: int, source_height: int, resize: ResizeSpec
) -> Tuple[int, int]:
    """
    Compute output pixel dimensions for one image.

    With aspect ratio preserved, the locked axis follows the source's own
    orientation rather than a fit-within-box rule: a landscape source keeps
    ``target_width`` and derives its height, anything else (portrait or
    square) keeps ``target_height`` and derives its width.

    Args:
        source_width: Natural width of the decoded image
        source_height: Natural height of the decoded image
        resize: Resize part of the transform spec

    Returns:
        Tuple of (width, height), both >= 1

    Raises:
        ValueError: If the source dimensions are not positive
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            f"Source dimensions must be positive, got {source_width}x{source_height}"
        )

    if not resize.enabled:
        return source_width, source_height

    if not resize.preserve_aspect_ratio:
        return resize.target_width, resize.target_height

    if source_width > source_height:
        width = resize.target_width
        height = round_half_up(resize.target_width * source_height / source_width)
    else:
        height = resize.target_height
        width = round_half_up(resize.target_height * source_width / source_height)

    return width, height
