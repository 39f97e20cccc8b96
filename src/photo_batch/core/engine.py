"""Single-image transform: decode, resize, tone, encode."""

import io
from typing import Optional, Sequence, Tuple

from PIL import Image

from .exceptions import DecodeError, EncodeError
from .geometry import resolve_dimensions
from .models import (
    ErrorKind,
    OutputFormat,
    SourceImage,
    TransformFailure,
    TransformResult,
    TransformSpec,
    TransformSuccess,
)
from .observability import LogContext, StructuredLogger
from .protocols import LoggerProtocol
from .tone import ToneOp, apply_tone_pipeline, compose_tone_pipeline


def read_source_bytes(source: SourceImage) -> bytes:
    """Fetch the encoded bytes of a source, mapping any failure to DecodeError."""
    try:
        data = source.byte_source.read()
    except Exception as exc:
        raise DecodeError(f"Failed to load image {source.display_name}: {exc}") from exc
    if not data:
        raise DecodeError(f"Failed to load image {source.display_name}: source is empty")
    return data


def decode_image(data: bytes) -> Image.Image:
    """
    Decode bytes into a fully loaded Pillow image.

    The image keeps its natural orientation; EXIF rotation is not applied.
    The caller owns the returned image and must close it.

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    try:
        image = Image.open(io.BytesIO(data))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Unreadable image data: {exc}") from exc

    try:
        image.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        image.close()
        raise DecodeError(f"Corrupt image data: {exc}") from exc
    return image


def render_surface(
    decoded: Image.Image,
    size: Tuple[int, int],
    ops: Sequence[ToneOp],
    resample: int = Image.Resampling.LANCZOS,
) -> Image.Image:
    """
    Resample a decoded image onto an output surface and tone it.

    Tone ops run on the resampled surface, in output pixel space, the way a
    canvas filter set before a single draw call would. The decoded image is
    left open for its owner.
    """
    working = decoded
    if decoded.mode not in ("RGB", "RGBA"):
        has_alpha = "A" in decoded.getbands() or "transparency" in decoded.info
        working = decoded.convert("RGBA" if has_alpha else "RGB")

    try:
        if working.size == size:
            surface = working.copy()
        else:
            surface = working.resize(size, resample)
    finally:
        if working is not decoded:
            working.close()

    try:
        toned = apply_tone_pipeline(surface, ops)
    except BaseException:
        surface.close()
        raise
    if toned is not surface:
        surface.close()
    return toned


def encode_surface(surface: Image.Image, output_format: OutputFormat, quality: int) -> bytes:
    """
    Encode a surface. Quality reaches the encoder only for lossy formats.

    Raises:
        EncodeError: If the surface is empty or the encoder fails
    """
    if surface.width == 0 or surface.height == 0:
        raise EncodeError("Cannot encode an empty surface")

    image = surface
    params = {}
    if output_format is OutputFormat.JPEG:
        if image.mode != "RGB":
            image = image.convert("RGB")
        params["quality"] = quality
    elif output_format.is_lossy:
        params["quality"] = quality

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=output_format.pil_format, **params)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode {output_format.value}: {exc}") from exc
    finally:
        if image is not surface:
            image.close()

    data = buffer.getvalue()
    if not data:
        raise EncodeError(f"Encoder produced no {output_format.value} data")
    return data


def output_name(display_name: str, output_format: OutputFormat) -> str:
    return f"{display_name}.{output_format.extension}"


class ImageTransformEngine:
    """Turns one source image into one encoded output.

    Owns the per-image failure boundary: ``transform`` never raises for a
    bad image, it returns a TransformFailure instead.
    """

    def __init__(
        self,
        logger: Optional[LoggerProtocol] = None,
        resample: int = Image.Resampling.LANCZOS,
    ):
        self._logger = logger or StructuredLogger("photo-batch.engine")
        self._resample = resample

    def transform(
        self,
        source: SourceImage,
        spec: TransformSpec,
        context: Optional[LogContext] = None,
    ) -> TransformResult:
        """Transform a single image according to ``spec``."""
        log_context = (context or LogContext(component="engine")).with_metadata(
            source_id=source.id
        )
        surface: Optional[Image.Image] = None

        try:
            data = read_source_bytes(source)
            with decode_image(data) as decoded:
                width, height = resolve_dimensions(decoded.width, decoded.height, spec.resize)
                self._logger.debug(
                    f"Decoded {decoded.width}x{decoded.height}, rendering {width}x{height}",
                    log_context,
                )
                surface = render_surface(
                    decoded,
                    (width, height),
                    compose_tone_pipeline(spec.tone),
                    self._resample,
                )
            encoded = encode_surface(surface, spec.output_format, spec.quality)

        except DecodeError as e:
            self._logger.error(f"Decode failed: {e}", log_context)
            return TransformFailure(source_id=source.id, reason=ErrorKind.DECODE_ERROR, message=str(e))
        except EncodeError as e:
            self._logger.error(f"Encode failed: {e}", log_context)
            return TransformFailure(source_id=source.id, reason=ErrorKind.ENCODE_ERROR, message=str(e))
        except Exception as e:
            self._logger.error(f"Transform failed: {e}", log_context)
            return TransformFailure(source_id=source.id, reason=ErrorKind.TRANSFORM_ERROR, message=str(e))
        finally:
            if surface is not None:
                surface.close()

        return TransformSuccess(
            source_id=source.id,
            name=output_name(source.display_name, spec.output_format),
            data=encoded,
            width=width,
            height=height,
            format=spec.output_format,
        )
