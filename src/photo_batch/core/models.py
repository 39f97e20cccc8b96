"""Shared data models for the photo batch pipeline."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidSpecError

if TYPE_CHECKING:
    from .protocols import ByteSource


class OutputFormat(str, Enum):
    """Encodings a batch can be exported to."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def is_lossy(self) -> bool:
        """PNG is always lossless, quality only applies to the others."""
        return self is not OutputFormat.PNG


class ErrorKind(str, Enum):
    """Reason a single item of a batch failed."""

    DECODE_ERROR = "decode_error"
    ENCODE_ERROR = "encode_error"
    TRANSFORM_ERROR = "transform_error"


class RunStatus(str, Enum):
    """Lifecycle of a batch runner."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ResizeSpec(BaseModel):
    """Geometric part of a transform spec."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = False
    target_width: int = Field(default=1920, gt=0)
    target_height: int = Field(default=1080, gt=0)
    preserve_aspect_ratio: bool = True


class ToneSpec(BaseModel):
    """Tonal part of a transform spec.

    Brightness, contrast and saturation are signed percentages, blur is a
    radius in pixels.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    brightness: float = Field(default=0.0, ge=-100, le=100)
    contrast: float = Field(default=0.0, ge=-100, le=100)
    saturation: float = Field(default=0.0, ge=-100, le=100)
    blur: float = Field(default=0.0, ge=0, le=20)
    grayscale: bool = False
    sepia: bool = False

    @property
    def is_neutral(self) -> bool:
        return (
            self.brightness == 0
            and self.contrast == 0
            and self.saturation == 0
            and self.blur == 0
            and not self.grayscale
            and not self.sepia
        )


class TransformSpec(BaseModel):
    """Immutable description of what to do to every image of a batch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    resize: ResizeSpec = Field(default_factory=ResizeSpec)
    tone: ToneSpec = Field(default_factory=ToneSpec)
    output_format: OutputFormat = OutputFormat.JPEG
    quality: int = Field(default=90, ge=1, le=100)

    @field_validator("output_format", mode="before")
    @classmethod
    def _normalise_format(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, OutputFormat):
            lowered = value.strip().lower()
            return "jpeg" if lowered == "jpg" else lowered
        return value


def build_transform_spec(data: Mapping[str, Any]) -> TransformSpec:
    """Validate raw options into a TransformSpec.

    Raises:
        InvalidSpecError: if any field is missing, unknown or out of range.
    """
    try:
        return TransformSpec.model_validate(data)
    except ValidationError as exc:
        raise InvalidSpecError(f"Invalid transform spec: {exc}") from exc


def ensure_valid_spec(spec: Union[TransformSpec, Mapping[str, Any]]) -> TransformSpec:
    """Re-check a spec before a run so unvalidated copies are rejected up front."""
    if isinstance(spec, TransformSpec):
        return build_transform_spec(spec.model_dump())
    if isinstance(spec, Mapping):
        return build_transform_spec(spec)
    raise InvalidSpecError(f"Expected a TransformSpec, got {type(spec).__name__}")


@dataclass(frozen=True)
class SourceImage:
    """An image selected for a batch. Owned by the caller."""

    id: str
    display_name: str
    byte_source: "ByteSource"


class TransformSuccess(BaseModel):
    """Encoded output of one successfully transformed image."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    source_id: str
    name: str
    data: bytes = Field(repr=False)
    width: int
    height: int
    format: OutputFormat

    @property
    def ok(self) -> bool:
        return True


class TransformFailure(BaseModel):
    """Recorded failure of one image of a batch."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    source_id: str
    reason: ErrorKind
    message: str = ""

    @property
    def ok(self) -> bool:
        return False


TransformResult = Annotated[
    Union[TransformSuccess, TransformFailure], Field(discriminator="kind")
]


class BatchRunState(BaseModel):
    """Progress of the active run.

    Instances are immutable; the runner swaps in a new state after every
    step so readers only ever hold snapshots.
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    completed_count: int = 0
    current_item_name: Optional[str] = None
    results: Tuple[TransformResult, ...] = ()

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return self.completed_count / self.total


class BatchSummary(BaseModel):
    """Terminal outcome of a batch run."""

    model_config = ConfigDict(frozen=True)

    total: int
    results: Tuple[TransformResult, ...] = ()
    was_cancelled: bool = False

    @property
    def succeeded(self) -> Tuple[TransformSuccess, ...]:
        return tuple(r for r in self.results if isinstance(r, TransformSuccess))

    @property
    def failed(self) -> Tuple[TransformFailure, ...]:
        return tuple(r for r in self.results if isinstance(r, TransformFailure))

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def describe(self) -> str:
        """Human readable one-liner, e.g. "3 of 4 succeeded"."""
        text = f"{self.succeeded_count} of {self.total} succeeded"
        if self.failed_count:
            text += f", {self.failed_count} failed"
        if self.was_cancelled:
            text += " (cancelled)"
        return text


class ArchiveBlob(BaseModel):
    """A ZIP container holding every successful output of a run."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    entry_names: Tuple[str, ...] = ()

    @property
    def entry_count(self) -> int:
        return len(self.entry_names)

    @property
    def is_empty(self) -> bool:
        return not self.entry_names

    def read_entries(self) -> Dict[str, bytes]:
        """Read the archive back into an ordered name -> bytes mapping."""
        with zipfile.ZipFile(io.BytesIO(self.data)) as handle:
            return {name: handle.read(name) for name in handle.namelist()}
