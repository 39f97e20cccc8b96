"""Job configuration and transform spec loading."""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import ConfigurationError, InvalidSpecError
from .models import TransformSpec, build_transform_spec


class JobConfig(BaseModel):
    """Configuration for one CLI batch job."""

    input_dir: Optional[Path] = None
    recursive: bool = False
    source_bucket: Optional[str] = None
    source_prefix: str = ""
    output_dir: Optional[Path] = None
    dest_bucket: Optional[str] = None
    dest_prefix: str = ""
    archive_name: Optional[str] = None
    spec: TransformSpec = Field(default_factory=TransformSpec)
    debug: bool = False

    @model_validator(mode="after")
    def _check_endpoints(self) -> "JobConfig":
        if (self.input_dir is None) == (self.source_bucket is None):
            raise ValueError("exactly one of input_dir or source_bucket must be set")
        if (self.output_dir is None) == (self.dest_bucket is None):
            raise ValueError("exactly one of output_dir or dest_bucket must be set")
        if self.archive_name is not None and not self.archive_name.strip():
            raise ValueError("archive_name must not be blank")
        return self

    @property
    def reads_from_s3(self) -> bool:
        return self.source_bucket is not None

    @property
    def writes_to_s3(self) -> bool:
        return self.dest_bucket is not None


def build_job_config(**options: Any) -> JobConfig:
    """Validate job options, raising ConfigurationError on bad input."""
    try:
        return JobConfig(**options)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid job configuration: {exc}") from exc


def load_transform_spec(path: Union[str, Path]) -> TransformSpec:
    """
    Load a transform spec from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be read
        InvalidSpecError: If the content is not a valid spec
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read spec file {path}: {exc}") from exc

    try:
        return TransformSpec.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidSpecError(f"Invalid transform spec in {path}: {exc}") from exc


def apply_overrides(base: TransformSpec, overrides: Mapping[str, Any]) -> TransformSpec:
    """Return a new spec with ``overrides`` merged in; nested sections merge key by key."""
    data = base.model_dump()
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value
    return build_transform_spec(data)
