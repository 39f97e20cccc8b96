"""Unit tests for tone presets and job configuration."""

import json

import pytest

from photo_batch.core.config import (
    JobConfig,
    apply_overrides,
    build_job_config,
    load_transform_spec,
)
from photo_batch.core.exceptions import ConfigurationError, InvalidSpecError
from photo_batch.core.models import OutputFormat, ToneSpec, TransformSpec
from photo_batch.core.presets import FILTER_PRESETS, get_preset, preset_names


class TestPresets:
    """Tests for the named tone presets."""

    def test_preset_names(self):
        assert preset_names() == ["original", "bright", "vintage", "b&w", "sepia", "soft"]

    def test_original_is_neutral(self):
        assert get_preset("original").is_neutral

    @pytest.mark.parametrize("name", ["Vintage", "  vintage ", "VINTAGE"])
    def test_lookup_ignores_case_and_spaces(self, name):
        assert get_preset(name) == FILTER_PRESETS["vintage"]

    def test_vintage_values(self):
        assert get_preset("vintage") == ToneSpec(
            brightness=10, contrast=-10, saturation=-20, sepia=True
        )

    def test_bw_is_grayscale(self):
        assert get_preset("b&w").grayscale

    def test_unknown_preset(self):
        with pytest.raises(InvalidSpecError, match="Unknown preset 'neon'"):
            get_preset("neon")


class TestJobConfig:
    """Tests for JobConfig validation."""

    def test_local_to_local(self, tmp_path):
        config = build_job_config(input_dir=tmp_path, output_dir=tmp_path / "out")

        assert not config.reads_from_s3
        assert not config.writes_to_s3
        assert config.spec == TransformSpec()

    def test_s3_to_s3(self):
        config = build_job_config(source_bucket="src", dest_bucket="dst", dest_prefix="p")

        assert config.reads_from_s3
        assert config.writes_to_s3

    @pytest.mark.parametrize(
        "options",
        [
            {"output_dir": "out"},
            {"input_dir": "in", "source_bucket": "b", "output_dir": "out"},
            {"input_dir": "in"},
            {"input_dir": "in", "output_dir": "out", "dest_bucket": "b"},
            {"input_dir": "in", "output_dir": "out", "archive_name": "  "},
        ],
    )
    def test_invalid_endpoints(self, options):
        with pytest.raises(ConfigurationError):
            build_job_config(**options)

    def test_config_is_pydantic_model(self, tmp_path):
        config = JobConfig(input_dir=tmp_path, output_dir=tmp_path, archive_name="x.zip")

        assert config.archive_name == "x.zip"


class TestLoadTransformSpec:
    """Tests for load_transform_spec."""

    def test_loads_json(self, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text(
            json.dumps(
                {
                    "resize": {"enabled": True, "target_width": 640, "target_height": 480},
                    "tone": {"brightness": 15},
                    "output_format": "jpg",
                    "quality": 80,
                }
            )
        )

        spec = load_transform_spec(path)

        assert spec.resize.enabled
        assert spec.tone.brightness == 15
        assert spec.output_format is OutputFormat.JPEG
        assert spec.quality == 80

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read spec file"):
            load_transform_spec(tmp_path / "missing.json")

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text('{"tone": {"blur": 50}}')

        with pytest.raises(InvalidSpecError):
            load_transform_spec(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text("{not json")

        with pytest.raises(InvalidSpecError):
            load_transform_spec(path)


class TestApplyOverrides:
    """Tests for apply_overrides."""

    def test_nested_sections_merge(self):
        base = TransformSpec.model_validate({"tone": {"brightness": 10, "sepia": True}})

        result = apply_overrides(base, {"tone": {"contrast": 20}})

        assert result.tone == ToneSpec(brightness=10, contrast=20, sepia=True)
        assert base.tone.contrast == 0

    def test_top_level_values_replace(self):
        result = apply_overrides(TransformSpec(), {"output_format": "webp", "quality": 70})

        assert result.output_format is OutputFormat.WEBP
        assert result.quality == 70

    def test_no_overrides(self):
        assert apply_overrides(TransformSpec(), {}) == TransformSpec()

    def test_invalid_override(self):
        with pytest.raises(InvalidSpecError):
            apply_overrides(TransformSpec(), {"tone": {"brightness": 101}})
