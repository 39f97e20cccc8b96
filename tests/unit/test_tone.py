"""Unit tests for tone operations and the compositor."""

import pytest
from PIL import Image

from photo_batch.core.models import ToneSpec
from photo_batch.core.tone import (
    Blur,
    Brightness,
    Contrast,
    Grayscale,
    Saturation,
    Sepia,
    apply_tone_pipeline,
    compose_tone_pipeline,
)


def solid(color, mode="RGB", size=(8, 8)):
    return Image.new(mode, size, color=color)


class TestComposeTonePipeline:
    """Tests for compose_tone_pipeline."""

    def test_neutral_spec_has_no_ops(self):
        """Test that a neutral tone spec yields an empty pipeline."""
        assert compose_tone_pipeline(ToneSpec()) == ()

    def test_full_spec_has_fixed_order(self):
        """Test operations always come out in the canonical order."""
        tone = ToneSpec(
            blur=2, sepia=True, grayscale=True, saturation=-30, contrast=15, brightness=20
        )

        ops = compose_tone_pipeline(tone)

        assert [op.kind for op in ops] == [
            "brightness",
            "contrast",
            "saturation",
            "grayscale",
            "sepia",
            "blur",
        ]

    def test_percentages_become_amounts(self):
        """Test +20% brightness maps to amount 0.2 and blur passes through."""
        ops = compose_tone_pipeline(ToneSpec(brightness=20, contrast=-50, blur=3))

        assert ops == (Brightness(amount=0.2), Contrast(amount=-0.5), Blur(radius=3.0))

    def test_neutral_parameters_are_omitted(self):
        """Test only non-neutral operations are emitted."""
        ops = compose_tone_pipeline(ToneSpec(saturation=10))

        assert ops == (Saturation(amount=0.1),)

    def test_toggles_only_when_enabled(self):
        """Test grayscale and sepia appear only when switched on."""
        assert compose_tone_pipeline(ToneSpec(sepia=True)) == (Sepia(),)
        assert compose_tone_pipeline(ToneSpec(grayscale=True)) == (Grayscale(),)


class TestToneOperations:
    """Tests for the individual pixel operations."""

    @pytest.mark.parametrize(
        "op", [Brightness(amount=0), Contrast(amount=0), Saturation(amount=0), Blur(radius=0)]
    )
    def test_neutral_op_is_identity(self, op):
        """Test that neutral parameters return the input untouched."""
        image = solid((10, 120, 230))

        assert op.apply(image) is image

    def test_brightness_scales_pixels(self):
        """Test brightness +20% multiplies channel values by 1.2."""
        result = Brightness(amount=0.2).apply(solid((100, 50, 0)))

        assert result.getpixel((0, 0)) == (120, 60, 0)

    def test_brightness_minus_hundred_is_black(self):
        """Test brightness -100% gives black."""
        result = Brightness(amount=-1.0).apply(solid((100, 50, 200)))

        assert result.getpixel((0, 0)) == (0, 0, 0)

    def test_contrast_keeps_uniform_image(self):
        """Test that contrast around the mean leaves a flat image unchanged."""
        result = Contrast(amount=0.5).apply(solid((100, 100, 100)))

        assert result.getpixel((0, 0)) == (100, 100, 100)

    def test_saturation_minus_hundred_removes_colour(self):
        """Test saturation -100% yields equal channels."""
        red, green, blue = Saturation(amount=-1.0).apply(solid((200, 40, 40))).getpixel((0, 0))

        assert red == green == blue

    def test_grayscale_equalises_channels(self):
        """Test grayscale output is still RGB with equal channels."""
        result = Grayscale().apply(solid((200, 40, 40)))

        assert result.mode == "RGB"
        red, green, blue = result.getpixel((0, 0))
        assert red == green == blue

    def test_grayscale_keeps_alpha(self):
        """Test grayscale preserves the alpha channel."""
        result = Grayscale().apply(solid((200, 40, 40, 77), mode="RGBA"))

        assert result.mode == "RGBA"
        assert result.getpixel((0, 0))[3] == 77

    def test_sepia_warms_gray(self):
        """Test that sepia turns neutral gray into a warm tone."""
        red, green, blue = Sepia().apply(solid((100, 100, 100))).getpixel((0, 0))

        assert red > green > blue

    def test_sepia_keeps_alpha(self):
        """Test sepia preserves the alpha channel."""
        result = Sepia().apply(solid((100, 100, 100, 200), mode="RGBA"))

        assert result.mode == "RGBA"
        assert result.getpixel((0, 0))[3] == 200

    def test_blur_softens_edges(self):
        """Test that a Gaussian blur spreads a sharp edge."""
        image = Image.new("RGB", (20, 20), color=(0, 0, 0))
        image.paste((255, 255, 255), (10, 0, 20, 20))

        result = Blur(radius=2).apply(image)

        assert 0 < result.getpixel((9, 10))[0] < 255
        assert result.size == image.size


class TestApplyTonePipeline:
    """Tests for apply_tone_pipeline."""

    def test_empty_pipeline_returns_input(self):
        """Test that no ops returns the same image object."""
        image = solid((1, 2, 3))

        assert apply_tone_pipeline(image, ()) is image

    def test_ops_run_in_sequence(self):
        """Test brightness then grayscale equals applying them by hand."""
        image = solid((100, 50, 20))
        ops = (Brightness(amount=0.5), Grayscale())

        result = apply_tone_pipeline(image, ops)
        expected = Grayscale().apply(Brightness(amount=0.5).apply(image))

        assert result.getpixel((0, 0)) == expected.getpixel((0, 0))

    def test_input_is_not_closed(self):
        """Test the caller's image stays usable after the pipeline."""
        image = solid((100, 100, 100))

        apply_tone_pipeline(image, (Brightness(amount=0.1), Sepia()))

        assert image.getpixel((0, 0)) == (100, 100, 100)

    def test_failure_closes_intermediate_but_not_input(self, monkeypatch):
        """Test an op raising part way closes the image it was given, not the caller's."""
        closed = []
        original_close = Image.Image.close

        def recording_close(self):
            closed.append(self)
            original_close(self)

        monkeypatch.setattr(Image.Image, "close", recording_close)
        received = []

        class FailingOp:
            kind = "failing"

            def apply(self, image):
                received.append(image)
                raise MemoryError("out of memory")

        image = solid((100, 100, 100))

        with pytest.raises(MemoryError):
            apply_tone_pipeline(image, (Brightness(amount=0.1), FailingOp()))

        assert received[0] is not image
        assert any(item is received[0] for item in closed)
        assert not any(item is image for item in closed)
