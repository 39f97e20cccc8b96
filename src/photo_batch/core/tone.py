"""Tone operations and the compositor that orders them.

Each operation is a small frozen value carrying its parameter in the pixel
operation's native domain. Percentages from a ToneSpec become an ``amount``
in [-1, 1] applied as the factor ``1 + amount``, so +20% brightness scales
pixel values by 1.2 and -100% saturation removes all colour. Blur radii are
divided by BLUR_RADIUS_DIVISOR; Pillow's Gaussian radius is the standard
deviation in pixels, the same unit as a CSS ``blur(Npx)`` filter, so the
divisor is 1.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence, Tuple, Union

from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from .models import ToneSpec

BLUR_RADIUS_DIVISOR = 1.0

# Row-major RGB -> RGB matrix, offsets zero.
SEPIA_MATRIX = (
    0.393, 0.769, 0.189, 0,
    0.349, 0.686, 0.168, 0,
    0.272, 0.534, 0.131, 0,
)


def _split_alpha(image: Image.Image) -> Tuple[Image.Image, Optional[Image.Image]]:
    if "A" in image.getbands():
        return image.convert("RGB"), image.getchannel("A")
    if image.mode != "RGB":
        return image.convert("RGB"), None
    return image, None


def _restore_alpha(image: Image.Image, alpha: Optional[Image.Image]) -> Image.Image:
    if alpha is not None:
        image.putalpha(alpha)
    return image


@dataclass(frozen=True)
class Brightness:
    amount: float
    kind: ClassVar[str] = "brightness"

    def apply(self, image: Image.Image) -> Image.Image:
        if self.amount == 0:
            return image
        return ImageEnhance.Brightness(image).enhance(1.0 + self.amount)


@dataclass(frozen=True)
class Contrast:
    amount: float
    kind: ClassVar[str] = "contrast"

    def apply(self, image: Image.Image) -> Image.Image:
        if self.amount == 0:
            return image
        return ImageEnhance.Contrast(image).enhance(1.0 + self.amount)


@dataclass(frozen=True)
class Saturation:
    amount: float
    kind: ClassVar[str] = "saturation"

    def apply(self, image: Image.Image) -> Image.Image:
        if self.amount == 0:
            return image
        return ImageEnhance.Color(image).enhance(1.0 + self.amount)


@dataclass(frozen=True)
class Grayscale:
    kind: ClassVar[str] = "grayscale"

    def apply(self, image: Image.Image) -> Image.Image:
        rgb, alpha = _split_alpha(image)
        gray = ImageOps.grayscale(rgb).convert("RGB")
        return _restore_alpha(gray, alpha)


@dataclass(frozen=True)
class Sepia:
    kind: ClassVar[str] = "sepia"

    def apply(self, image: Image.Image) -> Image.Image:
        rgb, alpha = _split_alpha(image)
        toned = rgb.convert("RGB", SEPIA_MATRIX)
        return _restore_alpha(toned, alpha)


@dataclass(frozen=True)
class Blur:
    radius: float
    kind: ClassVar[str] = "blur"

    def apply(self, image: Image.Image) -> Image.Image:
        if self.radius <= 0:
            return image
        return image.filter(ImageFilter.GaussianBlur(radius=self.radius))


ToneOp = Union[Brightness, Contrast, Saturation, Grayscale, Sepia, Blur]


def compose_tone_pipeline(tone: ToneSpec) -> Tuple[ToneOp, ...]:
    """
    Build the ordered tone pipeline for a spec.

    The order is always brightness, contrast, saturation, the grayscale and
    sepia toggles, then blur. Operations whose parameter is neutral are left
    out.
    """
    ops = []
    if tone.brightness != 0:
        ops.append(Brightness(amount=tone.brightness / 100.0))
    if tone.contrast != 0:
        ops.append(Contrast(amount=tone.contrast / 100.0))
    if tone.saturation != 0:
        ops.append(Saturation(amount=tone.saturation / 100.0))
    if tone.grayscale:
        ops.append(Grayscale())
    if tone.sepia:
        ops.append(Sepia())
    if tone.blur > 0:
        ops.append(Blur(radius=tone.blur / BLUR_RADIUS_DIVISOR))
    return tuple(ops)


def apply_tone_pipeline(image: Image.Image, ops: Sequence[ToneOp]) -> Image.Image:
    """Apply ops in order. Intermediate images are closed, the input is not."""
    current = image
    try:
        for op in ops:
            updated = op.apply(current)
            if current is not image and updated is not current:
                current.close()
            current = updated
    except BaseException:
        if current is not image:
            current.close()
        raise
    return current
