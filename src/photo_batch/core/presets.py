"""Named tone presets shared with the gallery's photo editor.

The editor stores adjustments as fractions (0.2 for +20%); here they are
expressed in the batch percentage units. Any non-zero sepia or grayscale
amount in the editor turns the corresponding toggle on.
"""

from typing import Dict, List

from .exceptions import InvalidSpecError
from .models import ToneSpec

FILTER_PRESETS: Dict[str, ToneSpec] = {
    "original": ToneSpec(),
    "bright": ToneSpec(brightness=20, contrast=10, saturation=10),
    "vintage": ToneSpec(brightness=10, contrast=-10, saturation=-20, sepia=True),
    "b&w": ToneSpec(contrast=10, grayscale=True),
    "sepia": ToneSpec(brightness=10, saturation=-10, sepia=True),
    "soft": ToneSpec(brightness=10, contrast=-10, saturation=10, blur=1),
}


def preset_names() -> List[str]:
    return list(FILTER_PRESETS)


def get_preset(name: str) -> ToneSpec:
    """Look up a preset by name, ignoring case and surrounding spaces."""
    key = name.strip().lower()
    try:
        return FILTER_PRESETS[key]
    except KeyError:
        raise InvalidSpecError(
            f"Unknown preset '{name}'. Available: {', '.join(FILTER_PRESETS)}"
        ) from None
