"""RGB <-> CIE xy color conversion for Philips Hue lights."""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

import numpy as np


# Wide RGB D65, as published for the Hue light family
RGB_TO_XYZ = np.array([
    [0.664511, 0.154324, 0.162028],
    [0.283881, 0.668433, 0.047685],
    [0.000088, 0.072310, 0.986039],
])
RGB_TO_XYZ.setflags(write=False)

XYZ_TO_RGB = np.array([
    [1.656492, -0.354851, -0.255038],
    [-0.707196, 1.655397, 0.036152],
    [0.051713, -0.121364, 1.011530],
])
XYZ_TO_RGB.setflags(write=False)

GAMMA_EXPONENT = 2.4
# Older palettes were computed with this exponent; only use it to reproduce them.
LEGACY_GAMMA_EXPONENT = 2.3

MAX_BRIGHTNESS = 254
NEUTRAL_XY = (0.3227, 0.3290)


class DomainError(ValueError):
    """Raised when a conversion or projection is mathematically undefined."""


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ('r', 'g', 'b'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"RGB channel {name} must be an int, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"RGB channel {name} out of range 0-255: {value}")

    @classmethod
    def from_hex(cls, value: str) -> 'RGB':
        """Parse '#rrggbb' (or 'rrggbb')."""
        text = value.strip().lstrip('#')
        if len(text) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise ValueError(f"Invalid hex color: {value!r}") from None

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def as_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass
class ChromaticityPoint:
    """A device-native color: CIE xy plus Hue brightness (0-254).

    Gamut adjustment rewrites x and y in place; brightness is left alone.
    """
    x: float
    y: float
    brightness: int

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def xy_string(self) -> str:
        return f"[{self.x}, {self.y}]"

    def as_state(self) -> Dict[str, Union[int, List[float]]]:
        """Body for a bridge light state update."""
        return {'bri': self.brightness, 'xy': [self.x, self.y]}


def gamma_correct(value: float, exponent: float = GAMMA_EXPONENT) -> float:
    """Linearize a normalized (0-1) sRGB channel."""
    if value > 0.04045:
        return ((value + 0.055) / 1.055) ** exponent
    return value / 12.92


def reverse_gamma(value: float) -> float:
    """Encode a linear channel back to sRGB (0-1 for in-gamut input)."""
    if value <= 0.0031308:
        return 12.92 * value
    return 1.055 * value ** (1.0 / 2.4) - 0.055


def _to_channel(value: float) -> int:
    # clamp before the cast, int() truncates toward zero
    return int(max(0.0, min(255.0, value * 255.0)))


def from_rgb(rgb: RGB, exponent: float = GAMMA_EXPONENT) -> ChromaticityPoint:
    """Convert an RGB color to xy coordinates and brightness.

    Args:
        rgb: Color with 0-255 channels
        exponent: Forward gamma exponent

    Returns:
        ChromaticityPoint in CIE 1931 space with brightness 0-254
    """
    if rgb.r == 0 and rgb.g == 0 and rgb.b == 0:
        return ChromaticityPoint(NEUTRAL_XY[0], NEUTRAL_XY[1], 0)

    linear = np.array([gamma_correct(c / 255.0, exponent) for c in rgb.as_tuple()])
    X, Y, Z = RGB_TO_XYZ @ linear

    total = X + Y + Z
    brightness = max(0, min(MAX_BRIGHTNESS, int(round(Y * MAX_BRIGHTNESS))))

    return ChromaticityPoint(float(X / total), float(Y / total), brightness)


def to_rgb(point: ChromaticityPoint) -> RGB:
    """Convert xy coordinates and brightness back to RGB.

    Args:
        point: Chromaticity point with brightness 0-254

    Returns:
        RGB color, channels clamped to 0-255

    Raises:
        DomainError: If y is 0
    """
    if point.y == 0:
        raise DomainError("Cannot convert xy to RGB when y is 0")

    z = 1.0 - point.x - point.y
    Y = point.brightness / MAX_BRIGHTNESS
    X = Y / point.y * point.x
    Z = Y / point.y * z

    linear = XYZ_TO_RGB @ np.array([X, Y, Z])
    r, g, b = (_to_channel(reverse_gamma(float(c))) for c in linear)

    return RGB(r, g, b)
