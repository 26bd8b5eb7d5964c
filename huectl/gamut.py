"""Color gamut triangles for Hue light models and projection into them."""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple, Optional, Tuple

from huectl.colors import ChromaticityPoint, DomainError


class GamutPoint(NamedTuple):
    x: float
    y: float


def _cross(o: Tuple[float, float], a: Tuple[float, float], p: Tuple[float, float]) -> float:
    """Z component of (a - o) x (p - o)."""
    return (a[0] - o[0]) * (p[1] - o[1]) - (a[1] - o[1]) * (p[0] - o[0])


@dataclass(frozen=True)
class ColorGamut:
    """Triangle of reproducible colors, wound red -> green -> blue."""
    red: GamutPoint
    green: GamutPoint
    blue: GamutPoint

    def __post_init__(self):
        if _cross(self.red, self.green, self.blue) == 0:
            raise DomainError(
                f"Degenerate gamut: {self.red}, {self.green}, {self.blue} are collinear")

    @property
    def edges(self) -> Tuple[Tuple[GamutPoint, GamutPoint], ...]:
        return (
            (self.red, self.green),
            (self.green, self.blue),
            (self.blue, self.red),
        )


# Color gamuts for different Hue light models
GAMUT_A = ColorGamut(
    red=GamutPoint(0.704, 0.296),
    green=GamutPoint(0.2151, 0.7106),
    blue=GamutPoint(0.138, 0.08),
)

GAMUT_B = ColorGamut(
    red=GamutPoint(0.675, 0.322),
    green=GamutPoint(0.409, 0.518),
    blue=GamutPoint(0.167, 0.04),
)

GAMUT_C = ColorGamut(
    red=GamutPoint(0.6915, 0.3038),
    green=GamutPoint(0.17, 0.7),
    blue=GamutPoint(0.1532, 0.0475),
)

GAMUTS = MappingProxyType({'A': GAMUT_A, 'B': GAMUT_B, 'C': GAMUT_C})

MODEL_GAMUT_CLASSES = MappingProxyType(dict(
    (model, gamut_class)
    for models, gamut_class in (
        # Living Colors, LightStrips, Bloom, Iris
        (['LLC001', 'LLC005', 'LLC006', 'LLC007', 'LLC010', 'LLC011',
          'LLC012', 'LLC013', 'LLC014', 'LST001'], 'A'),
        # First generation Hue bulbs
        (['LCT001', 'LCT002', 'LCT003', 'LCT007', 'LLM001'], 'B'),
        (['LCT010', 'LCT011', 'LCT012', 'LCT014', 'LCT015', 'LCT016',
          'LLC020', 'LST002'], 'C'),
    )
    for model in models
))


def gamut_class_for_model(model_id: str) -> Optional[str]:
    """Return 'A', 'B' or 'C' for a known model id, None when unconstrained."""
    return MODEL_GAMUT_CLASSES.get(model_id)


def gamut_for_model(model_id: str) -> Optional[ColorGamut]:
    gamut_class = gamut_class_for_model(model_id)
    if gamut_class is None:
        return None
    return GAMUTS[gamut_class]


def point_in_gamut(point: Tuple[float, float], gamut: ColorGamut) -> bool:
    """Check if point is inside (or on the edge of) the gamut triangle.

    The point is inside when it is on the same side of all three directed
    edges. A zero cross product means the point is on an edge line and
    does not count against it.
    """
    signs = [_cross(a, b, point) for a, b in gamut.edges]

    has_neg = any(s < 0 for s in signs)
    has_pos = any(s > 0 for s in signs)

    return not (has_neg and has_pos)


def closest_point_on_line(a: Tuple[float, float],
                          b: Tuple[float, float],
                          p: Tuple[float, float],
                          clamp: bool = True) -> GamutPoint:
    """Find the point closest to P on the line through A and B.

    Args:
        a: First point of the line
        b: Second point of the line
        p: Query point
        clamp: Keep the result on segment AB instead of the infinite line

    Returns:
        Foot of the perpendicular from P (clamped to AB when requested)

    Raises:
        DomainError: If A and B coincide
    """
    ap = (p[0] - a[0], p[1] - a[1])
    ab = (b[0] - a[0], b[1] - a[1])

    ab2 = ab[0] * ab[0] + ab[1] * ab[1]
    if ab2 == 0:
        raise DomainError(f"Cannot project onto a line through a single point {a}")

    t = (ap[0] * ab[0] + ap[1] * ab[1]) / ab2
    if clamp:
        t = max(0.0, min(1.0, t))

    return GamutPoint(a[0] + ab[0] * t, a[1] + ab[1] * t)


def distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    """Calculate Euclidean distance between two points."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def closest_point(point: Tuple[float, float], gamut: ColorGamut,
                  clamp: bool = True) -> GamutPoint:
    """Return the point on the gamut boundary nearest to ``point``.

    Edges are tried red-green, green-blue, blue-red; on an exact tie the
    earlier edge wins.
    """
    candidates = [closest_point_on_line(a, b, point, clamp=clamp) for a, b in gamut.edges]
    return min(candidates, key=lambda candidate: distance(point, candidate))


def constrain_to_gamut(point: Tuple[float, float], gamut: ColorGamut) -> GamutPoint:
    """Ensure xy coordinates are within a light's color gamut."""
    if point_in_gamut(point, gamut):
        return GamutPoint(point[0], point[1])
    return closest_point(point, gamut)


def adjust_for_gamut(point: ChromaticityPoint, gamut: ColorGamut) -> None:
    """Move ``point`` onto the gamut boundary if it lies outside.

    Only x and y are rewritten; brightness is kept as is.
    """
    if point_in_gamut(point.xy, gamut):
        return
    point.x, point.y = closest_point(point.xy, gamut)


def apply_model_gamut(point: ChromaticityPoint, model_id: str) -> Optional[ColorGamut]:
    """Adjust ``point`` for the gamut of ``model_id``.

    Unknown models are unconstrained and leave the point untouched.

    Returns:
        The gamut that was applied, or None
    """
    gamut = gamut_for_model(model_id)
    if gamut is not None:
        adjust_for_gamut(point, gamut)
    return gamut
