"""
Weave path generators.

A weave is the short detour spliced into a rope's render path at a crossing
where that rope is on top, lifting it out of the puzzle plane so it visibly
passes over the rope below. The path weaver treats a generator as an opaque
callable:

    generator(point, tangent, radius) -> List[(x, y, z)]

Both built-in generators are deterministic, symmetric about the crossing and
start/end on the approach tangent. The puzzle plane is XY; lift is along +Z
(toward the viewer).
"""

import math
from typing import Callable, Dict, List

from mathutils.vec3 import Vec3
from tangle_types import Point3

WeaveGenerator = Callable[..., List[Point3]]

# ========== Defaults ==========
DEFAULT_HEIGHT = 0.8            # Peak lift out of the plane
DEFAULT_WRAP_COUNT = 1          # Full turns around the lower rope
DEFAULT_SAMPLES = 20            # Interpolation samples (helix)
DEFAULT_RADIUS_MARGIN = 0.15    # Clearance added to the tube radius
DEFAULT_PROGRESS_LENGTH = 0.8   # Along-path span of the helix
DEFAULT_ARCH_LENGTH = 0.5       # Along-path span of the arch
DEFAULT_ARCH_SAMPLES = 10

MIN_SAMPLES = 5
MAX_SAMPLES = 100

_PLANE_NORMAL = Vec3(0.0, 0.0, 1.0)
_FALLBACK_AXIS = Vec3(0.0, 1.0, 0.0)


def validate_parameters(height, wrap_count, samples):
    """Clamp helix parameters to usable values; returns (height, wrap_count, samples)."""
    if height <= 0:
        height = DEFAULT_HEIGHT
    if wrap_count < 1:
        wrap_count = 1
    samples = min(MAX_SAMPLES, max(MIN_SAMPLES, int(samples)))
    return height, wrap_count, samples


def _tangent_or_default(direction) -> Vec3:
    tangent = Vec3(direction)
    if tangent.length_sq() < 1e-3:
        return Vec3(1.0, 0.0, 0.0)
    return tangent.normalized()


def generate_helix_path(point, direction, tube_radius,
                        height=DEFAULT_HEIGHT,
                        wrap_count=DEFAULT_WRAP_COUNT,
                        samples=DEFAULT_SAMPLES) -> List[Point3]:
    """
    Generate a helix that wraps once around the crossing while lifting over it.

    Args:
        point: Crossing point (2D or 3D)
        direction: Rope tangent at the crossing
        tube_radius: Radius of the rendered tube; the helix clears it by a margin
        height: Peak lift along +Z
        wrap_count: Number of turns
        samples: Number of intervals; samples + 1 points are returned

    Returns:
        Ordered list of (x, y, z) tuples
    """
    height, wrap_count, samples = validate_parameters(height, wrap_count, samples)
    center = Vec3(point)
    tangent = _tangent_or_default(direction)

    # Frame perpendicular to the rope
    right = tangent.cross(_PLANE_NORMAL)
    if right.length_sq() < 1e-3:
        right = tangent.cross(_FALLBACK_AXIS)
    right = right.normalized()
    perp_up = right.cross(tangent).normalized()

    helix_radius = tube_radius + DEFAULT_RADIUS_MARGIN

    result = []
    for i in range(samples + 1):
        t = i / samples
        angle = t * wrap_count * math.pi * 2.0
        lift = height * math.sin(t * math.pi)
        radial = right * math.cos(angle) + perp_up * math.sin(angle)
        progress = (t - 0.5) * DEFAULT_PROGRESS_LENGTH

        p = center + tangent * progress + radial * helix_radius + Vec3(0.0, 0.0, lift)
        result.append(p.to_tuple())

    return result


def generate_arch_path(point, direction, tube_radius=0.0,
                       height=DEFAULT_HEIGHT,
                       length=DEFAULT_ARCH_LENGTH,
                       samples=DEFAULT_ARCH_SAMPLES) -> List[Point3]:
    """
    Generate a smooth arch rising over the crossing and coming back down.

    `tube_radius` is accepted for signature compatibility with the helix and
    raises the peak by the same amount so thick tubes still clear each other.
    """
    center = Vec3(point)
    tangent = _tangent_or_default(direction)
    samples = max(1, int(samples))
    peak = height + tube_radius

    result = []
    for i in range(samples + 1):
        t = i / samples
        progress = (t - 0.5) * length
        lift = peak * math.sin(t * math.pi)
        p = center + tangent * progress + Vec3(0.0, 0.0, lift)
        result.append(p.to_tuple())

    return result


WEAVE_GENERATORS: Dict[str, WeaveGenerator] = {
    'helix': generate_helix_path,
    'arch': generate_arch_path,
}


def get_weave_generator(style: str) -> WeaveGenerator:
    """Look up a built-in generator by name."""
    if style not in WEAVE_GENERATORS:
        raise ValueError(f"Unknown weave style: {style}. Use {', '.join(repr(s) for s in WEAVE_GENERATORS)}.")
    return WEAVE_GENERATORS[style]
