"""
Catmull-Rom resampling for render paths.

Smoothing is a cosmetic, downstream transform: it runs on an already
finalized render path (weaves included) and its output is only ever handed
to render contexts. Nothing here feeds back into crossing or win logic.
"""
import numpy as np

DEFAULT_SAMPLES_PER_SEGMENT = 10


def catmull_rom_point(p0, p1, p2, p3, t):
    """Evaluate a uniform Catmull-Rom segment between p1 and p2 at t in [0, 1]."""
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        (2.0 * p1) +
        (-p0 + p2) * t +
        (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2 +
        (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * t3
    )


def catmull_rom(control_points, samples_per_segment=DEFAULT_SAMPLES_PER_SEGMENT):
    """
    Resample a polyline into a smooth curve passing through every control point.

    End segments reuse the first/last point as the missing neighbour. Two
    points are returned unchanged (a straight rope stays straight).

    Args:
        control_points: Sequence of 3D points (at least 2)
        samples_per_segment: Samples generated per control segment

    Returns:
        numpy array of shape (N, 3); empty (0, 3) array for fewer than 2 points
    """
    points = np.asarray(control_points, dtype=np.float64).reshape(-1, 3)
    count = len(points)

    if count < 2:
        return np.zeros((0, 3), dtype=np.float64)
    if count == 2 or samples_per_segment < 1:
        return points.copy()

    # Clamp neighbour indices at both ends
    idx = np.arange(count - 1)
    p0 = points[np.maximum(idx - 1, 0)]
    p1 = points[idx]
    p2 = points[idx + 1]
    p3 = points[np.minimum(idx + 2, count - 1)]

    t = np.arange(samples_per_segment, dtype=np.float64) / samples_per_segment
    t = t[None, :, None]
    t2 = t * t
    t3 = t2 * t

    p0, p1, p2, p3 = (p[:, None, :] for p in (p0, p1, p2, p3))
    samples = 0.5 * (
        (2.0 * p1) +
        (-p0 + p2) * t +
        (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2 +
        (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * t3
    )

    return np.vstack([samples.reshape(-1, 3), points[-1:]])
