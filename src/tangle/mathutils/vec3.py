"""
Pure Python vector math - no numpy dependency for hot paths.

This module provides Vec3, a lightweight 3D vector class, plus tuple-based
helpers for 2D and 3D points. Pins, slots and crossings are small enough
that pure Python beats numpy array creation overhead by a wide margin.

Vec3 supports arithmetic operators (+, -, *, /) and indexing.
"""
import math


class Vec3:
    """
    A lightweight 3D vector class that supports arithmetic operators.

    Stores components directly as attributes for fast access.
    Supports indexing like a tuple/list for compatibility.
    """
    __slots__ = ('x', 'y', 'z')

    def __init__(self, x=0.0, y=0.0, z=0.0):
        # Fast path: x is a plain number
        try:
            self.x = float(x)
            self.y = float(y)
            self.z = float(z)
        except TypeError:
            # x is a sequence (tuple, list, array, Vec3); 2D input gets z=0
            self.x = float(x[0])
            self.y = float(x[1])
            self.z = float(x[2]) if len(x) > 2 else 0.0

    def __getitem__(self, i):
        if i == 0: return self.x
        if i == 1: return self.y
        if i == 2: return self.z
        raise IndexError(f"Vec3 index {i} out of range")

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __len__(self):
        return 3

    def __repr__(self):
        return f"Vec3({self.x}, {self.y}, {self.z})"

    def __eq__(self, other):
        try:
            return self.x == other[0] and self.y == other[1] and self.z == other[2]
        except (TypeError, IndexError):
            return NotImplemented

    __hash__ = None

    def __add__(self, other):
        try:
            return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)
        except AttributeError:
            return Vec3(self.x + other[0], self.y + other[1], self.z + other[2])

    def __radd__(self, other):
        return Vec3(self.x + other[0], self.y + other[1], self.z + other[2])

    def __sub__(self, other):
        try:
            return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)
        except AttributeError:
            return Vec3(self.x - other[0], self.y - other[1], self.z - other[2])

    def __rsub__(self, other):
        return Vec3(other[0] - self.x, other[1] - self.y, other[2] - self.z)

    def __mul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __truediv__(self, scalar):
        inv = 1.0 / scalar
        return Vec3(self.x * inv, self.y * inv, self.z * inv)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other):
        """Dot product."""
        return self.x * other[0] + self.y * other[1] + self.z * other[2]

    def cross(self, other):
        """Cross product."""
        return Vec3(
            self.y * other[2] - self.z * other[1],
            self.z * other[0] - self.x * other[2],
            self.x * other[1] - self.y * other[0]
        )

    def length_sq(self):
        """Squared length (avoids sqrt)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self):
        """Vector length/magnitude."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self):
        """Return normalized copy."""
        mag = self.length()
        if mag < 1e-10:
            return Vec3(0.0, 0.0, 0.0)
        inv_mag = 1.0 / mag
        return Vec3(self.x * inv_mag, self.y * inv_mag, self.z * inv_mag)

    def to_tuple(self):
        """Convert to tuple."""
        return (self.x, self.y, self.z)


# Standalone functions for tuple-based math (for places that don't use Vec3)

def vec2_sub(a, b):
    """Subtract two 2D vectors."""
    return (a[0] - b[0], a[1] - b[1])

def vec2_dot(a, b):
    """2D dot product."""
    return a[0] * b[0] + a[1] * b[1]

def vec2_cross(a, b):
    """2D cross product (z component of the 3D cross product)."""
    return a[0] * b[1] - a[1] * b[0]

def vec2_length_sq(v):
    """Squared 2D length."""
    return v[0] * v[0] + v[1] * v[1]

def vec2_distance(a, b):
    """Distance between two 2D points (extra components are ignored)."""
    dx, dy = a[0] - b[0], a[1] - b[1]
    return math.sqrt(dx * dx + dy * dy)

def to_point3(p, z=0.0):
    """Lift a 2D point into 3D, or copy a 3D point, as a plain tuple."""
    if len(p) > 2:
        return (float(p[0]), float(p[1]), float(p[2]))
    return (float(p[0]), float(p[1]), float(z))
