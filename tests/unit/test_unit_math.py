"""
Unit tests for vector math, segment predicates and spline resampling.
"""

import unittest
import numpy as np

from mathutils.vec3 import Vec3, to_point3, vec2_distance
from mathutils.tangle_math import (
    EPSILON,
    closest_point_on_segment,
    closest_segment_index,
    distance_from_path_start,
    find_intersection_between_segments,
    path_direction,
    segment_parameters,
)
from mathutils.spline import catmull_rom, catmull_rom_point


class Vec3UnitTests(unittest.TestCase):
    """Unit tests for Vec3 and the tuple helpers"""

    def testVec3FromTwoDimensionalSequence(self):
        """A 2D sequence gets z = 0"""
        v = Vec3((1, 2))
        self.assertEqual(v.to_tuple(), (1.0, 2.0, 0.0))

    def testVec3Arithmetic(self):
        a = Vec3(1, 2, 3)
        b = Vec3(4, 5, 6)
        self.assertEqual((a + b).to_tuple(), (5.0, 7.0, 9.0))
        self.assertEqual((b - a).to_tuple(), (3.0, 3.0, 3.0))
        self.assertEqual((a * 2).to_tuple(), (2.0, 4.0, 6.0))
        self.assertEqual((2 * a).to_tuple(), (2.0, 4.0, 6.0))
        self.assertEqual((-a).to_tuple(), (-1.0, -2.0, -3.0))
        self.assertEqual(a + (1, 1, 1), Vec3(2, 3, 4))

    def testVec3CrossAndDot(self):
        x = Vec3(1, 0, 0)
        y = Vec3(0, 1, 0)
        self.assertEqual(x.cross(y), Vec3(0, 0, 1))
        self.assertEqual(x.dot(y), 0.0)

    def testNormalizedZeroVector(self):
        """Normalizing a zero vector yields zero instead of dividing by zero"""
        self.assertEqual(Vec3(0, 0, 0).normalized().to_tuple(), (0.0, 0.0, 0.0))

    def testToPoint3(self):
        self.assertEqual(to_point3((1, 2)), (1.0, 2.0, 0.0))
        self.assertEqual(to_point3((1, 2), z=0.5), (1.0, 2.0, 0.5))
        self.assertEqual(to_point3((1, 2, 3)), (1.0, 2.0, 3.0))

    def testVec2DistanceIgnoresZ(self):
        self.assertAlmostEqual(vec2_distance((0, 0, 5), (3, 4, -5)), 5.0)


class SegmentIntersectionUnitTests(unittest.TestCase):
    """Unit tests for the strict segment crossing predicate"""

    # ========================================================================
    # CROSSINGS
    # ========================================================================

    def testDiagonalsCross(self):
        """Two diagonals of a square cross at its center"""
        point = find_intersection_between_segments((0, 0), (2, 2), (0, 2), (2, 0))
        self.assertIsNotNone(point)
        self.assertTrue(np.allclose(point, (1, 1), atol=1e-9))

    def testParameters(self):
        t, u = segment_parameters((0, 0), (4, 0), (1, -1), (1, 3))
        self.assertAlmostEqual(t, 0.25)
        self.assertAlmostEqual(u, 0.25)

    def testSymmetry(self):
        """test(A,B,C,D) and test(C,D,A,B) agree on existence and point"""
        cases = [
            ((0, 0), (2, 2), (0, 2), (2, 0)),
            ((-3, 1), (4, -2), (0, -5), (1, 6)),
            ((0, 0), (1, 0), (2, -1), (2, 1)),
            ((0, 0), (2, 0), (1, 0), (1, 2)),
        ]
        for a, b, c, d in cases:
            p1 = find_intersection_between_segments(a, b, c, d)
            p2 = find_intersection_between_segments(c, d, a, b)
            self.assertEqual(p1 is None, p2 is None, f"Asymmetric result for {a, b, c, d}")
            if p1 is not None:
                self.assertTrue(np.allclose(p1, p2, atol=EPSILON))

    # ========================================================================
    # NON-CROSSINGS
    # ========================================================================

    def testSharedEndpointIsNotACrossing(self):
        """Ropes meeting at a shared pin never produce an intersection"""
        self.assertIsNone(find_intersection_between_segments((0, 0), (2, 2), (2, 2), (4, 0)))
        self.assertIsNone(find_intersection_between_segments((0, 0), (2, 2), (0, 0), (2, -2)))

    def testEndpointTouchingInteriorIsNotACrossing(self):
        """A T-junction (one endpoint on the other segment) is excluded"""
        self.assertIsNone(find_intersection_between_segments((0, 0), (2, 0), (1, 0), (1, 2)))

    def testParallelSegments(self):
        self.assertIsNone(find_intersection_between_segments((0, 0), (2, 0), (0, 1), (2, 1)))
        self.assertIsNone(segment_parameters((0, 0), (2, 0), (0, 1), (2, 1)))

    def testCollinearOverlap(self):
        """Collinear overlapping segments are never reported"""
        self.assertIsNone(find_intersection_between_segments((0, 0), (4, 0), (1, 0), (3, 0)))

    def testDegenerateSegment(self):
        """A zero-length segment never crosses anything"""
        self.assertIsNone(find_intersection_between_segments((1, 1), (1, 1), (0, 2), (2, 0)))

    def testLinesCrossOutsideSegments(self):
        self.assertIsNone(find_intersection_between_segments((0, 0), (1, 0), (2, -1), (2, 1)))


class PathGeometryUnitTests(unittest.TestCase):
    """Unit tests for closest-segment lookup and path direction"""

    def testClosestPointClampsToSegment(self):
        self.assertEqual(closest_point_on_segment((5, 1), (0, 0), (2, 0)), (2.0, 0.0))
        self.assertEqual(closest_point_on_segment((1, 1), (0, 0), (2, 0)), (1.0, 0.0))

    def testClosestSegmentIndex(self):
        path = [(0, 0, 0), (2, 0, 0), (2, 2, 0), (4, 2, 0)]
        self.assertEqual(closest_segment_index(path, (1, 0.1)), 0)
        self.assertEqual(closest_segment_index(path, (2.1, 1)), 1)
        self.assertEqual(closest_segment_index(path, (3.5, 2.2)), 2)

    def testClosestSegmentIndexTieKeepsEarliest(self):
        """A point equidistant from two segments resolves to the first one"""
        path = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
        self.assertEqual(closest_segment_index(path, (1, 0)), 0)

    def testClosestSegmentIndexShortPath(self):
        self.assertEqual(closest_segment_index([], (0, 0)), -1)
        self.assertEqual(closest_segment_index([(0, 0, 0)], (0, 0)), -1)

    def testPathDirection(self):
        direction = path_direction([(0, 0, 0), (0, 5, 0)])
        self.assertTrue(np.allclose(direction.to_tuple(), (0, 1, 0)))

    def testPathDirectionDegenerateFallsBack(self):
        self.assertEqual(path_direction([(1, 1, 0), (1, 1, 0)]).to_tuple(), (1.0, 0.0, 0.0))
        self.assertEqual(path_direction([]).to_tuple(), (1.0, 0.0, 0.0))

    def testDistanceFromPathStart(self):
        self.assertAlmostEqual(distance_from_path_start([(0, 0, 0), (10, 0, 0)], (3, 4)), 5.0)
        self.assertEqual(distance_from_path_start([(0, 0, 0)], (3, 4)), 0.0)


class SplineUnitTests(unittest.TestCase):
    """Unit tests for Catmull-Rom resampling"""

    def testPassesThroughControlPoints(self):
        control = [(0, 0, 0), (1, 1, 0), (2, 0, 0), (3, 1, 0)]
        samples = 8
        curve = catmull_rom(control, samples)

        self.assertEqual(curve.shape, ((len(control) - 1) * samples + 1, 3))
        for k, point in enumerate(control):
            self.assertTrue(np.allclose(curve[k * samples], point),
                            f"Control point {k} should lie on the curve")

    def testTwoPointsUnchanged(self):
        """A straight two-point rope stays exactly two points"""
        curve = catmull_rom([(0, 0, 0), (1, 0, 0)], 10)
        self.assertTrue(np.array_equal(curve, np.array([[0, 0, 0], [1, 0, 0]], dtype=float)))

    def testTooFewPoints(self):
        self.assertEqual(catmull_rom([(0, 0, 0)]).shape, (0, 3))
        self.assertEqual(catmull_rom([]).shape, (0, 3))

    def testCollinearStaysOnLine(self):
        curve = catmull_rom([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)], 5)
        self.assertTrue(np.allclose(curve[:, 1:], 0.0))
        self.assertTrue(np.all(np.diff(curve[:, 0]) > 0), "Uniform collinear input should stay monotonic")

    def testSinglePointEvaluation(self):
        p = catmull_rom_point((0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0), 0.5)
        self.assertTrue(np.allclose(p, (1.5, 0, 0)))


if __name__ == '__main__':
    unittest.main()
