from abc import abstractmethod

from mathutils.spline import DEFAULT_SAMPLES_PER_SEGMENT, catmull_rom
from mathutils.vec3 import to_point3


class BaseRenderContext(object):
    """
        Receives the puzzle's finalized geometry one record at a time.

        When `smooth` is set, rope paths are resampled with Catmull-Rom before
        they reach create_path. Smoothing only changes what the context is
        handed; the controller's render paths are never written back.
    """

    def __init__(self, smooth=False, samples_per_segment=DEFAULT_SAMPLES_PER_SEGMENT):
        self.smooth = smooth
        self.samples_per_segment = samples_per_segment

    def render_puzzle(self, controller):
        for slot in controller.slots:
            self.create_slot(slot.id, to_point3(slot.position), slot.occupant_id)

        for rope in controller.ropes:
            self.pre_render(rope)
            self.create_path(rope.id, self.prepare_path(rope.render_path), rope.color)
            self.post_render(rope)

        for pin in controller.pins:
            self.create_pin(pin.id, pin.render_position, pin.scale, pin.rope_id)

        for intersection in controller.intersections:
            self.create_crossing(intersection)

    def prepare_path(self, points):
        if self.smooth and len(points) > 2:
            return [tuple(p) for p in catmull_rom(points, self.samples_per_segment).tolist()]
        return [to_point3(p) for p in points]

    def pre_render(self, rope):
        pass

    def post_render(self, rope):
        pass

    def finalize(self):
        pass

    def create_slot(self, id, position, occupant_id=None):
        pass

    def create_pin(self, id, position, scale, rope_id):
        pass

    def create_crossing(self, intersection):
        pass

    @abstractmethod
    def create_path(self, id, points, color=None):
        """Creates a rope path with the given id, ordered 3D points and color."""
