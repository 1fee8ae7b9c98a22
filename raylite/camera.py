"""
Camera module for generating primary rays.

A pinhole camera: every ray starts at the eye point and passes through
a point on a fixed rectangular image plane.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera defined by its image-plane geometry."""

    def __init__(
        self,
        lower_left_corner: Point3,
        horizontal: Vec3,
        vertical: Vec3,
        origin: Point3
    ):
        """Create a camera.

        Args:
            lower_left_corner: World position of the image plane's (0, 0) corner
            horizontal: Full-width edge of the image plane (u axis)
            vertical: Full-height edge of the image plane (v axis)
            origin: Eye point all rays start from
        """
        self.lower_left_corner = lower_left_corner
        self.horizontal = horizontal
        self.vertical = vertical
        self.origin = origin

    @classmethod
    def for_image(cls, width: int, height: int) -> Camera:
        """Viewport used by the built-in scenes.

        A 4-unit-wide plane at z=-1 seen from (0, 0, 1), with the height
        scaled to keep pixels square.
        """
        return cls(
            lower_left_corner=Point3(-2.0, -1.0, -1.0),
            horizontal=Vec3(4.0, 0.0, 0.0),
            vertical=Vec3(0.0, 4.0 * (height / width), 0.0),
            origin=Point3(0.0, 0.0, 1.0),
        )

    @classmethod
    def look_at(
        cls,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0
    ) -> Camera:
        """Create a camera positioned at look_from and aimed at look_at.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
        """
        h = math.tan(math.radians(vfov) / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Orthonormal camera basis
        w = (look_from - look_at).normalize()  # Points backward from camera
        u = vup.cross(w).normalize()           # Points right
        v = w.cross(u)                         # Points up

        horizontal = u * viewport_width
        vertical = v * viewport_height
        return cls(
            lower_left_corner=look_from - horizontal / 2 - vertical / 2 - w,
            horizontal=horizontal,
            vertical=vertical,
            origin=look_from,
        )

    def get_ray(self, u: float, v: float) -> Ray:
        """Generate a ray for the given coordinates on the image plane.

        Args:
            u: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            v: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the eye through the image-plane point (not normalized)
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * u
            + self.vertical * v
            - self.origin
        )
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, looking_at={self.lower_left_corner + self.horizontal/2 + self.vertical/2})"
