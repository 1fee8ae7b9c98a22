"""
Path tracing of a single ray through the scene.

A ray bounces from surface to surface, picking up each material's
attenuation, until it escapes to the sky, is absorbed, or runs out of
bounces.
"""

from __future__ import annotations
import numpy as np

from .vec3 import Color
from .ray import Ray
from .shapes import Hittable

# Minimum hit distance for all rays; secondary rays start on a surface
T_MIN = 0.001
MAX_DEPTH = 50

SKY_BOTTOM = Color(1.0, 1.0, 1.0)
SKY_TOP = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


def sky_color(ray: Ray) -> Color:
    """Background gradient from white (looking down) to sky blue (looking up)."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return SKY_BOTTOM * (1.0 - t) + SKY_TOP * t


def ray_color(
    ray: Ray,
    scene: Hittable,
    rng: np.random.Generator,
    max_depth: int = MAX_DEPTH
) -> Color:
    """Compute the linear radiance arriving along a ray.

    Iterative form of the recursive estimator: the product of the
    attenuations seen so far is carried along with the live ray.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        rng: Random source for material sampling
        max_depth: Maximum number of scatter events before the ray is
            treated as fully absorbed

    Returns:
        Linear RGB color, each component in [0, 1]
    """
    throughput = Color(1.0, 1.0, 1.0)

    for depth in range(max_depth + 1):
        hit = scene.hit(ray, T_MIN, float('inf'))
        if hit is None:
            return throughput * sky_color(ray)

        if depth >= max_depth or hit.material is None:
            return BLACK

        result = hit.material.scatter(ray, hit, rng)
        if not result.scattered:
            return BLACK

        throughput = throughput * result.attenuation
        ray = result.scattered_ray

    return BLACK
