"""Built-in scenes, all framed for Camera.for_image."""

from __future__ import annotations
from typing import Callable, Dict

from .vec3 import Point3, Color
from .shapes import Sphere, HittableList
from .materials import Material


def ground_sphere() -> Sphere:
    """A huge diffuse sphere whose top acts as the floor at y = -0.5."""
    return Sphere(Point3(0, -100.5, -1), 100.0, Material.diffuse(Color(0.8, 0.8, 0.0)))


def default_scene() -> HittableList:
    """A diffuse sphere between two fuzzy metal spheres, on the ground."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5, Material.diffuse(Color(0.8, 0.3, 0.3))))
    world.add(ground_sphere())
    world.add(Sphere(Point3(1, 0, -1), 0.5, Material.reflective(Color(0.8, 0.6, 0.2), 0.3)))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, Material.reflective(Color(0.8, 0.8, 0.8), 0.1)))
    return world


def ground_scene() -> HittableList:
    """Just the ground sphere under an open sky."""
    return HittableList([ground_sphere()])


def facing_mirrors(radius: float = 1.0, gap: float = 1.0) -> HittableList:
    """Two perfect mirror spheres on the x axis at z = -1.

    A ray travelling along the line between their centers bounces back
    and forth forever, so only the depth limit ends it.
    """
    mirror = Material.reflective(Color(1.0, 1.0, 1.0), 0.0)
    offset = radius + gap / 2
    return HittableList([
        Sphere(Point3(-offset, 0, -1), radius, mirror),
        Sphere(Point3(offset, 0, -1), radius, mirror),
    ])


SCENES: Dict[str, Callable[[], HittableList]] = {
    'default': default_scene,
    'ground': ground_scene,
    'mirrors': facing_mirrors,
}
