"""
Surface materials.

A material is one of a closed set of kinds:
- DIFFUSE: approximate Lambertian scattering
- REFLECTIVE: mirror reflection perturbed by a fuzz radius
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import HitRecord


class MaterialKind(Enum):
    DIFFUSE = "diffuse"
    REFLECTIVE = "reflective"


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation.

    When `scattered` is False the ray was absorbed and `scattered_ray`
    carries no light.
    """
    scattered: bool
    attenuation: Color
    scattered_ray: Ray


@dataclass(frozen=True)
class Material:
    """A surface material.

    Attributes:
        kind: Which scattering model applies
        albedo: Per-channel reflectance, each component in [0, 1]
        fuzz: Reflection roughness in [0, 1] (REFLECTIVE only)
    """
    kind: MaterialKind
    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.fuzz <= 1.0:
            raise ValueError(f"fuzz must be in [0, 1], got {self.fuzz}")
        if any(not 0.0 <= c <= 1.0 for c in self.albedo):
            raise ValueError(f"albedo components must be in [0, 1], got {self.albedo}")

    @classmethod
    def diffuse(cls, albedo: Color) -> Material:
        return cls(MaterialKind.DIFFUSE, albedo)

    @classmethod
    def reflective(cls, albedo: Color, fuzz: float = 0.0) -> Material:
        return cls(MaterialKind.REFLECTIVE, albedo, fuzz)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        """Compute the scattered ray and attenuation for a hit.

        Args:
            ray_in: The incoming ray
            hit: Intersection of ray_in with a surface using this material
            rng: Random source for sampling

        Returns:
            ScatterResult; attenuation is always the albedo
        """
        if self.kind is MaterialKind.DIFFUSE:
            return self._scatter_diffuse(hit, rng)
        return self._scatter_reflective(ray_in, hit, rng)

    def _scatter_diffuse(self, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        # Target is a random point in the unit sphere tangent to the surface
        direction = hit.normal + Vec3.random_in_unit_sphere(rng)
        return ScatterResult(
            scattered=True,
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, direction),
        )

    def _scatter_reflective(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        reflected = ray_in.direction.normalize().reflect(hit.normal)

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Perturbed reflections that dip below the surface are absorbed
        return ScatterResult(
            scattered=reflected.dot(hit.normal) > 0,
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, reflected),
        )

    def __repr__(self) -> str:
        if self.kind is MaterialKind.DIFFUSE:
            return f"Material.diffuse({self.albedo})"
        return f"Material.reflective({self.albedo}, fuzz={self.fuzz})"
