"""
raylite - A small Python path tracer for sphere scenes

Renders spheres with diffuse and fuzzy-metal materials using Monte Carlo
path tracing and writes plain-text PPM images.
"""

__version__ = "0.1.0"
__author__ = "raylite Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, MaterialKind, ScatterResult
from .camera import Camera
from .tracer import ray_color, sky_color, T_MIN, MAX_DEPTH
from .ppm import (
    ImageWriteError, PPMFormatError,
    write_ppm, format_ppm, read_ppm, save_ppm, open_sink
)
from .scenes import SCENES, default_scene, ground_scene, facing_mirrors
from .renderer import Renderer, RenderSettings, raytrace
from .benchmark import BenchmarkCase, BenchmarkResult, DEFAULT_CASES, run_benchmarks
