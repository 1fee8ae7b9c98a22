"""
Renderer module - drives the per-pixel sampling loop.

Implements:
- Multi-sample anti-aliasing with per-pixel jitter
- Row-band parallel rendering with an independent random stream per band
- Gamma-2 tone curve and 8-bit quantization
- PPM and Pillow-backed image output
"""

from __future__ import annotations
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, Iterable, Tuple, Union
import numpy as np

from .vec3 import Color
from .camera import Camera
from .shapes import Hittable
from .tracer import ray_color, MAX_DEPTH
from .ppm import open_sink, save_ppm, write_ppm
from .scenes import default_scene

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 320
    height: int = 240
    samples_per_pixel: int = 100
    max_depth: int = MAX_DEPTH
    num_threads: int = 1  # 0 = auto-detect
    band_height: int = 16
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ('width', 'height', 'samples_per_pixel', 'band_height'):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be non-negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer with optional multi-threading."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the averaged linear colors.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Float image of shape (height, width, 3), row 0 is the top of
            the picture
        """
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth

        image = np.zeros((height, width, 3), dtype=np.float64)

        bands = self._generate_bands(height)
        # One independent stream per band, so results don't depend on scheduling
        seeds = np.random.SeedSequence(self.settings.seed).spawn(len(bands))
        total_bands = len(bands)

        logger.debug(
            "Rendering %dx%d at %d spp in %d bands on %d thread(s)",
            width, height, samples, total_bands, self.settings.num_threads
        )

        def render_band(job: Tuple[Tuple[int, int], np.random.SeedSequence]) -> Tuple[Tuple[int, int], np.ndarray]:
            """Render rows y0..y1 of the image."""
            (y0, y1), seed = job
            rng = np.random.default_rng(seed)
            band_image = np.zeros((y1 - y0, width, 3), dtype=np.float64)

            for j in range(y0, y1):
                # Image rows run top to bottom, v runs bottom to top
                row = height - 1 - j
                for i in range(width):
                    pixel_color = Color(0, 0, 0)

                    for _ in range(samples):
                        u = (i + rng.random()) / width
                        v = (row + rng.random()) / height

                        ray = camera.get_ray(u, v)
                        pixel_color = pixel_color + ray_color(ray, scene, rng, max_depth)

                    band_image[j - y0, i] = pixel_color.to_array() / samples

            return (y0, y1), band_image

        jobs = list(zip(bands, seeds))
        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # map yields in submission order, so bands land top to bottom
                self._collect(executor.map(render_band, jobs), image, total_bands)
        else:
            self._collect(map(render_band, jobs), image, total_bands)

        return image

    def _collect(self, results: Iterable[Tuple[Tuple[int, int], np.ndarray]], image: np.ndarray, total_bands: int) -> None:
        """Copy finished bands into the image and report progress.

        Runs on the calling thread only, so the completion count needs no lock.
        """
        for completed, ((y0, y1), band_image) in enumerate(results, start=1):
            image[y0:y1] = band_image
            logger.debug("Band %d-%d done (%d/%d)", y0, y1, completed, total_bands)
            if self._progress_callback:
                self._progress_callback(completed / total_bands)

    def _generate_bands(self, height: int) -> list[Tuple[int, int]]:
        """Split the image rows into (y0, y1) bands of at most band_height rows."""
        band_height = self.settings.band_height
        return [(y, min(y + band_height, height)) for y in range(0, height, band_height)]

    @staticmethod
    def to_ldr(image: np.ndarray) -> np.ndarray:
        """Convert linear colors to 8-bit with gamma-2 correction.

        Each channel becomes floor(255.99 * sqrt(c)); 255.99 keeps an
        input of exactly 1.0 at 255.

        Args:
            image: Float image array

        Returns:
            Image as uint8 array
        """
        corrected = np.sqrt(np.clip(image, 0.0, 1.0))
        return np.floor(255.99 * corrected).astype(np.uint8)

    def save_image(self, image: np.ndarray, filename: Union[str, os.PathLike]) -> None:
        """Save image to file.

        Args:
            image: Image array (float or uint8)
            filename: Output filename; `.ppm` is written as plain-text PPM,
                other extensions go through Pillow
        """
        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        if str(filename).lower().endswith('.ppm'):
            save_ppm(image, filename)
            return

        from PIL import Image as PILImage

        fmt = PILImage.registered_extensions().get(os.path.splitext(str(filename))[1].lower())
        if fmt is None:
            raise ValueError(f"Unsupported image format: {filename}")

        with open_sink(filename) as stream:
            # The sink is a temp file, so Pillow can't infer the format from its name
            PILImage.fromarray(image, 'RGB').save(stream.buffer, format=fmt)


def raytrace(
    width: int,
    height: int,
    samples: int,
    output: Union[str, os.PathLike],
    scene: Optional[Hittable] = None,
    camera: Optional[Camera] = None,
    max_depth: int = MAX_DEPTH,
    num_threads: int = 1,
    seed: Optional[int] = None,
    progress_callback: Optional[Callable[[float], None]] = None
) -> None:
    """Render a scene and write it to `output` as plain PPM.

    The output file is opened before rendering starts, so an unwritable
    path fails immediately.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        samples: Samples per pixel
        output: Output file path
        scene: Scene to render (the default four-sphere scene if None)
        camera: Camera to render from (Camera.for_image if None)
        max_depth: Maximum scatter events per path
        num_threads: Worker threads (0 = auto-detect)
        seed: Seed for reproducible renders
        progress_callback: Called with progress in [0, 1] after each band

    Raises:
        ImageWriteError: If the output file cannot be written
    """
    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples,
        max_depth=max_depth,
        num_threads=num_threads,
        seed=seed
    )
    if scene is None:
        scene = default_scene()
    if camera is None:
        camera = Camera.for_image(width, height)

    renderer = Renderer(settings)
    if progress_callback:
        renderer.set_progress_callback(progress_callback)

    with open_sink(output) as stream:
        image = renderer.render(scene, camera)
        write_ppm(renderer.to_ldr(image), stream)
