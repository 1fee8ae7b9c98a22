"""Tests for Renderer class and the raytrace entry point."""

import os
import threading

import numpy as np
import pytest

from raylite.vec3 import Vec3, Point3, Color
from raylite.camera import Camera
from raylite.shapes import Sphere, HittableList
from raylite.materials import Material
from raylite.scenes import ground_scene
from raylite.ppm import ImageWriteError, read_ppm
from raylite.renderer import Renderer, RenderSettings, raytrace


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.width == 320
        assert settings.height == 240
        assert settings.samples_per_pixel == 100
        assert settings.max_depth == 50
        assert settings.num_threads == 1
        assert settings.seed is None

    def test_auto_thread_detection(self):
        settings = RenderSettings(num_threads=0)
        assert settings.num_threads == (os.cpu_count() or 4)

    @pytest.mark.parametrize("field", ["width", "height", "samples_per_pixel", "band_height"])
    def test_rejects_non_positive(self, field):
        with pytest.raises(ValueError):
            RenderSettings(**{field: 0})

    def test_rejects_negative_depth(self):
        with pytest.raises(ValueError):
            RenderSettings(max_depth=-1)


class TestRendererBasic:
    """Test basic renderer functionality."""

    def _render(self, scene, **kwargs):
        settings = RenderSettings(**{
            'width': 12, 'height': 8, 'samples_per_pixel': 1, 'seed': 3, **kwargs
        })
        camera = Camera.for_image(settings.width, settings.height)
        return Renderer(settings).render(scene, camera)

    def test_render_produces_image(self):
        image = self._render(ground_scene())
        assert image.shape == (8, 12, 3)
        assert image.dtype == np.float64
        assert np.all(image >= 0.0)
        assert np.all(image <= 1.0)

    def test_empty_scene_is_sky_gradient(self):
        image = self._render(HittableList())
        # Top rows look further up, so they are bluer (lower red)
        assert image[0, 6, 0] < image[-1, 6, 0]
        assert np.allclose(image[..., 2], 1.0)

    def test_ground_fills_bottom_rows(self):
        image = self._render(ground_scene(), samples_per_pixel=4)
        # Ground albedo has no blue channel, sky is fully blue
        assert image[-1, :, 2].max() == 0.0
        assert image[0, :, 2].min() > 0.999

    def test_same_seed_reproducible(self):
        a = self._render(ground_scene(), seed=42)
        b = self._render(ground_scene(), seed=42)
        assert np.array_equal(a, b)

    def test_threads_do_not_change_seeded_result(self):
        serial = self._render(ground_scene(), seed=9, band_height=2)
        threaded = self._render(ground_scene(), seed=9, band_height=2, num_threads=3)
        assert np.array_equal(serial, threaded)

    def test_different_seeds_differ(self):
        a = self._render(ground_scene(), seed=1, samples_per_pixel=2)
        b = self._render(ground_scene(), seed=2, samples_per_pixel=2)
        assert not np.array_equal(a, b)

    def test_progress_callback(self):
        settings = RenderSettings(width=4, height=10, samples_per_pixel=1, band_height=3)
        renderer = Renderer(settings)
        progress = []
        renderer.set_progress_callback(progress.append)
        renderer.render(HittableList(), Camera.for_image(4, 10))
        assert progress == pytest.approx([0.25, 0.5, 0.75, 1.0])

    def test_threaded_progress_reaches_completion(self):
        settings = RenderSettings(width=3, height=12, samples_per_pixel=1, band_height=1, num_threads=4)
        renderer = Renderer(settings)
        calls = []
        renderer.set_progress_callback(lambda p: calls.append((p, threading.get_ident())))
        renderer.render(HittableList(), Camera.for_image(3, 12))

        progress = [p for p, _ in calls]
        assert progress == pytest.approx([k / 12 for k in range(1, 13)])
        assert {tid for _, tid in calls} == {threading.get_ident()}

    def test_generate_bands_cover_all_rows(self):
        renderer = Renderer(RenderSettings(band_height=4))
        assert renderer._generate_bands(10) == [(0, 4), (4, 8), (8, 10)]


class TestToneCurve:
    """Test gamma correction and quantization."""

    def test_to_ldr_values(self):
        image = np.array([[[0.0, 0.25, 1.0], [0.5, 0.01, 0.81]]])
        ldr = Renderer.to_ldr(image)
        assert ldr.dtype == np.uint8
        assert ldr.tolist() == [[[0, 127, 255], [181, 25, 230]]]

    def test_to_ldr_clamps(self):
        ldr = Renderer.to_ldr(np.array([[[-0.5, 1.5, 1.0]]]))
        assert ldr.tolist() == [[[0, 255, 255]]]

    def test_save_image_ppm(self, tmp_path):
        path = tmp_path / "img.ppm"
        Renderer().save_image(np.full((2, 2, 3), 0.25), path)
        parsed = read_ppm(path.read_text())
        assert parsed.shape == (2, 2, 3)
        assert np.all(parsed == 127)

    def test_save_image_png(self, tmp_path):
        from PIL import Image as PILImage

        path = tmp_path / "img.png"
        Renderer().save_image(np.full((3, 5, 3), 1.0), path)
        with PILImage.open(path) as img:
            assert img.size == (5, 3)
            assert img.getpixel((0, 0)) == (255, 255, 255)
        assert os.listdir(tmp_path) == ["img.png"]

    def test_save_image_unknown_extension(self, tmp_path):
        with pytest.raises(ValueError):
            Renderer().save_image(np.zeros((1, 1, 3)), tmp_path / "img.nope")


class TestRaytrace:
    """Test the file-producing entry point."""

    def test_end_to_end_ground_scene(self, tmp_path):
        path = tmp_path / "rays.ppm"
        raytrace(160, 120, 1, path, scene=ground_scene())

        lines = path.read_text().splitlines()
        assert lines[0] == "P3"
        assert lines[1] == "160 120"
        assert lines[2] == "255"
        assert len(lines) == 3 + 160 * 120

        for line in lines[3:]:
            channels = [int(c) for c in line.split()]
            assert len(channels) == 3
            assert all(0 <= c <= 255 for c in channels)

        assert read_ppm(path.read_text()).shape == (120, 160, 3)

    def test_default_scene(self, tmp_path):
        path = tmp_path / "rays.ppm"
        raytrace(16, 12, 2, path, seed=5)
        assert read_ppm(path.read_text()).shape == (12, 16, 3)

    def test_seeded_output_identical(self, tmp_path):
        a = tmp_path / "a.ppm"
        b = tmp_path / "b.ppm"
        raytrace(10, 6, 1, a, seed=11)
        raytrace(10, 6, 1, b, seed=11, num_threads=2)
        assert a.read_text() == b.read_text()

    def test_unwritable_path_fails_before_rendering(self, tmp_path):
        class ExplodingScene(HittableList):
            def hit(self, ray, t_min, t_max):
                raise AssertionError("render should not start")

        path = tmp_path / "no" / "such" / "dir" / "rays.ppm"
        with pytest.raises(ImageWriteError) as excinfo:
            raytrace(4, 4, 1, path, scene=ExplodingScene())
        assert str(path) in str(excinfo.value)
        assert not path.exists()

    def test_custom_camera(self, tmp_path):
        path = tmp_path / "rays.ppm"
        camera = Camera.look_at(Point3(0, 0, 0), Point3(0, 1, 0), vup=Vec3(0, 0, -1), vfov=10, aspect_ratio=1.0)
        scene = HittableList([Sphere(Point3(0, -100.5, -1), 100, Material.diffuse(Color(0.5, 0.5, 0.5)))])
        raytrace(4, 4, 1, path, scene=scene, camera=camera)
        image = read_ppm(path.read_text())
        # Looking straight up at the sky: almost pure sky blue
        assert np.all(image[..., 2] == 255)
        assert np.all(image[..., 0] < 200)
