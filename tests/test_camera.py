"""Tests for Camera class."""

import dataclasses
import math
import pytest
import numpy as np

from spheretracer.vec3 import Vec3, Point3
from spheretracer.camera import Camera, CameraOptions, CameraBasis
from spheretracer.errors import OptionsError


@pytest.fixture
def rng():
    return np.random.default_rng(11)


def square_options(**changes):
    """A 1:1 camera looking down -z from the origin without jitter."""
    base = CameraOptions(aspect_ratio=1.0, image_width=11, jitter=False)
    return dataclasses.replace(base, **changes)


class TestCameraOptions:
    """Test option defaults and validation."""

    def test_defaults(self):
        opts = CameraOptions()
        assert opts.aspect_ratio == pytest.approx(16 / 9)
        assert opts.vfov == 90
        assert opts.lookfrom == Point3(0, 0, 0)
        assert opts.lookat == Point3(0, 0, -1)
        assert opts.vup == Vec3(0, 1, 0)
        assert opts.defocus_angle == 0
        assert opts.focus_distance == 10
        assert opts.jitter is True

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CameraOptions().image_width = 10

    def test_image_height_rounds_down(self):
        assert CameraOptions(image_width=400).image_height == 225
        assert CameraOptions(image_width=100, aspect_ratio=3.0).image_height == 33

    def test_image_height_at_least_one(self):
        assert CameraOptions(image_width=1, aspect_ratio=16 / 9).image_height == 1

    def test_valid_defaults(self):
        CameraOptions().validate()

    @pytest.mark.parametrize("changes", [
        {'image_width': 0},
        {'samples_per_pixel': 0},
        {'aspect_ratio': -1.0},
        {'max_depth': -1},
        {'vfov': 0},
        {'vfov': 180},
        {'defocus_angle': -0.5},
        {'focus_distance': 0},
        {'lookat': Point3(0, 0, 0)},
        {'vup': Vec3(0, 0, 2)},
    ])
    def test_invalid_options(self, changes):
        with pytest.raises(OptionsError):
            dataclasses.replace(CameraOptions(), **changes).validate()

    def test_options_error_is_value_error(self):
        with pytest.raises(ValueError):
            CameraOptions(image_width=-3).validate()


class TestCameraBasis:
    """Test derived camera quantities."""

    def test_orthonormal_basis(self):
        basis = CameraBasis.from_options(CameraOptions(lookfrom=Point3(3, 2, 1), lookat=Point3(0, 0, 0)))
        for axis in (basis.u, basis.v, basis.w):
            assert axis.length() == pytest.approx(1.0)
        assert basis.u.dot(basis.v) == pytest.approx(0.0, abs=1e-12)
        assert basis.u.dot(basis.w) == pytest.approx(0.0, abs=1e-12)
        assert basis.v.dot(basis.w) == pytest.approx(0.0, abs=1e-12)

    def test_default_axes(self):
        basis = CameraBasis.from_options(CameraOptions())
        assert basis.w == Vec3(0, 0, 1)
        assert basis.u == Vec3(1, 0, 0)
        assert basis.v == Vec3(0, 1, 0)

    def test_viewport_size(self):
        basis = CameraBasis.from_options(square_options(vfov=90, focus_distance=2.0))
        assert basis.viewport_height == pytest.approx(4.0)
        assert basis.viewport_width == pytest.approx(4.0)

    def test_viewport_uses_real_aspect_ratio(self):
        opts = CameraOptions(image_width=400, aspect_ratio=16 / 9)
        basis = CameraBasis.from_options(opts)
        assert basis.viewport_width / basis.viewport_height == pytest.approx(400 / 225)

    def test_pixel_grid(self):
        basis = CameraBasis.from_options(square_options(focus_distance=1.0))
        # Viewport is 2x2 at z=-1, 11 pixels each way
        assert basis.pixel_delta_u == Vec3(2 / 11, 0, 0)
        assert basis.pixel_delta_v == Vec3(0, -2 / 11, 0)
        assert basis.pixel00_loc == Point3(-1 + 1 / 11, 1 - 1 / 11, -1)

    def test_defocus_disk_radius(self):
        basis = CameraBasis.from_options(CameraOptions(defocus_angle=10.0, focus_distance=3.4))
        expected = 3.4 * math.tan(math.radians(5.0))
        assert basis.defocus_disk_u.length() == pytest.approx(expected)
        assert basis.defocus_disk_v.length() == pytest.approx(expected)

    def test_sample_scale(self):
        assert CameraBasis.from_options(CameraOptions(samples_per_pixel=4)).pixel_samples_scale == 0.25

    def test_with_options_recomputes_basis(self):
        camera = Camera(square_options())
        wider = camera.with_options(image_width=21)
        assert camera.image_width == 11
        assert wider.image_width == 21
        assert wider.basis.pixel_delta_u.length() < camera.basis.pixel_delta_u.length()
        assert wider.options.aspect_ratio == camera.options.aspect_ratio


class TestCameraRays:
    """Test Camera.get_ray() method."""

    def test_center_ray(self, rng):
        camera = Camera(square_options())
        ray = camera.get_ray(5, 5, rng)
        assert ray.origin == Point3(0, 0, 0)
        direction = ray.direction.normalize()
        assert direction == Vec3(0, 0, -1)

    def test_top_left_ray(self, rng):
        camera = Camera(square_options())
        ray = camera.get_ray(0, 0, rng)
        assert ray.direction.x < 0
        assert ray.direction.y > 0
        assert ray.direction.z < 0

    def test_bottom_right_ray(self, rng):
        camera = Camera(square_options())
        ray = camera.get_ray(10, 10, rng)
        assert ray.direction.x > 0
        assert ray.direction.y < 0

    def test_ray_passes_through_pixel_on_focus_plane(self, rng):
        camera = Camera(square_options(focus_distance=5.0))
        ray = camera.get_ray(3, 7, rng)
        assert ray.at(1.0) == camera.basis.pixel00_loc + camera.basis.pixel_delta_u * 3 + camera.basis.pixel_delta_v * 7

    def test_jitter_stays_inside_pixel(self, rng):
        camera = Camera(square_options(jitter=True, focus_distance=1.0))
        center = camera.basis.pixel00_loc + camera.basis.pixel_delta_u * 4 + camera.basis.pixel_delta_v * 6
        half = camera.basis.pixel_delta_u.length() / 2
        offsets = []
        for _ in range(100):
            point = camera.get_ray(4, 6, rng).at(1.0)
            offset = point - center
            assert abs(offset.x) <= half + 1e-12
            assert abs(offset.y) <= half + 1e-12
            offsets.append(offset.x)
        assert max(offsets) - min(offsets) > half

    def test_no_jitter_is_deterministic(self):
        camera = Camera(square_options())
        a = camera.get_ray(2, 3, np.random.default_rng(1))
        b = camera.get_ray(2, 3, np.random.default_rng(2))
        assert a.direction == b.direction

    def test_narrow_fov(self, rng):
        narrow = Camera(square_options(vfov=20))
        wide = Camera(square_options(vfov=90))
        forward = Vec3(0, 0, -1)
        assert (narrow.get_ray(0, 0, rng).direction.normalize().dot(forward)
                > wide.get_ray(0, 0, rng).direction.normalize().dot(forward))

    def test_looking_down(self, rng):
        camera = Camera(square_options(lookfrom=Point3(0, 10, 0), lookat=Point3(0, 0, 0), vup=Vec3(0, 0, -1)))
        assert camera.get_ray(5, 5, rng).direction.y < 0

    def test_angled_camera(self, rng):
        camera = Camera(square_options(lookfrom=Point3(5, 5, 5), lookat=Point3(0, 0, 0), vfov=60))
        ray = camera.get_ray(5, 5, rng)
        target = (Point3(0, 0, 0) - ray.origin).normalize()
        assert ray.direction.normalize().dot(target) == pytest.approx(1.0)


class TestDepthOfField:
    """Test Camera depth of field."""

    def test_defocus_varies_origin(self, rng):
        camera = Camera(square_options(defocus_angle=20.0, focus_distance=10.0))
        origins = [camera.get_ray(5, 5, rng).origin for _ in range(100)]
        xs = [o.x for o in origins]
        assert max(xs) - min(xs) > 0.1

    def test_origins_inside_defocus_disk(self, rng):
        camera = Camera(square_options(defocus_angle=20.0, focus_distance=10.0))
        radius = 10.0 * math.tan(math.radians(10.0))
        for _ in range(100):
            origin = camera.get_ray(5, 5, rng).origin
            assert origin.length() < radius
            assert origin.z == pytest.approx(0.0)

    def test_rays_converge_on_focus_plane(self, rng):
        camera = Camera(square_options(defocus_angle=20.0, focus_distance=10.0))
        target = camera.basis.pixel00_loc + camera.basis.pixel_delta_u * 5 + camera.basis.pixel_delta_v * 5
        for _ in range(20):
            assert camera.get_ray(5, 5, rng).at(1.0) == target

    def test_no_defocus_fixed_origin(self, rng):
        camera = Camera(square_options(defocus_angle=0.0))
        for _ in range(10):
            assert camera.get_ray(5, 5, rng).origin == Point3(0, 0, 0)
