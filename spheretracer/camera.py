"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at

The user-facing parameters live in the frozen :class:`CameraOptions`.
Everything derived from them is computed once into a frozen
:class:`CameraBasis`; changing an option means building a new camera.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .errors import OptionsError


@dataclass(frozen=True)
class CameraOptions:
    """User-facing camera and sampling parameters."""
    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 400
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0  # vertical view angle, degrees
    lookfrom: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    lookat: Point3 = field(default_factory=lambda: Point3(0, 0, -1))
    vup: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    defocus_angle: float = 0.0  # cone angle of rays through each pixel, degrees
    focus_distance: float = 10.0  # lookfrom to plane of perfect focus
    jitter: bool = True  # False samples every pixel at its centre

    def validate(self) -> None:
        """Check that every field lies in its natural domain.

        Raises:
            OptionsError: describing the first offending field
        """
        if self.image_width <= 0:
            raise OptionsError(f"image_width must be positive, got {self.image_width}")
        if self.aspect_ratio <= 0:
            raise OptionsError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise OptionsError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise OptionsError(f"max_depth must not be negative, got {self.max_depth}")
        if not 0 < self.vfov < 180:
            raise OptionsError(f"vfov must be between 0 and 180 degrees, got {self.vfov}")
        if self.defocus_angle < 0:
            raise OptionsError(f"defocus_angle must not be negative, got {self.defocus_angle}")
        if self.focus_distance <= 0:
            raise OptionsError(f"focus_distance must be positive, got {self.focus_distance}")

        view = self.lookfrom - self.lookat
        if view.near_zero():
            raise OptionsError("lookfrom and lookat must be different points")
        if self.vup.cross(view).near_zero():
            raise OptionsError("vup must not be parallel to the view direction")

    @property
    def image_height(self) -> int:
        return max(1, int(self.image_width / self.aspect_ratio))


@dataclass(frozen=True)
class CameraBasis:
    """Quantities derived from :class:`CameraOptions` before rendering."""
    image_width: int
    image_height: int
    viewport_width: float
    viewport_height: float
    center: Point3
    u: Vec3  # camera right
    v: Vec3  # camera up
    w: Vec3  # opposite the view direction
    pixel_delta_u: Vec3
    pixel_delta_v: Vec3
    pixel00_loc: Point3
    defocus_disk_u: Vec3
    defocus_disk_v: Vec3
    pixel_samples_scale: float

    @classmethod
    def from_options(cls, options: CameraOptions) -> CameraBasis:
        image_width = options.image_width
        image_height = options.image_height
        real_aspect_ratio = image_width / image_height

        theta = math.radians(options.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * options.focus_distance
        viewport_width = viewport_height * real_aspect_ratio

        # Compute orthonormal camera basis
        w = (options.lookfrom - options.lookat).normalize()
        u = options.vup.cross(w).normalize()
        v = w.cross(u)

        center = options.lookfrom

        # Viewport edges; v runs down the image so rows go top to bottom
        viewport_u = u * viewport_width
        viewport_v = -v * viewport_height
        pixel_delta_u = viewport_u / image_width
        pixel_delta_v = viewport_v / image_height

        viewport_upper_left = (
            center
            - w * options.focus_distance
            - viewport_u / 2
            - viewport_v / 2
        )
        pixel00_loc = viewport_upper_left + (pixel_delta_u + pixel_delta_v) * 0.5

        defocus_radius = options.focus_distance * math.tan(math.radians(options.defocus_angle / 2))

        return cls(
            image_width=image_width,
            image_height=image_height,
            viewport_width=viewport_width,
            viewport_height=viewport_height,
            center=center,
            u=u,
            v=v,
            w=w,
            pixel_delta_u=pixel_delta_u,
            pixel_delta_v=pixel_delta_v,
            pixel00_loc=pixel00_loc,
            defocus_disk_u=u * defocus_radius,
            defocus_disk_v=v * defocus_radius,
            pixel_samples_scale=1.0 / options.samples_per_pixel,
        )


class Camera:
    """A camera with perspective projection and depth of field."""

    def __init__(self, options: CameraOptions = None):
        """Create a camera.

        Args:
            options: Camera parameters (uses defaults if None)
        """
        self.options = options if options else CameraOptions()
        self.basis = CameraBasis.from_options(self.options)

    def with_options(self, **changes) -> Camera:
        """Return a new camera with some options replaced."""
        return Camera(replace(self.options, **changes))

    @property
    def image_width(self) -> int:
        return self.basis.image_width

    @property
    def image_height(self) -> int:
        return self.basis.image_height

    def get_ray(self, i: int, j: int, rng: np.random.Generator) -> Ray:
        """Generate a sample ray for pixel column i and row j.

        Row 0 is the top of the image. The ray starts on the defocus disk
        and passes through a jittered point inside the pixel.

        Args:
            i: Pixel column
            j: Pixel row
            rng: Random source owned by the calling worker

        Returns:
            A ray from the camera through the specified pixel
        """
        basis = self.basis
        offset_x, offset_y = self._sample_square(rng)
        pixel_sample = (
            basis.pixel00_loc
            + basis.pixel_delta_u * (i + offset_x)
            + basis.pixel_delta_v * (j + offset_y)
        )

        if self.options.defocus_angle <= 0:
            ray_origin = basis.center
        else:
            ray_origin = self._defocus_disk_sample(rng)

        return Ray(ray_origin, pixel_sample - ray_origin)

    def _sample_square(self, rng: np.random.Generator) -> tuple[float, float]:
        """Random offset in the [-0.5, 0.5] pixel square."""
        if not self.options.jitter:
            return 0.0, 0.0
        return rng.random() - 0.5, rng.random() - 0.5

    def _defocus_disk_sample(self, rng: np.random.Generator) -> Point3:
        p = Vec3.random_in_unit_disk(rng)
        return self.basis.center + self.basis.defocus_disk_u * p.x + self.basis.defocus_disk_v * p.y

    def __repr__(self) -> str:
        return f"Camera(lookfrom={self.options.lookfrom}, lookat={self.options.lookat})"
