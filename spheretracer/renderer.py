"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive path tracing bounded by the camera's max depth
- Sky gradient background
- Row-parallel rendering on a thread or process pool

Every image row draws from its own random generator spawned from a single
seed, so a seeded render produces the same pixels whatever the worker count.
"""

from __future__ import annotations
import logging
import math
import os
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .vec3 import Color
from .ray import Ray
from .interval import Interval
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

# Lower bound on hit distances; ignores re-hits caused by rounding at t≈0
HIT_EPSILON = 1e-5

BLACK = Color(0.0, 0.0, 0.0)
SKY_WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)


@dataclass
class RenderSettings:
    """Execution settings for the renderer."""
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    use_processes: bool = False

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer with multi-worker support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Execution configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear image as a numpy array.

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear color image of shape (image_height, image_width, 3)
        """
        width = camera.image_width
        height = camera.image_height
        options = camera.options

        logger.info(
            "Rendering %dx%d, %d samples/pixel, max depth %d, %d worker(s)",
            width, height, options.samples_per_pixel, options.max_depth,
            self.settings.num_threads,
        )

        image = np.zeros((height, width, 3), dtype=np.float64)
        row_seeds = np.random.SeedSequence(self.settings.seed).spawn(height)

        if self.settings.num_threads > 1:
            with self._make_executor(world, camera) as executor:
                futures = [
                    self._submit_row(executor, world, camera, j, row_seeds[j])
                    for j in range(height)
                ]
                for done, future in enumerate(as_completed(futures), start=1):
                    j, row = future.result()
                    image[j] = row
                    self._row_finished(j, done, height)
        else:
            for j in range(height):
                _, image[j] = render_row(world, camera, j, row_seeds[j])
                self._row_finished(j, j + 1, height)

        return image

    def _make_executor(self, world: Hittable, camera: Camera) -> Executor:
        if self.settings.use_processes:
            # Each worker unpickles the scene once, not once per row
            return ProcessPoolExecutor(
                max_workers=self.settings.num_threads,
                initializer=init_worker_scene,
                initargs=(world, camera),
            )
        return ThreadPoolExecutor(max_workers=self.settings.num_threads)

    def _submit_row(self, executor: Executor, world: Hittable, camera: Camera,
                    j: int, seed: np.random.SeedSequence) -> Future:
        if self.settings.use_processes:
            return executor.submit(render_worker_row, j, seed)
        return executor.submit(render_row, world, camera, j, seed)

    def _row_finished(self, row: int, done: int, total: int) -> None:
        logger.debug("Row %d finished (%d/%d)", row, done, total)
        if self._progress_callback:
            self._progress_callback(done / total)

    @staticmethod
    def pixel_color(world: Hittable, camera: Camera, i: int, j: int,
                    rng: np.random.Generator) -> Color:
        """Average the radiance of every sample ray through pixel (i, j)."""
        options = camera.options
        pixel = BLACK
        for _ in range(options.samples_per_pixel):
            ray = camera.get_ray(i, j, rng)
            pixel = pixel + Renderer.ray_color(ray, world, options.max_depth, rng)
        return pixel * camera.basis.pixel_samples_scale

    @staticmethod
    def ray_color(ray: Ray, world: Hittable, depth: int,
                  rng: np.random.Generator) -> Color:
        """Compute the color for a ray using path tracing.

        Args:
            ray: The ray to trace
            world: The scene to trace against
            depth: Remaining number of bounces
            rng: Random source for material sampling

        Returns:
            The computed color for this ray
        """
        # Out of bounces: the path carries no more light
        if depth <= 0:
            return BLACK

        hit_record = world.hit(ray, Interval(HIT_EPSILON, math.inf))

        if hit_record is None:
            return Renderer.sky_color(ray)

        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return BLACK

        return scatter_result.attenuation * Renderer.ray_color(
            scatter_result.scattered_ray, world, depth - 1, rng
        )

    @staticmethod
    def sky_color(ray: Ray) -> Color:
        """Generate a sky gradient background.

        Args:
            ray: The ray direction to use for gradient

        Returns:
            White looking straight down, light blue looking straight up
        """
        unit_direction = ray.direction.normalize()
        a = 0.5 * (unit_direction.y + 1.0)
        return SKY_WHITE * (1.0 - a) + SKY_BLUE * a


def render_row(world: Hittable, camera: Camera, j: int,
               seed: np.random.SeedSequence) -> tuple[int, np.ndarray]:
    """Render image row j with a generator built from its own seed.

    Module level so a process pool can pickle it.
    """
    rng = np.random.default_rng(seed)
    row = np.empty((camera.image_width, 3), dtype=np.float64)
    for i in range(camera.image_width):
        row[i] = Renderer.pixel_color(world, camera, i, j, rng).to_array()
    return j, row


# Scene held by each pool worker process, set once by init_worker_scene
_worker_scene: Optional[tuple[Hittable, Camera]] = None


def init_worker_scene(world: Hittable, camera: Camera) -> None:
    """Process pool initializer: keep the scene for every row this worker renders."""
    global _worker_scene
    _worker_scene = (world, camera)


def render_worker_row(j: int, seed: np.random.SeedSequence) -> tuple[int, np.ndarray]:
    """Render row j of the scene installed by init_worker_scene."""
    if _worker_scene is None:
        raise RuntimeError("worker scene not initialized")
    world, camera = _worker_scene
    return render_row(world, camera, j, seed)
