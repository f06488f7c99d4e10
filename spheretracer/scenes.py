"""
Built-in scenes.

Each builder returns the world together with the camera options it was
composed for.
"""

from __future__ import annotations
from typing import Callable, Optional

import numpy as np

from .vec3 import Vec3, Color, Point3
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .camera import CameraOptions

Scene = tuple[HittableList, CameraOptions]


def two_spheres_scene(rng: Optional[np.random.Generator] = None) -> Scene:
    """A small diffuse sphere resting on a large ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))

    options = CameraOptions(
        lookfrom=Point3(0, 0, 0),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        defocus_angle=0.0,
    )
    return world, options


def material_showcase_scene(rng: Optional[np.random.Generator] = None) -> Scene:
    """Diffuse, hollow glass and metal spheres side by side."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    bubble = Dielectric(1.0 / 1.5)
    right = Metal(Color(0.8, 0.6, 0.2), 1.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1.2), 0.5, center))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), 0.4, bubble))
    world.add(Sphere(Point3(1, 0, -1), 0.5, right))

    options = CameraOptions(
        vfov=20,
        lookfrom=Point3(-2, 2, 1),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        defocus_angle=10.0,
        focus_distance=3.4,
        samples_per_pixel=50,
        max_depth=20,
    )
    return world, options


# Feature spheres of the random scene
FEATURE_RADIUS = 1.0
FEATURE_HEIGHT = 1.0
METAL_CENTER = Point3(3.5, FEATURE_HEIGHT, 0)
GLASS_CENTER = Point3(0, FEATURE_HEIGHT, 0)
DIFFUSE_CENTER = Point3(-4, FEATURE_HEIGHT, 0)
HOLLOW_GLASS_CENTER = Point3(0, FEATURE_HEIGHT, 4)

SMALL_RADIUS = 0.2
GRID_HALF_EXTENT = 16


def _clear_of_features(center: Point3) -> bool:
    min_distance = FEATURE_RADIUS + SMALL_RADIUS
    return all(
        (feature - center).length() > min_distance
        for feature in (METAL_CENTER, GLASS_CENTER, DIFFUSE_CENTER, HOLLOW_GLASS_CENTER)
    )


def _random_material(rng: np.random.Generator) -> Material:
    choice = rng.random()
    if choice < 0.7:
        return Lambertian(Color.random(rng))
    if choice < 0.9:
        return Metal(Color.random(rng, 0.5, 1.0), rng.uniform(0.0, 0.5))
    return Dielectric(1.5)


def random_spheres_scene(rng: Optional[np.random.Generator] = None) -> Scene:
    """A field of small random spheres around four large feature spheres.

    Args:
        rng: Generator for sphere placement and materials; a fresh unseeded
            one is used if None
    """
    if rng is None:
        rng = np.random.default_rng()

    world = HittableList()
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    for a in range(-GRID_HALF_EXTENT, GRID_HALF_EXTENT):
        for b in range(-GRID_HALF_EXTENT, GRID_HALF_EXTENT):
            material = _random_material(rng)
            center = Point3(a + 0.8 * rng.random(), SMALL_RADIUS, b + 0.8 * rng.random())
            if _clear_of_features(center):
                world.add(Sphere(center, SMALL_RADIUS, material))

    world.add(Sphere(METAL_CENTER, FEATURE_RADIUS, Metal(Color(0.7, 0.6, 0.5), 0.0)))
    world.add(Sphere(GLASS_CENTER, FEATURE_RADIUS, Dielectric(1.5)))
    world.add(Sphere(DIFFUSE_CENTER, FEATURE_RADIUS, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(HOLLOW_GLASS_CENTER, FEATURE_RADIUS, Dielectric(1.5)))
    # Air bubble inside the hollow glass sphere
    world.add(Sphere(HOLLOW_GLASS_CENTER, FEATURE_RADIUS - 0.2, Dielectric(1.0 / 1.5)))

    options = CameraOptions(
        aspect_ratio=16.0 / 9.0,
        image_width=1600,
        samples_per_pixel=250,
        max_depth=50,
        vfov=25,
        lookfrom=Point3(11, 3, 8),
        lookat=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        defocus_angle=0.1,
        focus_distance=12,
    )
    return world, options


SCENES: dict[str, Callable[[Optional[np.random.Generator]], Scene]] = {
    'two-spheres': two_spheres_scene,
    'showcase': material_showcase_scene,
    'random': random_spheres_scene,
}
