"""
spheretracer - A Python Monte Carlo Ray Tracer for Sphere Scenes

Renders scenes of spheres with:
- Diffuse, metal and glass materials
- Depth of field (defocus blur)
- Sky gradient lighting
- Row-parallel, seed-reproducible rendering
- PPM and Pillow image output
"""

__version__ = "0.1.0"
__author__ = "spheretracer Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval, EMPTY, UNIVERSE, INTENSITY
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera, CameraOptions, CameraBasis
from .renderer import Renderer, RenderSettings
from .output import linear_to_gamma, to_ldr, format_ppm, write_ppm, save_image
from .errors import SpheretracerError, OptionsError, ImageWriteError
from .timer import Timer
from .scenes import SCENES, two_spheres_scene, material_showcase_scene, random_spheres_scene
