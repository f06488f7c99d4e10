#!/usr/bin/env python3
"""
spheretracer - A Python Monte Carlo Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

import numpy as np

from spheretracer.camera import Camera
from spheretracer.errors import ImageWriteError, OptionsError
from spheretracer.output import save_image
from spheretracer.renderer import Renderer, RenderSettings
from spheretracer.scenes import SCENES
from spheretracer.timer import Timer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='spheretracer - A Python Monte Carlo Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene two-spheres --width 400 --output render.ppm
  python main.py --scene random --samples 50 --processes --output final.png
  python main.py --scene showcase --seed 42 --threads 1
        '''
    )

    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Scene to render (default: random)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: scene setting)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: scene setting)')
    parser.add_argument('--depth', type=int, default=None, help='Max ray depth (default: scene setting)')
    parser.add_argument('--threads', type=int, default=0, help='Number of workers (0=auto)')
    parser.add_argument('--processes', action='store_true',
                        help='Render rows in worker processes instead of threads')
    parser.add_argument('--seed', type=int, default=None, help='Seed for scene and sampling')
    parser.add_argument('--output', type=str, default='output.ppm', help='Output filename')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Print header
    print("=" * 60)
    print("spheretracer")
    print("=" * 60)

    timer = Timer()

    scene_rng = np.random.default_rng(args.seed)
    world, options = SCENES[args.scene](scene_rng)

    overrides = {}
    if args.width is not None:
        overrides['image_width'] = args.width
    if args.samples is not None:
        overrides['samples_per_pixel'] = args.samples
    if args.depth is not None:
        overrides['max_depth'] = args.depth
    options = dataclasses.replace(options, **overrides)

    try:
        options.validate()
    except OptionsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    output_path = Path(args.output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"Error: Cannot create output directory {output_path.parent}: {exc}", file=sys.stderr)
        return 1

    camera = Camera(options)
    settings = RenderSettings(
        num_threads=args.threads,
        seed=args.seed,
        use_processes=args.processes,
    )

    print(f"\nRender Settings:")
    print(f"  Scene: {args.scene} ({len(world)} objects)")
    print(f"  Resolution: {camera.image_width}x{camera.image_height}")
    print(f"  Samples: {options.samples_per_pixel}")
    print(f"  Max Depth: {options.max_depth}")
    print(f"  Workers: {settings.num_threads} ({'processes' if settings.use_processes else 'threads'})")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    timer.report("[render]: calculating pixels...")
    image = renderer.render(world, camera)
    print()
    timer.report("[render]: calculating pixels done.")

    timer.report("[render]: writing to file...")
    try:
        save_image(output_path, image)
    except ImageWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    timer.report("[render]: writing to file done.")

    print(f"\nSaved to: {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
