#!/usr/bin/env python3
"""
raylite - A small Python path tracer

Main entry point for rendering scenes and running benchmarks.
"""

import argparse
import logging
import sys
import tempfile
import time
from pathlib import Path

from raylite.camera import Camera
from raylite.ppm import ImageWriteError
from raylite.renderer import raytrace
from raylite.scenes import SCENES
from raylite.benchmark import DEFAULT_CASES, run_benchmarks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='raylite - A small Python path tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output rays.ppm
  python main.py --width 160 --height 120 --samples 4 --scene ground
  python main.py --benchmark --repeat 5
        '''
    )

    parser.add_argument('--width', type=int, default=320, help='Image width (default: 320)')
    parser.add_argument('--height', type=int, default=240, help='Image height (default: 240)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=1, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible renders')
    parser.add_argument('--output', type=str, default='rays.ppm', help='Output filename (default: rays.ppm)')
    parser.add_argument('--scene', type=str, default='default', choices=sorted(SCENES),
                        help='Scene to render (default: default)')
    parser.add_argument('--benchmark', action='store_true', help='Run the benchmark suite and exit')
    parser.add_argument('--repeat', type=int, default=3, help='Timed runs per benchmark case (default: 3)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def run_benchmark(args) -> int:
    print("=" * 60)
    print("raylite benchmark")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as output_dir:
        results = run_benchmarks(output_dir, DEFAULT_CASES, repeat=args.repeat, seed=args.seed)

    for result in results:
        print(f"  {result.case.group:<22} {result.case.name:<12} "
              f"best {result.best:8.3f}s  mean {result.mean:8.3f}s  "
              f"{result.samples_per_second:10.0f} samples/s")
    return 0


def ensure_output_dir(path: Path) -> None:
    """Create the output file's parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ImageWriteError(path, exc) from exc


def run_render(args) -> int:
    print("=" * 60)
    print("raylite")
    print("=" * 60)
    print(f"  Resolution: {args.width}x{args.height}")
    print(f"  Samples: {args.samples}")
    print(f"  Max Depth: {args.depth}")
    print(f"  Threads: {args.threads}")
    print(f"  Scene: {args.scene}")

    world = SCENES[args.scene]()
    camera = Camera.for_image(args.width, args.height)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    output_path = Path(args.output)

    print("\nRendering...")
    start_time = time.time()

    try:
        ensure_output_dir(output_path)
        raytrace(
            args.width, args.height, args.samples, output_path,
            scene=world,
            camera=camera,
            max_depth=args.depth,
            num_threads=args.threads,
            seed=args.seed,
            progress_callback=progress_callback
        )
    except ImageWriteError as exc:
        print(f"\nError: {exc}", file=sys.stderr)
        return 1

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(args.width * args.height * args.samples) / elapsed:.0f}")
    print(f"\nSaved to: {output_path}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    for name in ('width', 'height', 'samples', 'repeat'):
        if getattr(args, name) <= 0:
            parser.error(f"--{name} must be positive")
    if args.depth < 0:
        parser.error("--depth must be non-negative")

    if args.benchmark:
        return run_benchmark(args)
    return run_render(args)


if __name__ == '__main__':
    sys.exit(main())
