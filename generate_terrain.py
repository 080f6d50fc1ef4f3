# generate_terrain.py

"""
================================================================================
TERRAIN GENERATOR SCRIPT
================================================================================
This script is a command-line tool for generating a fractal-masked terrain and
writing it to disk as an OBJ mesh, a heightmap PNG, a 16-bit RAW heightfield
and the generation_config.json needed to reproduce it.

Usage:
    python generate_terrain.py --config path/to/your/config.json [--seed 42]
================================================================================
"""
import os
import sys
import json
import logging
import argparse

import numpy as np

from terrain_generator import TerrainConfig, TerrainGenerator, ResponseCurve
from terrain_generator import DEFAULT_HEIGHT_CURVE, DEFAULT_INFLUENCE_CURVE
from terrain_generator.exporters import export_terrain

DEFAULT_OUTPUT_ROOT = "generated_terrain"


def load_config(config_path: str) -> dict:
    """Returns the terrain parameters section of a JSON config file."""
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get('terrain_generation_parameters', config)


def run(args: argparse.Namespace) -> int:
    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("TerrainGenerator")

    # 2. --- Load Configuration ---
    params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        try:
            params = load_config(args.config)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1

    if args.mandelbrot:
        params['use_julia_sets'] = False
    elif args.julia:
        params['use_julia_sets'] = True

    height_curve = ResponseCurve.from_keys(params['height_curve']) if 'height_curve' in params else DEFAULT_HEIGHT_CURVE
    influence_curve = ResponseCurve.from_keys(params['influence_curve']) if 'influence_curve' in params else DEFAULT_INFLUENCE_CURVE

    # 3. --- Generate ---
    config = TerrainConfig.from_dict(params)
    rng = np.random.default_rng(args.seed)
    generator = TerrainGenerator(
        config,
        logger=logger,
        rng=rng,
        height_curve=height_curve,
        influence_curve=influence_curve,
    )
    result = generator.generate(progress=args.progress)

    # 4. --- Export ---
    seed_label = f"seed_{args.seed}" if args.seed is not None else "unseeded"
    output_dir = args.output or os.path.join(DEFAULT_OUTPUT_ROOT, seed_label)
    export_terrain(
        result, output_dir, logger,
        curves={'height_curve': height_curve, 'influence_curve': influence_curve},
        extra={'random_source_seed': args.seed},
    )
    logger.info("--- Generation Complete ---")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fractal-masked procedural terrain generator.")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to the JSON configuration file. Defaults are used if omitted."
    )
    parser.add_argument(
        "--output",
        type=str,
        help=f"Output directory. Defaults to {DEFAULT_OUTPUT_ROOT}/seed_<seed>."
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the layout random source. Omit for a different terrain every run."
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--mandelbrot", action="store_true", help="Use the Mandelbrot mask.")
    mode.add_argument("--julia", action="store_true", help="Use the Julia masks.")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar.")
    return parser


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(run(build_parser().parse_args()))
