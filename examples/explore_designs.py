#!/usr/bin/env python3
"""
Explore 3D designs by novelty alone.

Starts a session (from the seed genome or from a preset), lets novelty search
breed a few generations, then exports the most novel design and renders its
network with graphviz.

Usage:
    python examples/explore_designs.py --generations 5
    python examples/explore_designs.py --preset Crystal --config examples/configs/voxbreed.ini
"""

import argparse
import sys

from loguru import logger

from voxbreed.genotype    import encode_genome, get_preset
from voxbreed.novelty     import select_by_novelty
from voxbreed.phenotype   import NetworkFast
from voxbreed.run.config  import Config
from voxbreed.run.session import EvolutionSession
from voxbreed.volume      import count_surface_crossings


def main():
    parser = argparse.ArgumentParser(description='Explore CPPN designs by novelty search')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to an INI configuration file')
    parser.add_argument('--preset', type=str, default=None,
                        help='Start from this preset instead of the seed genome')
    parser.add_argument('--generations', type=int, default=5,
                        help='Number of auto-explore generations')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not open the rendered network')
    parser.add_argument('--verbose', action='store_true',
                        help='Show debug messages')
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level='DEBUG' if args.verbose else 'INFO')

    config  = Config(args.config)
    session = EvolutionSession(config)
    session.start(get_preset(args.preset) if args.preset else None)

    for _ in range(args.generations):
        population = session.auto_explore()
        novelties  = ', '.join(f"{genome.novelty:.3f}" for genome in population)
        print(f"Generation {session.generation:3d}: novelty [{novelties}], archive {session.archive_size}")

    best   = select_by_novelty(session.population, 1)[0]
    result = session.export_volume(best)
    print(f"\nMost novel design: {best!r}")
    print(f"Solid voxels: {result.grid.solid_count(result.iso_level)}, "
          f"surface cells: {count_surface_crossings(result.grid, result.iso_level)}")
    print(f"Share code: {encode_genome(best)}")

    NetworkFast(best).visualize(view=not args.no_view)


if __name__ == '__main__':
    main()
