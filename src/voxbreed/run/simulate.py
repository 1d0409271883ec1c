"""
Simulated designs: genomes evolved by simulated users, whose "taste" is a
random pick among the current design and a few mutants. Used to fill a
gallery with plausible designs; users can be simulated in parallel with joblib.
"""

import random
from dataclasses import dataclass

import numpy as np
from joblib import Parallel, delayed
from loguru import logger

from voxbreed.behavior   import rgb_to_hue
from voxbreed.genotype   import Genome, InnovationTracker
from voxbreed.phenotype  import NetworkFast
from voxbreed.run.config import Config

# Side of the grid sampled to compute the average hue
HUE_GRID = 8

# Mutants offered to the simulated user at each generation
MUTANTS_PER_GENERATION = 3

@dataclass
class SimulatedDesign:
    genome: Genome
    hue   : float   # degrees, [0, 360)

def simulate_user(generations: int, config: Config | None = None) -> Genome:
    """
    Evolve one design: a mutated seed genome, then at each generation a random
    choice among the current genome and its mutants.
    Every simulated user has its own innovation counters.
    """
    config  = config or Config()
    tracker = InnovationTracker()

    genome = Genome.seed(tracker)
    for _ in range(config.initial_mutations):
        genome = genome.mutate(tracker, config)

    for _ in range(generations):
        candidates = [genome] + [genome.mutate(tracker, config) for _ in range(MUTANTS_PER_GENERATION)]
        genome = random.choice(candidates)

    return genome

def average_hue(genome: Genome) -> float:
    """
    Hue, in degrees, of the average color of the pattern rendered by a genome
    on an 8x8 grid of the z = 0 plane.
    """
    coords = np.arange(HUE_GRID) / (HUE_GRID - 1) * 2 - 1
    ys, xs = np.meshgrid(coords, coords, indexing='ij')
    output = NetworkFast(genome).forward_pass(xs, ys, np.zeros_like(xs))
    return rgb_to_hue(float(output.r.mean()), float(output.g.mean()), float(output.b.mean())) * 360

def _simulate_design(generations: int, config: Config | None) -> SimulatedDesign:
    genome = simulate_user(generations, config)
    return SimulatedDesign(genome, average_hue(genome))

def generate_simulated_designs(user_count : int,
                               generations: int,
                               num_jobs   : int = 1,
                               config     : Config | None = None) -> list[SimulatedDesign]:
    """
    Simulate 'user_count' users evolving a design for 'generations' generations.

    Parameters:
        user_count:  Number of simulated users (one design each)
        generations: Number of generations per user
        num_jobs:    Number of parallel processes
                     1: serial execution, -1: use all available CPU cores
        config:      Mutation parameters (defaults if None)

    Returns:
        The designs, sorted by average hue
    """
    if num_jobs == 1:
        designs = [_simulate_design(generations, config) for _ in range(user_count)]
    else:
        designs = Parallel(num_jobs)(delayed(_simulate_design)(generations, config) for _ in range(user_count))

    designs.sort(key=lambda design: design.hue)
    logger.info("[Session] Simulated {} designs over {} generations", user_count, generations)
    return designs
