"""
Population Module

This module builds populations of genomes: the initial population of a run
and every following generation, bred from the parents selected by the user
(or by novelty).

Functions:
    create_initial_population: Mutated copies of the seed genome
    breed_next_generation:     Offspring of the selected parents
"""

import random

from loguru import logger

from voxbreed.genotype import Genome, InnovationTracker
from voxbreed.run.config import Config

def create_initial_population(size: int, tracker: InnovationTracker, config: Config | None = None) -> list[Genome]:
    """
    Create the initial population: each individual is a seed genome mutated
    'config.initial_mutations' times, for diversity.

    Parameters:
        size:    Number of genomes to create
        tracker: Source of innovation numbers and node IDs for this run
        config:  Mutation and breeding parameters (defaults if None)

    Returns:
        List of 'size' new genomes
    """
    config = config or Config()
    if size < 0:
        raise ValueError(f"Population size must be non-negative, got {size}")

    population = []
    for _ in range(size):
        genome = Genome.seed(tracker)
        for _ in range(config.initial_mutations):
            genome = genome.mutate(tracker, config)
        population.append(genome)

    logger.debug("[Population] Created initial population of {} genomes", size)
    return population

def breed_next_generation(parents  : list[Genome],
                          count    : int,
                          tracker  : InnovationTracker,
                          config   : Config | None = None) -> list[Genome]:
    """
    Breed 'count' offspring from the selected parents.

    Strategy:
      + elitism: the first child is a clone of parents[0]
      + with 2+ parents, a child is produced with probability
        'config.crossover_probability' by crossing two random parents (drawn
        with replacement) and mutating the result; the first one drawn plays
        the role of the fitter parent
      + otherwise a child is a mutation of a random parent

    Parameters:
        parents: The selected parents, in order of preference
        count:   Number of offspring to breed
        tracker: Source of innovation numbers and node IDs for this run
        config:  Mutation and breeding parameters (defaults if None)

    Returns:
        List of exactly 'count' new genomes; the parents are not modified

    Raises:
        ValueError: if there are no parents or 'count' is not positive
    """
    if not parents:
        raise ValueError("Cannot breed a generation without parents")
    if count <= 0:
        raise ValueError(f"Number of offspring must be positive, got {count}")

    config   = config or Config()
    children = [parents[0].clone()]

    while len(children) < count:
        if len(parents) >= 2 and random.random() < config.crossover_probability:
            parent1 = random.choice(parents)
            parent2 = random.choice(parents)
            children.append(parent1.crossover(parent2).mutate(tracker, config))
        else:
            parent = random.choice(parents)
            children.append(parent.mutate(tracker, config))

    logger.debug("[Population] Bred {} offspring from {} parents", count, len(parents))
    return children[:count]
