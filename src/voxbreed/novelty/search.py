"""
Novelty Search Module

Functions scoring genomes by novelty and using the scores to choose and
explore designs.

Functions:
    evaluate_novelty:  Annotate genomes with behavior and novelty, updating the archive
    select_by_novelty: The most novel genomes
    explore_novelty:   The most novel of several mutated children of a parent
"""

from typing import Callable

from loguru import logger

from voxbreed.behavior       import extract_behavior
from voxbreed.genotype       import Genome
from voxbreed.novelty.archive import NoveltyArchive

def evaluate_novelty(population: list[Genome],
                     archive   : NoveltyArchive,
                     resolution: int = 16) -> list[Genome]:
    """
    Score every genome of a population by novelty.

    Each genome's behavior is extracted (or reused, when cached on the genome);
    its sparseness is computed against the archive and the whole population,
    and it is offered to the archive. Genomes are processed in order, so later
    genomes are also compared against behaviors archived earlier in the call.

    Parameters:
        population: The genomes to score (annotated in place)
        archive:    The novelty archive of the run
        resolution: Sampling resolution used to extract behaviors

    Returns:
        The same genomes, with 'novelty' and 'behavior_descriptor' set
    """
    behaviors = []
    for genome in population:
        if genome.behavior_descriptor is None:
            genome.behavior_descriptor = extract_behavior(genome, resolution)
        behaviors.append(genome.behavior_descriptor)

    for genome, behavior in zip(population, behaviors):
        _, sparseness  = archive.maybe_add(behavior, genome.id, behaviors)
        genome.novelty = sparseness

    return population

def select_by_novelty(population: list[Genome], count: int) -> list[Genome]:
    """
    Return the 'count' most novel genomes, most novel first. Genomes never
    scored count as novelty 0; ties keep their population order.
    """
    ranked = sorted(population, key=lambda genome: genome.novelty or 0.0, reverse=True)
    return ranked[:count]

def explore_novelty(parent         : Genome,
                    candidate_count: int,
                    mutate_fn      : Callable[[Genome], Genome],
                    archive        : NoveltyArchive,
                    resolution     : int = 16) -> Genome:
    """
    Generate 'candidate_count' mutated children of a parent, score them together
    and return the most novel one (the first one found, in case of a tie).

    Parameters:
        parent:          The genome to explore from
        candidate_count: Number of children to generate
        mutate_fn:       Returns a mutated child of the genome it is given
        archive:         The novelty archive of the run (updated by the scoring)
        resolution:      Sampling resolution used to extract behaviors

    Raises:
        ValueError: if candidate_count is below 1
    """
    if candidate_count < 1:
        raise ValueError(f"Number of candidates must be at least 1, got {candidate_count}")

    candidates = [mutate_fn(parent) for _ in range(candidate_count)]
    evaluate_novelty(candidates, archive, resolution)

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.novelty > best.novelty:
            best = candidate

    logger.debug("[Archive] Explored {} candidates from genome {}, best novelty {:.3f}",
                 candidate_count, parent.id, best.novelty)
    return best
