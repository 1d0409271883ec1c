"""
Evolution Session Module

This module defines the EvolutionSession class: one interactive breeding run.
A session owns everything that must be shared by the generations of a run
and must NOT be shared across runs: the innovation and node ID counters and
the novelty archive.

Classes:
    EvolutionSession: One interactive breeding run
"""

import random
from typing import Iterable

from loguru import logger

from voxbreed.exceptions import VoxbreedError
from voxbreed.genotype   import Genome, InnovationTracker
from voxbreed.novelty    import NoveltyArchive, evaluate_novelty, explore_novelty
from voxbreed.pool       import create_initial_population, breed_next_generation
from voxbreed.run.config import Config
from voxbreed.volume     import MeshingInput, prepare_for_meshing

class EvolutionSession:
    """
    One interactive breeding run.

    The user (or any other collaborator) looks at the current population,
    picks parents and asks for the next generation, or lets novelty search
    pick for them (auto_explore). Every generation is scored by novelty as
    soon as it is bred. The archive itself is not exposed: auto_explore is
    the only way to run a novelty-driven exploration.

    Public Properties:
        config:       Parameters of the run
        population:   The current generation
        generation:   Number of generations bred since start
        archive_size: Number of behaviors in the novelty archive

    Public Methods:
        start(parent):              Create the first generation (optionally from a parent)
        select_and_breed(selected): Breed the next generation from selected parents
        auto_explore():             Breed the next generation by novelty alone
        export_volume(genome):      Voxelize and clean a genome for meshing
        reset():                    Forget the run (fresh counters and archive)
    """

    def __init__(self, config: Config | None = None):
        self._config = config or Config()
        self.reset()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def population(self) -> list[Genome]:
        return list(self._population)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def archive_size(self) -> int:
        return self._archive.size

    def reset(self) -> None:
        self._tracker    = InnovationTracker()
        self._archive    = NoveltyArchive.from_config(self._config)
        self._population: list[Genome] = []
        self._generation = 0
        logger.info("[Session] Reset")

    def start(self, parent: Genome | None = None) -> list[Genome]:
        """
        Create the first generation: mutated seed genomes, or (given a parent,
        e.g. a preset or a shared design) offspring of that parent.

        Returns:
            The new population
        """
        size = self._config.population_size
        if parent is None:
            population = create_initial_population(size, self._tracker, self._config)
        else:
            self._tracker.observe(parent)
            population = breed_next_generation([parent], size, self._tracker, self._config)

        self._population = self._score(population)
        self._generation = 0
        logger.info("[Session] Started with {} genomes{}", size, "" if parent is None else f" from {parent.id}")
        return self.population

    def select_and_breed(self, selected: Iterable[Genome | str]) -> list[Genome]:
        """
        Breed the next generation from the selected parents.

        Parameters:
            selected: The parents, in order of preference; either genomes or IDs
                      of genomes of the current population

        Returns:
            The new population

        Raises:
            KeyError:   if an ID does not belong to the current population
            ValueError: if nothing is selected
        """
        by_id   = {genome.id: genome for genome in self._population}
        parents = []
        for item in selected:
            if isinstance(item, Genome):
                self._tracker.observe(item)
                parents.append(item)
            else:
                parents.append(by_id[item])

        population = breed_next_generation(parents, self._config.population_size, self._tracker, self._config)
        self._population  = self._score(population)
        self._generation += 1
        logger.info("[Session] Generation {} bred from {} parents", self._generation, len(parents))
        return self.population

    def auto_explore(self) -> list[Genome]:
        """
        Breed the next generation by novelty alone.

        The current population is ranked by novelty; its most novel genome
        survives, and every other slot is filled with the most novel of
        'explore_candidates' mutants of one of the 3 most novel genomes.

        Raises:
            VoxbreedError: if the session has not been started
        """
        if not self._population:
            raise VoxbreedError("The session has not been started")

        ranked   = sorted(self._score(self._population), key=lambda genome: genome.novelty or 0.0, reverse=True)
        children = [ranked[0]]

        def mutate_fn(genome: Genome) -> Genome:
            return genome.mutate(self._tracker, self._config)

        while len(children) < self._config.population_size:
            parent = random.choice(ranked[:3])
            children.append(explore_novelty(parent,
                                            self._config.explore_candidates,
                                            mutate_fn,
                                            self._archive,
                                            self._config.behavior_resolution))

        self._population  = children
        self._generation += 1
        logger.info("[Session] Generation {} explored, archive holds {} behaviors", self._generation, self.archive_size)
        return self.population

    def export_volume(self, genome: Genome, resolution: int | None = None) -> MeshingInput:
        """
        Voxelize a genome and clean the field up for the mesher.

        Parameters:
            genome:     The genome to export
            resolution: Voxels per axis ('export_resolution' if None)
        """
        return prepare_for_meshing(genome,
                                   resolution or self._config.export_resolution,
                                   self._config.iso_level,
                                   self._config.envelope_radius)

    def _score(self, population: list[Genome]) -> list[Genome]:
        return evaluate_novelty(population, self._archive, self._config.behavior_resolution)
