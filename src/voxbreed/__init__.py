"""
voxbreed - Interactive evolution of 3D printable designs.

Designs are Compositional Pattern Producing Networks (CPPNs): small
feedforward networks mapping a coordinate (x, y, z) to a density and a color.
Genomes are evolved with NEAT-style operators, steered by the user's choices
or by novelty search, rendered as 2D color fields and exported as 3D density
volumes ready for mesh extraction.

Main components:
- activations: Activation functions of CPPN nodes
- genotype: Genetic encoding (genomes, genes, innovation tracking, sharing codec, presets)
- phenotype: Genome evaluation (point and batched evaluators)
- pool: Initial population and breeding
- behavior: Behavior descriptors of rendered patterns
- novelty: Novelty archive and novelty-driven selection and exploration
- volume: Voxelization and cleanup of density volumes
- run: Configuration, evolution sessions, simulated designs

Example:
    >>> from voxbreed import Config, EvolutionSession
    >>> session = EvolutionSession(Config("voxbreed.ini"))
    >>> population = session.start()
    >>> population = session.select_and_breed([population[0].id, population[4].id])
    >>> meshing_input = session.export_volume(population[0])
"""

__version__ = "0.1.0"

from voxbreed.exceptions     import VoxbreedError, MalformedGenome
from voxbreed.run.config     import Config
from voxbreed.genotype       import (Genome, NodeGene, ConnectionGene, InnovationTracker,
                                     encode_genome, decode_genome, PRESETS, get_preset)
from voxbreed.phenotype      import NetworkStandard, NetworkFast, evaluate
from voxbreed.behavior       import BehaviorDescriptor, extract_behavior, behavior_to_vector, behavior_distance
from voxbreed.novelty        import NoveltyArchive, evaluate_novelty, select_by_novelty, explore_novelty
from voxbreed.volume         import VoxelGrid, voxelize, morph_open, keep_largest_component, prepare_for_meshing
from voxbreed.run.session    import EvolutionSession
from voxbreed.run.simulate   import generate_simulated_designs

__all__ = [
    "VoxbreedError",
    "MalformedGenome",
    "Config",
    "Genome",
    "NodeGene",
    "ConnectionGene",
    "InnovationTracker",
    "encode_genome",
    "decode_genome",
    "PRESETS",
    "get_preset",
    "NetworkStandard",
    "NetworkFast",
    "evaluate",
    "BehaviorDescriptor",
    "extract_behavior",
    "behavior_to_vector",
    "behavior_distance",
    "NoveltyArchive",
    "evaluate_novelty",
    "select_by_novelty",
    "explore_novelty",
    "VoxelGrid",
    "voxelize",
    "morph_open",
    "keep_largest_component",
    "prepare_for_meshing",
    "EvolutionSession",
    "generate_simulated_designs",
]
