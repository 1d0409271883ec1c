"""
Genotype Package

This package provides the genetic encoding of CPPNs.

Exported:
    NodeType, NodeGene:  Node genes and their roles
    ConnectionGene:      Weighted connection genes
    InnovationTracker:   Run-scoped innovation number and node ID counters
    Genome:              Complete genome with mutation and crossover
    encode_genome, decode_genome: Sharing codec
    PRESETS, get_preset: Hand-crafted designs
"""

from voxbreed.genotype.node_gene          import NodeType, NodeGene
from voxbreed.genotype.connection_gene    import ConnectionGene
from voxbreed.genotype.innovation_tracker import InnovationTracker
from voxbreed.genotype.genome             import Genome
from voxbreed.genotype.serialization      import encode_genome, decode_genome
from voxbreed.genotype.presets            import Preset, PRESETS, get_preset

__all__ = [
    'NodeType',
    'NodeGene',
    'ConnectionGene',
    'InnovationTracker',
    'Genome',
    'encode_genome',
    'decode_genome',
    'Preset',
    'PRESETS',
    'get_preset'
]
