"""
CPPN Standard Network Module

This module implements the point evaluator of a CPPN: one (x, y, z)
coordinate in, one CPPNOutput out.

Classes:
    CPPNOutput:      Output of a CPPN at one point
    NetworkStandard: Straightforward dictionary based evaluator

Functions:
    evaluate: Evaluate a genome at one point
"""

import math
from typing import NamedTuple, TYPE_CHECKING

from voxbreed.activations          import activate
from voxbreed.genotype.node_gene   import (INPUT_X, INPUT_Y, INPUT_Z, INPUT_D, INPUT_BIAS,
                                           OUTPUT_DENSITY, OUTPUT_R, OUTPUT_G, OUTPUT_B)
from voxbreed.phenotype.network_base import NetworkBase

if TYPE_CHECKING:
    from voxbreed.genotype import Genome

class CPPNOutput(NamedTuple):
    """
    Output of a CPPN at one point. Colors are clamped to [0, 1], density is raw.
    """
    density: float
    r      : float
    g      : float
    b      : float

def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))

class NetworkStandard(NetworkBase):
    """
    Point evaluator of a CPPN.

    Node values live in a dictionary keyed by node ID. Inputs are set from the
    coordinate, then every computed node in topological order takes the value
    activation(bias + sum of value(source) * weight) over its enabled incoming
    connections. A value which was never computed reads as 0.
    """

    def __init__(self, genome: 'Genome'):
        super().__init__(genome)

    def forward_pass(self, x: float, y: float, z: float) -> CPPNOutput:
        values = {
            INPUT_X   : x,
            INPUT_Y   : y,
            INPUT_Z   : z,
            INPUT_D   : math.sqrt(x * x + y * y + z * z),
            INPUT_BIAS: 1.0,
        }

        for node_id in self._sorted_nodes:
            node_gene = self._genome.node_genes[node_id]
            total = node_gene.bias
            for source_id, weight in self._incoming[node_id]:
                total += values.get(source_id, 0.0) * weight
            values[node_id] = float(activate(node_gene.activation, total))

        return CPPNOutput(density = values.get(OUTPUT_DENSITY, 0.0),
                          r       = _clamp01(values.get(OUTPUT_R, 0.0)),
                          g       = _clamp01(values.get(OUTPUT_G, 0.0)),
                          b       = _clamp01(values.get(OUTPUT_B, 0.0)))

    def __repr__(self):
        return (f"NetworkStandard(nodes={self.number_nodes}, "
                f"hidden={self.number_nodes_hidden}, "
                f"connections={self.number_connections_enabled}/{self.number_connections})")

def evaluate(genome: 'Genome', x: float, y: float, z: float) -> CPPNOutput:
    """
    Evaluate a genome at one point.

    To evaluate the same genome at many points, build a NetworkStandard once
    (or a NetworkFast for numpy arrays of coordinates).
    """
    return NetworkStandard(genome).forward_pass(x, y, z)
