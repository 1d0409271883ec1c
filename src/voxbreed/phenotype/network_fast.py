"""
CPPN Fast Network Module

This module implements a batched CPPN evaluator: coordinates are numpy
arrays and every node is computed for the whole batch at once. It produces
the same values as NetworkStandard, point by point, and is used wherever a
genome is sampled over a grid (behavior extraction, voxelization).

Classes:
    BatchOutput: Output arrays of a batched evaluation
    NetworkFast: Vectorized feedforward evaluator using NumPy arrays
"""

import numpy as np
from typing import NamedTuple, TYPE_CHECKING

from voxbreed.activations          import activations
from voxbreed.genotype.node_gene   import (INPUT_X, INPUT_Y, INPUT_Z, INPUT_D, INPUT_BIAS,
                                           OUTPUT_DENSITY, OUTPUT_R, OUTPUT_G, OUTPUT_B)
from voxbreed.phenotype.network_base import NetworkBase

if TYPE_CHECKING:
    from voxbreed.genotype import Genome

class BatchOutput(NamedTuple):
    density: np.ndarray
    r      : np.ndarray
    g      : np.ndarray
    b      : np.ndarray

class NetworkFast(NetworkBase):
    """
    Batch-processing implementation of a CPPN evaluator.

    Coordinates of any (matching) shape are flattened into a batch; outputs are
    returned with the shape of the coordinates. Incoming connections of every
    computed node are pre-computed as index and weight arrays.

    Public Methods:
        forward_pass(x, y, z): Evaluate the network over arrays of coordinates

    Public Properties (inherited from NetworkBase):
        number_nodes:               Total number of nodes in the network
        number_nodes_hidden:        Number of hidden nodes in the network
        number_connections:         Total number of connections in the network
        number_connections_enabled: Number of enabled connections in the network
    """

    def __init__(self, genome: 'Genome'):
        """
        Initialize the evaluator from genome.

        Parameters:
            genome: The Genome encoding the network structure
        """
        super().__init__(genome)

        # Create "node ID => array row" mapping
        sorted_node_ids = sorted(genome.node_genes.keys())
        self._node_id_to_idx = {node_id: idx for idx, node_id in enumerate(sorted_node_ids)}
        self._num_nodes = len(sorted_node_ids)

        # For each computed node: row, bias, activation, source rows and weights
        self._plan = []
        for node_id in self._sorted_nodes:
            node_gene = genome.node_genes[node_id]
            incoming  = self._incoming[node_id]
            sources   = np.array([self._node_id_to_idx[src] for src, _ in incoming], dtype=np.int64)
            weights   = np.array([weight for _, weight in incoming], dtype=np.float64)
            self._plan.append((self._node_id_to_idx[node_id],
                               node_gene.bias,
                               activations[node_gene.activation],
                               sources,
                               weights))

    def forward_pass(self, x, y, z) -> BatchOutput:
        """
        Evaluate the network over arrays of coordinates.

        Parameters:
            x, y, z: Coordinates as numpy arrays (or scalars) of a common shape

        Returns:
            BatchOutput whose arrays have the shape of the coordinates;
            colors are clamped to [0, 1], density is raw
        """
        x, y, z = np.broadcast_arrays(np.asarray(x, dtype=np.float64),
                                      np.asarray(y, dtype=np.float64),
                                      np.asarray(z, dtype=np.float64))
        shape = x.shape
        xs, ys, zs = x.ravel(), y.ravel(), z.ravel()

        # Values of uncomputed nodes read as 0
        node_values = np.zeros((self._num_nodes, xs.size), dtype=np.float64)
        node_values[self._node_id_to_idx[INPUT_X]]    = xs
        node_values[self._node_id_to_idx[INPUT_Y]]    = ys
        node_values[self._node_id_to_idx[INPUT_Z]]    = zs
        node_values[self._node_id_to_idx[INPUT_D]]    = np.sqrt(xs * xs + ys * ys + zs * zs)
        node_values[self._node_id_to_idx[INPUT_BIAS]] = 1.0

        for row, bias, activation_func, sources, weights in self._plan:
            if len(sources) == 0:
                weighted_sum = np.full(xs.size, bias, dtype=np.float64)
            else:
                weighted_sum = weights @ node_values[sources] + bias
            node_values[row] = activation_func(weighted_sum)

        def output(node_id):
            return node_values[self._node_id_to_idx[node_id]].reshape(shape)

        return BatchOutput(density = output(OUTPUT_DENSITY).copy(),
                           r       = np.clip(output(OUTPUT_R), 0.0, 1.0),
                           g       = np.clip(output(OUTPUT_G), 0.0, 1.0),
                           b       = np.clip(output(OUTPUT_B), 0.0, 1.0))

    def __repr__(self):
        """Short representation for debugging."""
        return (f"NetworkFast(nodes={self._num_nodes}, "
                f"hidden={self.number_nodes_hidden}, "
                f"connections={self.number_connections_enabled}/{self.number_connections})")
