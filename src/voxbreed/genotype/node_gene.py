"""
CPPN Node Gene Module.

This module implements the NodeGene class and NodeType enumeration, together
with the fixed numbering of the CPPN input and output nodes.

Classes:
    NodeType: Enumeration for node types (INPUT, HIDDEN, OUTPUT)
    NodeGene: Gene encoding a single network node
"""

from enum import Enum

from voxbreed.activations import ActivationKind, activation_codes

# Fixed input node IDs: x, y, z, distance from origin, constant bias (1.0)
INPUT_X    = 0
INPUT_Y    = 1
INPUT_Z    = 2
INPUT_D    = 3
INPUT_BIAS = 4

# Fixed output node IDs
OUTPUT_DENSITY = 5
OUTPUT_R       = 6
OUTPUT_G       = 7
OUTPUT_B       = 8

INPUT_IDS        = (INPUT_X, INPUT_Y, INPUT_Z, INPUT_D, INPUT_BIAS)
OUTPUT_IDS       = (OUTPUT_DENSITY, OUTPUT_R, OUTPUT_G, OUTPUT_B)
INPUT_COUNT      = len(INPUT_IDS)
OUTPUT_COUNT     = len(OUTPUT_IDS)
FIXED_NODE_COUNT = INPUT_COUNT + OUTPUT_COUNT   # 9

# Output activations used by freshly built genomes: raw density, squashed colors
OUTPUT_ACTIVATIONS = {
    OUTPUT_DENSITY: ActivationKind.LINEAR,
    OUTPUT_R      : ActivationKind.SIGMOID,
    OUTPUT_G      : ActivationKind.SIGMOID,
    OUTPUT_B      : ActivationKind.SIGMOID,
}

class NodeType(Enum):
    """
    Nodes come in three types: input, hidden, output.
    """
    INPUT  = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"

class NodeGene:
    """
    A gene describing a node of a CPPN.

    The node computes its value as: activation(bias + weighted_input)
    Input nodes are never computed, their value is set directly from
    the sampled coordinate; their activation and bias are ignored.

    Public Attributes:
        id:         Unique identifier for this node (unique within a genome)
        type:       Type of node (INPUT, HIDDEN, or OUTPUT)
        activation: The activation kind applied to the node's weighted input
        bias:       Bias value added to the node's weighted input
    """

    def __init__(self,
                 node_id   : int,
                 node_type : NodeType,
                 activation: ActivationKind = ActivationKind.LINEAR,
                 bias      : float          = 0.0):
        self.id        : int            = node_id
        self.type      : NodeType       = node_type
        self.activation: ActivationKind = activation
        self.bias      : float          = bias

    def __eq__(self, other):
        if not isinstance(other, NodeGene):
            return NotImplemented
        return (self.id         == other.id         and
                self.type       == other.type       and
                self.activation == other.activation and
                self.bias       == other.bias)

    def __hash__(self):
        return hash((self.id, self.type, self.activation, self.bias))

    def __repr__(self):
        return (f"NodeGene(node_id={self.id:+03d}, node_type=NodeType.{self.type.name:6s},"
                f"activation=ActivationKind.{self.activation.name}, bias={self.bias})")

    def __str__(self):
        if self.type == NodeType.INPUT:
            return f"[I{self.id}]"
        act_code = activation_codes[self.activation]
        return f"[{self.type.name[0]}{self.id},{act_code},b={self.bias:.2f}]"
