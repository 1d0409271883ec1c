"""
Preset genomes: hand-crafted designs producing visually interesting
patterns, offered to users as ready-made parents.

Each preset holds the fixed input/output nodes, a few hidden nodes and a
fully enabled set of connections. Innovation numbers start at 1000, far from
the numbers handed out by a run's tracker; a session observing a preset
moves its counters past them anyway.
"""

from dataclasses import dataclass

from voxbreed.activations          import ActivationKind
from voxbreed.genotype.connection_gene import ConnectionGene
from voxbreed.genotype.genome      import Genome
from voxbreed.genotype.node_gene   import (NodeType, NodeGene,
                                           INPUT_X, INPUT_Y, INPUT_D, INPUT_BIAS,
                                           OUTPUT_R, OUTPUT_G, OUTPUT_B)

PRESET_INNOVATION_BASE = 1000

GAU = ActivationKind.GAUSSIAN
SIN = ActivationKind.SIN
COS = ActivationKind.COS
ABS = ActivationKind.ABS
SIG = ActivationKind.SIGMOID

@dataclass(frozen=True)
class Preset:
    """
    Description of a preset design.

    hidden: (node ID, activation) pairs, all hidden biases are zero
    wiring: (source ID, destination ID, weight) triples
    """
    name  : str
    hidden: tuple
    wiring: tuple

    def build(self) -> Genome:
        """
        Build a new genome (fresh identity) from the preset.
        """
        nodes  = Genome._fixed_nodes()
        nodes += [NodeGene(node_id, NodeType.HIDDEN, activation) for node_id, activation in self.hidden]
        connections = [ConnectionGene(node_in, node_out, weight, PRESET_INNOVATION_BASE + i)
                       for i, (node_in, node_out, weight) in enumerate(self.wiring)]
        return Genome(nodes, connections)

PRESETS: tuple[Preset, ...] = (
    Preset('Nebula',
           ((9, GAU), (10, SIN), (11, COS)),
           ((INPUT_D, 9,  3.0), (INPUT_X, 10,  4.0), (INPUT_Y, 11,  4.0),
            (9 , OUTPUT_R, 2.0), (10, OUTPUT_R, -1.0),
            (9 , OUTPUT_G, 0.5), (11, OUTPUT_G,  1.5),
            (10, OUTPUT_B, 1.8), (11, OUTPUT_B, -0.8),
            (INPUT_D, OUTPUT_R, -1.2))),

    Preset('Waves',
           ((9, SIN), (10, COS), (11, GAU)),
           ((INPUT_X, 9, 6.0), (INPUT_Y, 9, 3.0), (INPUT_Y, 10, 5.0), (INPUT_X, 10, -2.0), (INPUT_D, 11, 2.5),
            (9 , OUTPUT_R, 1.5), (10, OUTPUT_G, 1.5),
            (9 , OUTPUT_B, 0.8), (10, OUTPUT_B, 0.8),
            (11, OUTPUT_R, -0.6), (11, OUTPUT_G, 0.8))),

    Preset('Mandala',
           ((9, SIN), (10, COS), (11, ABS), (12, GAU)),
           ((INPUT_X, 9, 5.0), (INPUT_Y, 9, 5.0), (INPUT_D, 10, 8.0),
            (INPUT_X, 11, 3.0), (INPUT_Y, 11, -3.0), (INPUT_D, 12, 2.0),
            (9 , OUTPUT_R, 1.0), (10, OUTPUT_R, 0.6),
            (10, OUTPUT_G, 1.2), (11, OUTPUT_G, -0.5),
            (12, OUTPUT_B, 2.0), (9 , OUTPUT_B, -0.7))),

    Preset('Crystal',
           ((9, ABS), (10, SIN), (11, GAU)),
           ((INPUT_X, 9, 2.0), (INPUT_Y, 9, -2.0), (INPUT_X, 10, 3.0), (INPUT_Y, 10, 3.0), (INPUT_D, 11, 1.5),
            (9 , OUTPUT_R, 1.8), (10, OUTPUT_R, -0.5),
            (10, OUTPUT_G, 1.5), (9 , OUTPUT_G, 0.3),
            (11, OUTPUT_B, 2.0), (INPUT_BIAS, OUTPUT_B, -0.5))),

    Preset('Flame',
           ((9, GAU), (10, SIN), (11, SIG)),
           ((INPUT_Y, 9, 2.0), (INPUT_X, 10, 7.0), (INPUT_Y, 10, 2.0), (INPUT_D, 11, -3.0),
            (9 , OUTPUT_R, 2.5), (10, OUTPUT_R, 0.3), (11, OUTPUT_R, 1.0),
            (9 , OUTPUT_G, 1.5), (10, OUTPUT_G, -0.5),
            (11, OUTPUT_B, 0.8), (INPUT_Y, OUTPUT_G, -0.8))),

    Preset('Cells',
           ((9, SIN), (10, SIN), (11, GAU)),
           ((INPUT_X, 9, 8.0), (INPUT_Y, 10, 8.0), (INPUT_D, 11, 3.0),
            (9 , OUTPUT_R, 1.0), (10, OUTPUT_R, 1.0),
            (9 , OUTPUT_G, 0.5), (10, OUTPUT_G, -1.0), (11, OUTPUT_G, 1.5),
            (9 , OUTPUT_B, -0.5), (10, OUTPUT_B, 0.5), (11, OUTPUT_B, 1.0))),
)

def get_preset(name: str) -> Genome:
    """
    Build the genome of the preset with the given name (case insensitive).

    Raises:
        KeyError: if there is no preset with this name
    """
    for preset in PRESETS:
        if preset.name.lower() == name.lower():
            return preset.build()
    raise KeyError(f"Unknown preset '{name}', available: {', '.join(p.name for p in PRESETS)}")
