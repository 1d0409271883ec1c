"""
Innovation Tracker Module

This module implements the InnovationTracker class, the run-scoped
source of innovation numbers and hidden node IDs.

Classes:
    InnovationTracker: Counters for innovation numbers and node IDs
"""

from typing import TYPE_CHECKING

from voxbreed.genotype.node_gene import FIXED_NODE_COUNT
if TYPE_CHECKING:
    from voxbreed.genotype.genome import Genome

class InnovationTracker:
    """
    Hands out innovation numbers and hidden node IDs for one evolutionary run.

    Both counters increase monotonically. Every connection created by a
    structural mutation draws a fresh innovation number; every hidden node
    created by splitting a connection draws a fresh node ID.

    All genomes of a run (across generations) must share the same tracker,
    or crossover would align unrelated genes. Unrelated runs each own their
    own tracker.
    """

    def __init__(self, next_innovation: int = 0, next_node_id: int = FIXED_NODE_COUNT):
        """
        Parameters:
            next_innovation: the first innovation number to hand out
            next_node_id:    the first hidden node ID to hand out
        """
        self._next_innovation: int = next_innovation
        self._next_node_id   : int = next_node_id

    @property
    def peek_innovation(self) -> int:
        """The innovation number the next call to 'next_innovation()' returns."""
        return self._next_innovation

    @property
    def peek_node_id(self) -> int:
        """The node ID the next call to 'next_node_id()' returns."""
        return self._next_node_id

    def next_innovation(self) -> int:
        innovation = self._next_innovation
        self._next_innovation += 1
        return innovation

    def next_node_id(self) -> int:
        node_id = self._next_node_id
        self._next_node_id += 1
        return node_id

    def reserve_node_ids(self, highest_used: int) -> None:
        """
        Make sure node IDs handed out from now on are above 'highest_used'.
        """
        self._next_node_id = max(self._next_node_id, highest_used + 1)

    def reserve_innovations(self, highest_used: int) -> None:
        """
        Make sure innovation numbers handed out from now on are above 'highest_used'.
        """
        self._next_innovation = max(self._next_innovation, highest_used + 1)

    def observe(self, genome: 'Genome') -> None:
        """
        Advance both counters past every ID used by a genome that entered
        the run from outside (a preset, a decoded share link, ...).
        """
        if genome.node_genes:
            self.reserve_node_ids(max(genome.node_genes))
        if genome.conn_genes:
            self.reserve_innovations(max(genome.conn_genes))

    def __repr__(self):
        return (f"InnovationTracker(next_innovation={self._next_innovation}, "
                f"next_node_id={self._next_node_id})")
