"""
CPPN Connection Gene Module

This module implements the ConnectionGene class.

Classes:
    ConnectionGene: Gene encoding a weighted connection between nodes
"""

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from voxbreed.run.config import Config

class ConnectionGene:
    """
    A gene describing a weighted connection between two nodes of a CPPN.

    Each connection gene represents a directed edge in the network graph.
    Connection genes are identified by their innovation number, a historical
    marker drawn from a run-wide counter whenever a structural mutation creates
    a connection; it is the key used to align genomes during crossover.

    Connections can be enabled or disabled. Disabled connections keep their
    structural information but do not take part in evaluation.

    Public Attributes:
        node_in:    ID of the source node
        node_out:   ID of the destination node
        weight:     Weight of the connection
        enabled:    Whether this connection is active in the network
        innovation: Run-wide innovation number identifying this connection

    Public Methods:
        mutate(config): Perturb or replace the connection weight
    """

    def __init__(self,
                 node_in   : int,
                 node_out  : int,
                 weight    : float,
                 innovation: int,
                 enabled   : bool = True):
        self.node_in   : int   = node_in
        self.node_out  : int   = node_out
        self.weight    : float = weight
        self.enabled   : bool  = enabled
        self.innovation: int   = innovation

    def mutate(self, config: 'Config') -> None:
        """
        Mutate the weight of the connection.

        Mutating the weight can be accomplished in two ways:
         + perturbing the current value by gaussian noise (not clamped)
         + replacing the current value by a new uniformly random one

        Parameters:
            config: Stores the mutation parameters
        """
        if random.random() < config.weight_perturb_prob:
            self.weight += random.gauss(0, config.weight_perturb_strength)
        else:
            self.weight = random.uniform(config.min_weight, config.max_weight)

    def __eq__(self, other):
        if not isinstance(other, ConnectionGene):
            return NotImplemented
        return (self.node_in    == other.node_in  and
                self.node_out   == other.node_out and
                self.weight     == other.weight   and
                self.enabled    == other.enabled  and
                self.innovation == other.innovation)

    def __hash__(self):
        return hash((self.node_in, self.node_out, self.weight, self.enabled, self.innovation))

    def __repr__(self):
        return (f"ConnectionGene(node_in={self.node_in:03d}, node_out={self.node_out:03d},"
                f"weight={self.weight:+.6f}, enabled={self.enabled}, innovation={self.innovation:03d})")

    def __str__(self):
        s  = f"[{self.innovation:03d},{'E' if self.enabled else 'D'},"
        s += f"{self.node_in:02d}=>{self.node_out:02d},{self.weight:+.02f}]"
        return s
