"""
CPPN Genome Module

This module implements the Genome class: the genetic encoding of a
Compositional Pattern Producing Network together with the NEAT-style
operators (mutation and crossover) that evolve it.

Classes:
    Genome: Complete genome describing a CPPN
"""

import copy
import math
import random
import uuid
from collections import defaultdict, deque
from typing      import Iterable, TYPE_CHECKING

from loguru import logger

from voxbreed.activations                import ActivationKind, random_activation
from voxbreed.exceptions                 import MalformedGenome
from voxbreed.genotype.connection_gene   import ConnectionGene
from voxbreed.genotype.innovation_tracker import InnovationTracker
from voxbreed.genotype.node_gene         import (NodeType, NodeGene,
                                                 INPUT_X, INPUT_Y, INPUT_Z, INPUT_D, INPUT_BIAS,
                                                 OUTPUT_R, OUTPUT_G, OUTPUT_B,
                                                 INPUT_IDS, OUTPUT_IDS, FIXED_NODE_COUNT,
                                                 OUTPUT_ACTIVATIONS)
from voxbreed.run.config                 import Config

if TYPE_CHECKING:
    from voxbreed.behavior import BehaviorDescriptor

# IDs of the hidden nodes wired into every seed genome
SEED_GAUSSIAN_D = 9
SEED_SIN_X      = 10
SEED_COS_Z      = 11
SEED_ABS_Y      = 12

def _new_genome_id() -> str:
    return uuid.uuid4().hex[:12]

class Genome:
    """
    A CPPN genome: a collection of node genes and connection genes.

    The genome encodes a feedforward computation graph from the coordinate
    inputs (x, y, z, distance from origin, constant bias) to the outputs
    (density, red, green, blue). Structural mutations grow the graph by
    splitting connections and adding new ones, always keeping the connection
    graph acyclic.

    A genome is an independent value: it owns its genes and holds no references
    to other genomes. Mutation and crossover never modify their inputs.

    Node numbering convention:
        - Input nodes:  [0, 5)   x, y, z, d, bias
        - Output nodes: [5, 9)   density, r, g, b
        - Hidden nodes: [9, ...)

    Public Attributes:
        id:                  Identity of the genome (fresh for clones and offspring)
        node_genes:          Dictionary mapping node IDs to NodeGene objects
        conn_genes:          Dictionary mapping innovation numbers to ConnectionGene objects
                             (insertion ordered)
        fitness:             Fitness assigned by the caller
        novelty:             Sparseness score, once evaluated by novelty search
        behavior_descriptor: Cached behavior descriptor, once extracted

    Public Properties:
        nodes, connections:                     Genes as lists
        input_nodes, output_nodes, hidden_nodes: Node genes by type

    Public Methods:
        clone():                      Deep copy with a fresh identity
        mutate(tracker, config):      Return a mutated clone
        crossover(other):             Return the offspring of this (fitter) genome and another
        validate():                   Raise MalformedGenome if the genome is not well formed
        has_cycle(enabled_only):      Whether the connection graph contains a cycle
        to_dict():                    Convert genome to dictionary representation

    Class Methods:
        seed(tracker):           Build the seed genome
        from_dict(genome_dict):  Create a genome from a dictionary description
    """

    def __init__(self,
                 nodes      : Iterable[NodeGene]       | None = None,
                 connections: Iterable[ConnectionGene] | None = None,
                 genome_id  : str                      | None = None):
        """
        Initialize a Genome.

        Without 'nodes', the genome holds only the fixed input and output nodes.
        The genome is validated; a malformed description raises MalformedGenome.

        Parameters:
            nodes:       Node genes (unique by ID)
            connections: Connection genes (unique by innovation number)
            genome_id:   Identity of the genome; a fresh one is generated if None
        """
        self.id                 : str                         = genome_id or _new_genome_id()
        self.fitness            : float                       = 0.0
        self.novelty            : float | None                = None
        self.behavior_descriptor: 'BehaviorDescriptor | None' = None

        self.node_genes: dict[int, NodeGene]       = {}  # node ID => node gene
        self.conn_genes: dict[int, ConnectionGene] = {}  # innovation number => connection gene

        if nodes is None:
            nodes = Genome._fixed_nodes()

        for node in nodes:
            if node.id in self.node_genes:
                raise MalformedGenome(f"Duplicate node ID {node.id}")
            self.node_genes[node.id] = node

        for conn in (connections or []):
            if conn.innovation in self.conn_genes:
                raise MalformedGenome(f"Duplicate innovation number {conn.innovation}")
            self.conn_genes[conn.innovation] = conn

        self.validate()

    @staticmethod
    def _fixed_nodes() -> list[NodeGene]:
        nodes  = [NodeGene(node_id, NodeType.INPUT) for node_id in INPUT_IDS]
        nodes += [NodeGene(node_id, NodeType.OUTPUT, OUTPUT_ACTIVATIONS[node_id]) for node_id in OUTPUT_IDS]
        return nodes

    @classmethod
    def seed(cls, tracker: InnovationTracker) -> 'Genome':
        """
        Build the seed genome.

        Besides the fixed input and output nodes, the seed holds four hidden
        nodes biasing the field towards organic, symmetric shapes:
            9  - gaussian(d): radial blobs
           10  - sin(x):      waves along X
           11  - cos(z):      waves along Z (grid-like patterns)
           12  - abs(y):      bilateral symmetry on Y
        Each color channel mixes a different subset of the hidden nodes, plus
        a weak direct input connection for variety.

        Parameters:
            tracker: Provides the innovation numbers of the seed connections;
                     its node ID counter is moved above the seed hidden nodes

        Returns:
            A new seed genome
        """
        def rand_weight():
            return random.uniform(-2.0, 2.0)

        nodes  = Genome._fixed_nodes()
        nodes += [NodeGene(SEED_GAUSSIAN_D, NodeType.HIDDEN, ActivationKind.GAUSSIAN),
                  NodeGene(SEED_SIN_X     , NodeType.HIDDEN, ActivationKind.SIN),
                  NodeGene(SEED_COS_Z     , NodeType.HIDDEN, ActivationKind.COS),
                  NodeGene(SEED_ABS_Y     , NodeType.HIDDEN, ActivationKind.ABS)]
        tracker.reserve_node_ids(SEED_ABS_Y)

        wiring = [
            # coordinates => hidden
            (INPUT_D   , SEED_GAUSSIAN_D, rand_weight()),
            (INPUT_BIAS, SEED_GAUSSIAN_D, rand_weight() * 0.5),
            (INPUT_X   , SEED_SIN_X     , 2.0 + random.random() * 2),
            (INPUT_Z   , SEED_COS_Z     , 2.0 + random.random() * 2),
            (INPUT_Y   , SEED_ABS_Y     , 1.5 + random.random()),

            # hidden => colors
            (SEED_GAUSSIAN_D, OUTPUT_R, 1.0 + random.random()),
            (SEED_SIN_X     , OUTPUT_R, rand_weight()),
            (SEED_ABS_Y     , OUTPUT_R, rand_weight()),
            (SEED_GAUSSIAN_D, OUTPUT_G, rand_weight()),
            (SEED_SIN_X     , OUTPUT_G, 1.0 + random.random()),
            (SEED_COS_Z     , OUTPUT_G, rand_weight()),
            (SEED_GAUSSIAN_D, OUTPUT_B, rand_weight()),
            (SEED_COS_Z     , OUTPUT_B, 1.0 + random.random()),
            (SEED_ABS_Y     , OUTPUT_B, rand_weight()),

            # direct input => colors
            (INPUT_X, OUTPUT_R, rand_weight() * 0.5),
            (INPUT_Y, OUTPUT_G, rand_weight() * 0.5),
            (INPUT_D, OUTPUT_B, rand_weight() * 0.5),
        ]
        connections = [ConnectionGene(node_in, node_out, weight, tracker.next_innovation())
                       for node_in, node_out, weight in wiring]

        return cls(nodes, connections)

    @property
    def nodes(self) -> list[NodeGene]:
        return list(self.node_genes.values())

    @property
    def connections(self) -> list[ConnectionGene]:
        return list(self.conn_genes.values())

    @property
    def input_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.INPUT]

    @property
    def output_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.OUTPUT]

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.HIDDEN]

    def validate(self) -> None:
        """
        Check that the genome describes a well formed CPPN.

        Raises:
            MalformedGenome: if any fixed input/output node is missing or has the
                             wrong type, a hidden node uses a reserved ID, a
                             connection references a missing node, targets an
                             input node, is a self-loop, or the connection graph
                             contains a cycle
        """
        for node_id, node in self.node_genes.items():
            if node.id != node_id:
                raise MalformedGenome(f"Node gene {node.id} stored under ID {node_id}")
            if not isinstance(node.type, NodeType):
                raise MalformedGenome(f"Node {node_id} has invalid type {node.type!r}")
            if not isinstance(node.activation, ActivationKind):
                raise MalformedGenome(f"Node {node_id} has invalid activation {node.activation!r}")

        for node_id in INPUT_IDS:
            if node_id not in self.node_genes or self.node_genes[node_id].type != NodeType.INPUT:
                raise MalformedGenome(f"Missing input node {node_id}")
        for node_id in OUTPUT_IDS:
            if node_id not in self.node_genes or self.node_genes[node_id].type != NodeType.OUTPUT:
                raise MalformedGenome(f"Missing output node {node_id}")
        for node in self.hidden_nodes:
            if node.id < FIXED_NODE_COUNT:
                raise MalformedGenome(f"Hidden node {node.id} has ID below minimum {FIXED_NODE_COUNT}")
        if len(self.input_nodes) != len(INPUT_IDS) or len(self.output_nodes) != len(OUTPUT_IDS):
            raise MalformedGenome("Input and output nodes must use exactly the fixed IDs")

        for innov, conn in self.conn_genes.items():
            if conn.innovation != innov:
                raise MalformedGenome(f"Connection {conn.innovation} stored under innovation {innov}")
            if conn.node_in not in self.node_genes:
                raise MalformedGenome(f"Connection {innov} references non-existent source node: {conn.node_in}")
            if conn.node_out not in self.node_genes:
                raise MalformedGenome(f"Connection {innov} references non-existent destination node: {conn.node_out}")
            if self.node_genes[conn.node_out].type == NodeType.INPUT:
                raise MalformedGenome(f"Connection {innov} targets input node {conn.node_out}")
            if conn.node_in == conn.node_out:
                raise MalformedGenome(f"Connection {innov} is a self-loop on node {conn.node_in}")

        if self.has_cycle():
            raise MalformedGenome("The connection graph contains a cycle")

    def has_cycle(self, enabled_only: bool = False) -> bool:
        """
        Check whether the connection graph contains a cycle (Kahn's algorithm).

        Parameters:
            enabled_only: consider only enabled connections (otherwise all of them)
        """
        adjacency = defaultdict(list)
        in_degree = {node_id: 0 for node_id in self.node_genes}
        for conn in self.conn_genes.values():
            if enabled_only and not conn.enabled:
                continue
            adjacency[conn.node_in].append(conn.node_out)
            in_degree[conn.node_out] = in_degree.get(conn.node_out, 0) + 1

        queue   = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
        visited = 0
        while queue:
            node_id = queue.popleft()
            visited += 1
            for neighbor in adjacency[node_id]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        return visited < len(in_degree)

    def clone(self) -> 'Genome':
        """
        Deep copy nodes and connections into a new genome with a fresh identity.
        Fitness is reset; novelty and cached behavior are not carried over.
        """
        cloned = Genome.__new__(Genome)
        cloned.id                  = _new_genome_id()
        cloned.fitness             = 0.0
        cloned.novelty             = None
        cloned.behavior_descriptor = None
        cloned.node_genes          = {nid: copy.copy(node) for nid, node in self.node_genes.items()}
        cloned.conn_genes          = {innov: copy.copy(conn) for innov, conn in self.conn_genes.items()}
        return cloned

    def crossover(self, other: 'Genome') -> 'Genome':
        """
        Perform NEAT crossover between this genome (the fitter parent) and another.

        NEAT crossover rules:
        - Matching genes: randomly inherit from either parent
        - Genes sharing an innovation number but not their endpoints count as disjoint
        - Disjoint/excess genes: inherit from the fitter parent ('self') only,
          those present only in 'other' are discarded

        Since every connection of the offspring is a connection of the fitter
        parent, the offspring's connection graph is a copy of an acyclic graph.

        Parameters:
            other: the other (less fit) parent genome

        Returns:
            New offspring genome
        """

        # Create empty (no node or connection genes) offspring genome
        offspring = Genome.__new__(Genome)
        offspring.id                  = _new_genome_id()
        offspring.fitness             = 0.0
        offspring.novelty             = None
        offspring.behavior_descriptor = None
        offspring.node_genes          = {}
        offspring.conn_genes          = {}

        # Decide which connections are part of the new network; the ends
        # of these connections give the set of nodes of the new network.
        # Genes match only when their endpoints agree too: genomes entering the
        # run from outside (presets, share links) number their genes independently.
        for innov, conn_self in self.conn_genes.items():
            conn_other = other.conn_genes.get(innov)
            if conn_other is not None and (conn_other.node_in, conn_other.node_out) == (conn_self.node_in, conn_self.node_out):
                conn_gene = conn_self if random.random() < 0.5 else conn_other
            else:
                conn_gene = conn_self
            offspring.conn_genes[innov] = copy.copy(conn_gene)

        # Collect the IDs of all nodes needed by the offspring's connections,
        # plus all input and output nodes (even if they have no connections)
        node_ids = set(INPUT_IDS) | set(OUTPUT_IDS)
        for conn_gene in offspring.conn_genes.values():
            node_ids.add(conn_gene.node_in)
            node_ids.add(conn_gene.node_out)

        # Inherit node genes:
        # - matching nodes:     inherit randomly from either parent
        # - non-matching nodes: inherit from whichever parent has it
        for nid in sorted(node_ids):
            if nid in self.node_genes and nid in other.node_genes:
                node_gene = self.node_genes[nid] if random.random() < 0.5 else other.node_genes[nid]
            elif nid in self.node_genes:
                node_gene = self.node_genes[nid]
            elif nid in other.node_genes:
                node_gene = other.node_genes[nid]
            else:
                raise RuntimeError(f"node ID {nid} cannot be found in either parent")
            offspring.node_genes[nid] = copy.copy(node_gene)

        return offspring

    def mutate(self, tracker: InnovationTracker, config: Config | None = None) -> 'Genome':
        """
        Return a mutated clone of this genome; the genome itself is not modified.

        The list of possible mutations is:
          + add a node (split an enabled connection)
          + add a connection
          + mutate connection weights
          + mutate the activation of a hidden node
          + toggle a connection
        Each mutation occurs independently with its own probability.

        Parameters:
            tracker: Source of innovation numbers and node IDs for this run
            config:  Mutation parameters (defaults if None)

        Returns:
            The mutated clone
        """
        config  = config or Config()
        mutated = self.clone()

        if random.random() < config.node_add_probability:
            mutated._mutate_add_node(tracker)

        if random.random() < config.connection_add_probability:
            mutated._mutate_add_connection(tracker, config)

        if random.random() < config.weight_mutate_probability:
            for conn in mutated.conn_genes.values():
                conn.mutate(config)

        if random.random() < config.activation_mutate_probability:
            mutated._mutate_activation()

        if random.random() < config.connection_toggle_probability:
            mutated._mutate_toggle_connection()

        return mutated

    def _mutate_add_node(self, tracker: InnovationTracker) -> None:
        """
        Split a random enabled connection by adding a new hidden node.

        The split connection is disabled and replaced by two new connections:
        source -> new node (weight 1.0) and new node -> target (original weight).
        Splitting an edge of an acyclic graph cannot create a cycle.
        """
        enabled_conn_genes = [gene for gene in self.conn_genes.values() if gene.enabled]
        if not enabled_conn_genes:
            return
        split_conn_gene = random.choice(enabled_conn_genes)

        # The connection being split must be disabled.
        split_conn_gene.enabled = False

        new_node_id = tracker.next_node_id()
        while new_node_id in self.node_genes:
            new_node_id = tracker.next_node_id()
        self.node_genes[new_node_id] = NodeGene(new_node_id, NodeType.HIDDEN, random_activation())

        conn1 = ConnectionGene(split_conn_gene.node_in, new_node_id, 1.0, tracker.next_innovation())
        self.conn_genes[conn1.innovation] = conn1

        conn2 = ConnectionGene(new_node_id, split_conn_gene.node_out, split_conn_gene.weight, tracker.next_innovation())
        self.conn_genes[conn2.innovation] = conn2

        logger.debug("[Genome][{}] Split connection {} with node {}", self.id, split_conn_gene.innovation, new_node_id)

    def _mutate_add_connection(self, tracker: InnovationTracker, config: Config) -> None:
        """
        Add a new connection between two existing nodes.

        The source is any node, the target any non-input node, however we cannot add:
         + a self-loop
         + a connection between two nodes already connected by a direct connection
         + a connection which would create a cycle in the network graph

        Note that the method does NOT add a new connection if it fails to do
        so due to the constraints listed above a maximum number of times.
        """
        connected_nodes = {(conn.node_in, conn.node_out) for conn in self.conn_genes.values()}
        all_ids         = list(self.node_genes.keys())
        non_input_ids   = [nid for nid, node in self.node_genes.items() if node.type != NodeType.INPUT]

        for _ in range(config.connection_add_attempts):
            node_in  = random.choice(all_ids)
            node_out = random.choice(non_input_ids)

            # Carry out quick checks first
            if node_in == node_out:
                continue
            if (node_in, node_out) in connected_nodes:
                continue

            # Carry out expensive check last
            if self._would_create_cycle(node_in, node_out):
                continue

            weight         = random.uniform(config.min_weight, config.max_weight)
            new_connection = ConnectionGene(node_in, node_out, weight, tracker.next_innovation())
            self.conn_genes[new_connection.innovation] = new_connection
            logger.debug("[Genome][{}] Added connection {}=>{}", self.id, node_in, node_out)
            return

        logger.debug("[Genome][{}] No connection added after {} attempts", self.id, config.connection_add_attempts)

    def _mutate_activation(self) -> None:
        """
        Reassign a random activation kind to a random hidden node.
        """
        hidden_nodes = self.hidden_nodes
        if hidden_nodes:
            node = random.choice(hidden_nodes)
            node.activation = random_activation()

    def _mutate_toggle_connection(self) -> None:
        """
        Flip the 'enabled' flag of a random connection.
        """
        if self.conn_genes:
            conn = random.choice(list(self.conn_genes.values()))
            conn.enabled = not conn.enabled

    def _would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a connection from_node -> to_node would create a cycle.
        Uses DFS to check if there's already a path from 'to_node' back to 'from_node'.
        Considers ALL connections (both enabled and disabled), so that toggling a
        connection back on can never close a cycle either.

        Parameters:
            from_node: proposed start of the new connection
            to_node:   proposed end   of the new connection

        Returns:
            whether adding the new connection would create a cycle in the network
        """
        if from_node == to_node:
            return True

        successors = defaultdict(list)
        for conn_gene in self.conn_genes.values():
            successors[conn_gene.node_in].append(conn_gene.node_out)

        # If we can reach 'from_node' starting at 'to_node', then adding a
        # connection 'from_node' -> 'to_node' would create a network cycle
        visited = set()
        stack   = [to_node]
        while stack:
            current = stack.pop()
            if current == from_node:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(successors[current])

        return False

    @classmethod
    def from_dict(cls, genome_dict: dict) -> 'Genome':
        """
        Create a Genome from a dictionary description.

        Dictionary format:
            {
                "nodes": [
                    {"id": 0, "type": "input"},
                    {"id": 5, "type": "output", "activation": "linear", "bias": 0.0},
                    {"id": 9, "type": "hidden", "activation": "gaussian", "bias": 0.0}
                ],
                "connections": [
                    {"from": 3, "to": 9, "weight": 1.5, "enabled": true, "innovation": 0},
                    {"from": 9, "to": 5, "weight": 0.7, "enabled": true, "innovation": 1}
                ]
            }
        "activation" and "bias" are optional for input nodes, "enabled" is optional
        (defaults to true). Identity and fitness are not part of the description:
        the returned genome gets a fresh identity.

        Parameters:
            genome_dict: Dictionary describing the genome structure

        Returns:
            A new Genome object with the specified structure

        Raises:
            MalformedGenome: If the description is incomplete or the structure is invalid
        """
        if not isinstance(genome_dict, dict):
            raise MalformedGenome(f"Genome description must be a dictionary, got {type(genome_dict).__name__}")

        try:
            nodes_data = genome_dict["nodes"]
            conns_data = genome_dict["connections"]
            if not isinstance(nodes_data, list) or not isinstance(conns_data, list):
                raise MalformedGenome("'nodes' and 'connections' must be lists")

            nodes = []
            for node_data in nodes_data:
                nodes.append(NodeGene(_as_int(node_data["id"]),
                                      NodeType(node_data["type"]),
                                      ActivationKind(node_data.get("activation", "linear")),
                                      _as_float(node_data.get("bias", 0.0))))

            connections = []
            for conn_data in conns_data:
                enabled = conn_data.get("enabled", True)
                if not isinstance(enabled, bool):
                    raise MalformedGenome(f"'enabled' must be a boolean, got {enabled!r}")
                connections.append(ConnectionGene(_as_int(conn_data["from"]),
                                                  _as_int(conn_data["to"]),
                                                  _as_float(conn_data["weight"]),
                                                  _as_int(conn_data["innovation"]),
                                                  enabled))
        except MalformedGenome:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedGenome(f"Invalid genome description: {e!r}") from e

        return cls(nodes, connections)

    def to_dict(self) -> dict:
        """
        Convert the genome to a dictionary representation.

        This is the inverse operation of from_dict(); nodes are sorted by ID,
        connections keep their order.
        """
        nodes = []
        for node in sorted(self.node_genes.values(), key=lambda n: n.id):
            nodes.append({
                "id"        : node.id,
                "type"      : node.type.value,
                "activation": node.activation.value,
                "bias"      : node.bias
            })

        connections = []
        for conn in self.conn_genes.values():
            connections.append({
                "from"      : conn.node_in,
                "to"        : conn.node_out,
                "weight"    : conn.weight,
                "enabled"   : conn.enabled,
                "innovation": conn.innovation
            })

        return {
            "nodes"      : nodes,
            "connections": connections
        }

    def __str__(self):
        node_genes_str  = ''.join(str(node) for node in self.input_nodes)
        node_genes_str += ''.join(str(node) for node in self.hidden_nodes)
        node_genes_str += ''.join(str(node) for node in self.output_nodes)
        conn_genes_str  = ''.join(str(conn) for conn in self.conn_genes.values())
        return f"Nodes: {node_genes_str}\nConns: {conn_genes_str}"

    def __repr__(self):
        return (f"Genome(id={self.id!r}, nodes={len(self.node_genes)}, "
                f"connections={len(self.conn_genes)}, fitness={self.fitness})")

def _as_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedGenome(f"Expected an integer, got {value!r}")
    return value

def _as_float(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedGenome(f"Expected a finite number, got {value!r}")
    return float(value)
