"""
CPPN Network Base Module

This module defines the abstract base class for CPPN evaluators.
It provides a common interface and shared functionality for the point
evaluator (NetworkStandard) and the batched evaluator (NetworkFast).

Classes:
    NetworkBase: Abstract base class defining the network interface
"""

from abc         import ABC, abstractmethod
from collections import deque, defaultdict
from typing      import Any, TYPE_CHECKING
import graphviz  # type: ignore

from voxbreed.activations        import activation_codes
from voxbreed.genotype.node_gene import NodeType, INPUT_IDS, OUTPUT_IDS

if TYPE_CHECKING:
    from voxbreed.genotype import Genome

class NetworkBase(ABC):
    """
    Abstract base class for CPPN evaluators.

    The base class provides:
        - Common initialization
        - Topological sort of the computed (non-input) nodes
        - The incoming enabled connections of every computed node
        - Standard network introspection properties
        - Network visualization

    A computed node which cannot be reached by the topological sort (it sits on
    a cycle of enabled connections, which well formed genomes never contain) is
    never evaluated: its value reads as 0.

    Public Properties (available to all subclasses):
        number_nodes:               Total number of nodes in the network
        number_nodes_hidden:        Number of hidden nodes in the network
        number_connections:         Total number of connections in the network
        number_connections_enabled: Number of enabled connections in the network
        evaluation_order:           IDs of the computed nodes in evaluation order

    Public Methods (must be implemented by subclasses):
        forward_pass(x, y, z): Evaluate the network at the given coordinates
    """

    def __init__(self, genome: 'Genome'):
        """
        Initialize common network attributes from genome.

        Parameters:
            genome: The Genome encoding the network structure
        """
        self._genome       = genome
        self._input_ids    = list(INPUT_IDS)
        self._output_ids   = list(OUTPUT_IDS)
        self._sorted_nodes = self._topological_sort(genome)

        # node ID => list of (source node ID, weight), enabled connections only
        self._incoming = defaultdict(list)
        for conn in genome.conn_genes.values():
            if conn.enabled:
                self._incoming[conn.node_out].append((conn.node_in, conn.weight))

    @property
    def number_nodes(self) -> int:
        """Total number of nodes in the network."""
        return len(self._genome.node_genes)

    @property
    def number_nodes_hidden(self) -> int:
        """Number of hidden nodes in the network."""
        return len(self._genome.node_genes) - len(self._input_ids) - len(self._output_ids)

    @property
    def number_connections(self) -> int:
        """Total number of connections in the network."""
        return len(self._genome.conn_genes)

    @property
    def number_connections_enabled(self) -> int:
        """Number of enabled connections in the network."""
        return sum(1 for conn in self._genome.conn_genes.values() if conn.enabled)

    @property
    def evaluation_order(self) -> list[int]:
        return list(self._sorted_nodes)

    @abstractmethod
    def forward_pass(self, x: Any, y: Any, z: Any) -> Any:
        """
        Evaluate the network at the given coordinates.

        Parameters:
            x, y, z: Coordinates (implementation-specific type)

        Returns:
            Network outputs (implementation-specific type)
        """
        pass

    @staticmethod
    def _topological_sort(genome: 'Genome') -> list[int]:
        """
        Perform topological sort of the non-input nodes using Kahn's algorithm.

        Input nodes are always available, so connections leaving them do not
        count towards in-degrees. Only enabled connections are considered.

        Parameters:
            genome: The Genome containing node and connection genes

        Returns:
            List of non-input node IDs in topological order
        """
        node_ids = [node_id for node_id, node in genome.node_genes.items() if node.type != NodeType.INPUT]

        adjacency = defaultdict(list)
        in_degree = {node_id: 0 for node_id in node_ids}

        for conn in genome.conn_genes.values():
            if not conn.enabled:
                continue
            if conn.node_in not in in_degree or conn.node_out not in in_degree:
                continue
            adjacency[conn.node_in].append(conn.node_out)
            in_degree[conn.node_out] += 1

        # Start with nodes that depend on inputs only
        queue  = deque([node_id for node_id, degree in in_degree.items() if degree == 0])
        result = []

        while queue:
            node_id = queue.popleft()
            result.append(node_id)

            for neighbor in adjacency[node_id]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        return result

    def visualize(self, view: bool = True) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Parameters:
            view: If True, automatically open the visualization after rendering

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')  # Left to right layout
        dot.attr('graph', labelloc='t')

        node_style = {'color': 'black', 'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                      'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}
        fill_colors = {NodeType.INPUT: 'lightgrey', NodeType.HIDDEN: 'lightblue', NodeType.OUTPUT: 'white'}
        input_names = {0: 'x', 1: 'y', 2: 'z', 3: 'd', 4: 'bias'}
        output_names = {5: 'density', 6: 'r', 7: 'g', 8: 'b'}

        def add_node(graph, node_id):
            node_gene = self._genome.node_genes[node_id]
            attrs = dict(node_style, fillcolor=fill_colors[node_gene.type])
            if node_gene.type == NodeType.INPUT:
                attrs['label'] = input_names[node_id]
            else:
                name = output_names.get(node_id, f"id={node_id}")
                attrs['label'] = f"{name}\\n{activation_codes[node_gene.activation]}\\nbias={node_gene.bias:.2f}"
            graph.node(str(node_id), **attrs)

        with dot.subgraph(name='cluster_input') as input_cluster:
            input_cluster.attr(rank='source', label='Inputs', style='invisible')
            for node_id in self._input_ids:
                add_node(input_cluster, node_id)

        hidden_nodes = sorted(node.id for node in self._genome.hidden_nodes)
        if hidden_nodes:
            with dot.subgraph(name='cluster_hidden') as hidden_cluster:
                hidden_cluster.attr(rank='same', label='Hidden', style='invisible')
                for node_id in hidden_nodes:
                    add_node(hidden_cluster, node_id)

        with dot.subgraph(name='cluster_output') as output_cluster:
            output_cluster.attr(rank='sink', label='Outputs', style='invisible')
            for node_id in self._output_ids:
                add_node(output_cluster, node_id)

        # Add edges with weights (both enabled and disabled)
        for conn in self._genome.conn_genes.values():
            edge_attrs = {
                'label'     : f"i={conn.innovation},w={conn.weight:.2f}",
                'fontsize'  : '5',
                'penwidth'  : '0.5',
                'arrowsize' : '0.5',
                'labelfloat': 'false',
                'color'     : 'black' if conn.enabled else 'lightgray'
            }
            dot.edge(str(conn.node_in), str(conn.node_out), **edge_attrs)

        if view:
            dot.view(cleanup=True)

        return dot
