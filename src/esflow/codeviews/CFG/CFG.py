from enum import Enum

import networkx as nx


class NodeType(Enum):
    NORMAL = "Normal"
    ENTRY = "Entry"
    SUCCESS_EXIT = "SuccessExit"
    ERROR_EXIT = "ErrorExit"


class EdgeType(Enum):
    NORMAL = "Normal"
    EPSILON = "Epsilon"
    CONDITIONAL = "Conditional"
    ABRUPT_COMPLETION = "AbruptCompletion"


class FlowEdge:
    """A transition between two program points.

    ``data`` holds the AST node the edge was created from; the constant
    folding pass inspects it on conditional edges.
    """

    def __init__(self, source, target, edge_type=EdgeType.NORMAL, label="", data=None):
        self.source = source
        self.target = target
        self.type = edge_type
        self.label = label
        self.data = data

    def __repr__(self):
        return f"FlowEdge({self.source.id} -> {self.target.id}, {self.type.value}, {self.label!r})"


class FlowNode:
    """A program point.

    Edge lists are back-references only; a node never owns its edges.
    Every append keeps ``edge.source.outgoing_edges`` and
    ``edge.target.incoming_edges`` in step.
    """

    def __init__(self, node_id, node_type=NodeType.NORMAL):
        self.id = node_id
        self.type = node_type
        self.incoming_edges = []
        self.outgoing_edges = []

    def append_to(self, node, label, data=None, edge_type=EdgeType.NORMAL):
        """Connect ``node`` to this node and return this node"""
        edge = FlowEdge(node, self, edge_type, label, data)
        node.outgoing_edges.append(edge)
        self.incoming_edges.append(edge)
        return self

    def append_conditionally_to(self, node, label, condition):
        return self.append_to(node, label, condition, EdgeType.CONDITIONAL)

    def append_epsilon_edge_to(self, node):
        return self.append_to(node, "", None, EdgeType.EPSILON)

    def __repr__(self):
        return f"FlowNode({self.id}, {self.type.value})"


class ControlFlowGraph:
    """The flow graph of one function or of the top-level program.

    ``nodes`` and ``edges`` are only populated by the collection pass.
    """

    def __init__(self, entry, success_exit, error_exit):
        self.entry = entry
        self.success_exit = success_exit
        self.error_exit = error_exit
        self.nodes = []
        self.edges = []

    def to_networkx(self):
        """Build a MultiDiGraph view keyed by node id from the collected nodes and edges"""
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, type=node.type.value, label=str(node.id))
        for edge in self.edges:
            graph.add_edge(
                edge.source.id,
                edge.target.id,
                edge_type=edge.type.value,
                label=edge.label,
            )
        return graph


class FlowFunction:
    def __init__(self, function_id, name, flow_graph):
        self.id = function_id
        self.name = name
        self.flow_graph = flow_graph

    def __repr__(self):
        return f"FlowFunction({self.id}, {self.name!r})"


class FlowProgram:
    """Terminal output of one parse: the program graph plus every function graph"""

    def __init__(self, flow_graph, functions):
        self.flow_graph = flow_graph
        self.functions = functions

    def flow_graphs(self):
        return [self.flow_graph] + [func.flow_graph for func in self.functions]
