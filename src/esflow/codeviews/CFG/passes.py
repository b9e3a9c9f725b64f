import math

from loguru import logger

from ...utils.id_collections import NumericMap, NumericSet
from .CFG import EdgeType, NodeType


def walk_forward(entry):
    """Yield every node reachable from ``entry`` in depth-first preorder, each once"""
    visited = NumericSet()
    stack = [entry]

    while stack:
        node = stack.pop()
        if node.id in visited:
            continue

        visited.add(node.id)
        yield node

        # Reversed so that the first outgoing edge is followed first
        for edge in reversed(node.outgoing_edges):
            stack.append(edge.target)


def unlink_edge(edge):
    edge.source.outgoing_edges = [e for e in edge.source.outgoing_edges if e is not edge]
    edge.target.incoming_edges = [e for e in edge.target.incoming_edges if e is not edge]


def is_truthy_literal(literal):
    """Truthiness of an ESTree literal as an ECMAScript engine would see it"""
    if literal.get("regex"):
        return True
    if literal.get("bigint") is not None:
        # bigint holds the digits without the trailing n, possibly with a radix prefix
        return int(literal["bigint"].replace("_", ""), 0) != 0

    value = literal.get("value")
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def evaluate_constant_test(expression):
    """
    Return the truthiness of a literal, or of a literal wrapped in any
    number of logical nots. Returns None for anything else.
    """
    negated = False
    while expression.get("type") == "UnaryExpression" and expression.get("operator") == "!":
        negated = not negated
        expression = expression["argument"]

    if expression.get("type") != "Literal":
        return None

    return is_truthy_literal(expression) != negated


def rewrite_constant_conditional_edges(flow_graph):
    conditional_edges = [
        edge
        for node in walk_forward(flow_graph.entry)
        for edge in node.outgoing_edges
        if edge.type is EdgeType.CONDITIONAL and edge.data
    ]

    rewritten = 0
    for edge in conditional_edges:
        truthy = evaluate_constant_test(edge.data)
        if truthy is None:
            continue

        if truthy:
            # Always taken
            edge.type = EdgeType.EPSILON
            edge.label = ""
            edge.data = None
        else:
            # Never taken
            unlink_edge(edge)
        rewritten += 1

    return rewritten


def remove_unreachable_nodes(flow_graph):
    reachable_nodes = NumericMap()
    for node in walk_forward(flow_graph.entry):
        reachable_nodes.set(node.id, node)

    # Unreachable nodes are only found through edges touching reachable ones
    unreachable_nodes = NumericMap()
    visited = NumericSet()
    stack = reachable_nodes.values()

    while stack:
        node = stack.pop()
        if node.id in visited:
            continue

        visited.add(node.id)
        if not reachable_nodes.contains_key(node.id):
            unreachable_nodes.set(node.id, node)

        for edge in node.incoming_edges:
            stack.append(edge.source)
        for edge in node.outgoing_edges:
            stack.append(edge.target)

    removed = 0
    for node in unreachable_nodes.values():
        if node.type is not NodeType.NORMAL:
            continue

        for edge in node.incoming_edges + node.outgoing_edges:
            unlink_edge(edge)
        node.incoming_edges = []
        node.outgoing_edges = []
        removed += 1

    return removed


def is_transit_node(node):
    if node.type is not NodeType.NORMAL:
        return False
    if len(node.incoming_edges) != 1 or len(node.outgoing_edges) != 1:
        return False

    return EdgeType.EPSILON in (node.incoming_edges[0].type, node.outgoing_edges[0].type)


def can_remove_transit_node(transit_node):
    source = transit_node.incoming_edges[0].source
    target = transit_node.outgoing_edges[0].target

    if source is transit_node or target is transit_node:
        return False

    # Never join two nodes by a second direct edge
    return all(edge.source is not source for edge in target.incoming_edges)


def remove_transit_node(transit_node):
    incoming_edge = transit_node.incoming_edges[0]
    outgoing_edge = transit_node.outgoing_edges[0]

    source = incoming_edge.source
    target = outgoing_edge.target

    # Keep the edge that carries a label; with two epsilon edges either will do
    if incoming_edge.type is EdgeType.EPSILON:
        edge_to_keep = outgoing_edge
    else:
        edge_to_keep = incoming_edge

    edge_to_keep.source = source
    edge_to_keep.target = target

    source.outgoing_edges = [
        edge_to_keep if edge is incoming_edge else edge for edge in source.outgoing_edges
    ]
    target.incoming_edges = [
        edge_to_keep if edge is outgoing_edge else edge for edge in target.incoming_edges
    ]

    transit_node.incoming_edges = []
    transit_node.outgoing_edges = []


def remove_transit_nodes(flow_graph):
    visited = NumericSet()
    stack = [flow_graph.entry]
    removed = 0

    while stack:
        node = stack.pop()
        if node.id in visited:
            continue
        visited.add(node.id)

        if is_transit_node(node):
            original_target = node.outgoing_edges[0].target
            if can_remove_transit_node(node):
                remove_transit_node(node)
                removed += 1
            stack.append(original_target)
            continue

        for edge in reversed(node.outgoing_edges):
            stack.append(edge.target)

    return removed


def collect_nodes_and_edges(flow_graph):
    flow_graph.nodes = list(walk_forward(flow_graph.entry))
    flow_graph.edges = [edge for node in flow_graph.nodes for edge in node.outgoing_edges]


def run_optimization_passes(flow_graphs, passes):
    """Run the pass pipeline over each graph in turn; ``passes`` holds the two optional pass switches"""
    for flow_graph in flow_graphs:
        if passes["rewrite_constant_conditional_edges"]:
            rewritten = rewrite_constant_conditional_edges(flow_graph)
            logger.debug("Graph {}: rewrote {} constant conditional edge(s)", flow_graph.entry.id, rewritten)

        removed = remove_unreachable_nodes(flow_graph)
        logger.debug("Graph {}: removed {} unreachable node(s)", flow_graph.entry.id, removed)

        if passes["remove_transit_nodes"]:
            removed = remove_transit_nodes(flow_graph)
            logger.debug("Graph {}: removed {} transit node(s)", flow_graph.entry.id, removed)

        collect_nodes_and_edges(flow_graph)
