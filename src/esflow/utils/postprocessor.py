import copy
import json
import os

import networkx as nx
from networkx.readwrite import json_graph

from ..errors import InvalidInputError


def flatten_flow_graph(flow_graph, with_labels=False):
    nodes = [{"id": node.id, "type": node.type.value} for node in flow_graph.nodes]

    edges = []
    for edge in flow_graph.edges:
        flat_edge = {"from": edge.source.id, "to": edge.target.id, "type": edge.type.value}
        if with_labels:
            flat_edge["label"] = edge.label
        edges.append(flat_edge)

    return {"nodes": nodes, "edges": edges}


def export_as_object(flow_program):
    """Plain data view of the program graph and every function graph"""
    return {
        "program": {"flowGraph": flatten_flow_graph(flow_program.flow_graph, with_labels=True)},
        "functions": [
            {
                "id": func.id,
                "name": func.name,
                "flowGraph": flatten_flow_graph(func.flow_graph, with_labels=True),
            }
            for func in flow_program.functions
        ],
    }


def export_as_json(flow_program):
    """JSON text with the nodes and edges of the top-level graph"""
    return json.dumps(flatten_flow_graph(flow_program.flow_graph), indent=2)


def escape_dot_label(label):
    return label.replace("\\", "\\\\").replace('"', '\\"')


def export_as_dot(flow_graph):
    lines = ["digraph control_flow_graph {"]
    for edge in flow_graph.edges:
        lines.append(
            f'    {edge.source.id} -> {edge.target.id} [ label = "{escape_dot_label(edge.label)}" ]'
        )
    lines.append("}")
    return "\n".join(lines)


def export_program(flow_program, format):
    if not format:
        raise InvalidInputError('Please specify a format ("json" or "dot")')

    format = format.strip().lower()
    if format == "dot":
        return export_as_dot(flow_program.flow_graph)
    if format == "json":
        return export_as_json(flow_program)

    raise InvalidInputError(f'The format "{format}" is not supported')


def networkx_to_json(graph):
    """Convert a networkx graph to a json object"""
    graph_json = json_graph.node_link_data(graph)
    return graph_json


def write_networkx_to_json(graph, filename):
    """Convert a networkx graph to a json object and write it to ``filename``"""
    graph_json = networkx_to_json(graph)
    if not os.getenv("GITHUB_ACTIONS"):
        with open(filename, "w") as f:
            json.dump(graph_json, f)
    return graph_json


def write_to_dot(og_graph, filename):
    graph = copy.deepcopy(og_graph)
    if not os.getenv("GITHUB_ACTIONS"):
        # Labels hold JavaScript source text, quote them for DOT
        for u, v, key, data in graph.edges(keys=True, data=True):
            graph.edges[u, v, key]["label"] = f'"{escape_dot_label(data.get("label", ""))}"'

        for node in graph.nodes:
            graph.nodes[node]["label"] = f'"{graph.nodes[node].get("label", node)}"'

        nx.nx_pydot.write_dot(graph, filename)
