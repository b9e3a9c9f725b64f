from collections.abc import Mapping

from loguru import logger

from ...errors import InvalidInputError
from ...tree_parser.parser_driver import ParserDriver
from ...utils import postprocessor
from .CFG_js import CFGGraph_js
from .parsing_context import ParsingContext
from .passes import run_optimization_passes

pass_names = {
    "removeTransitNodes": "remove_transit_nodes",
    "remove_transit_nodes": "remove_transit_nodes",
    "rewriteConstantConditionalEdges": "rewrite_constant_conditional_edges",
    "rewrite_constant_conditional_edges": "rewrite_constant_conditional_edges",
}


def normalize_properties(properties):
    """Fill in the default for every option; both passes are enabled unless switched off"""
    passes = {name: True for name in pass_names.values()}

    if properties is None:
        return {"passes": passes}

    if not isinstance(properties, Mapping):
        raise InvalidInputError("Options must be a mapping")

    for key in properties:
        if key != "passes":
            logger.warning("Ignoring unknown option '{}'", key)

    configured_passes = properties.get("passes", True)

    if isinstance(configured_passes, bool):
        return {"passes": {name: configured_passes for name in passes}}

    if not isinstance(configured_passes, Mapping):
        raise InvalidInputError("The 'passes' option must be a boolean or a mapping")

    for key, enabled in configured_passes.items():
        if key not in pass_names:
            logger.warning("Ignoring unknown pass '{}'", key)
            continue
        passes[pass_names[key]] = bool(enabled)

    return {"passes": passes}


class CFGDriver:
    def __init__(
        self,
        program,
        output_file="",
        properties=None,
    ):
        self.properties = normalize_properties(properties)

        self.parser = ParserDriver(program)
        self.root_node = self.parser.root_node

        self.CFG = CFGGraph_js(self.root_node, ParsingContext())
        self.flow_program = self.CFG.flow_program

        run_optimization_passes(self.flow_program.flow_graphs(), self.properties["passes"])

        self.graph = self.flow_program.flow_graph.to_networkx()
        if output_file:
            self.json = postprocessor.write_networkx_to_json(self.graph, output_file)
            postprocessor.write_to_dot(self.graph, output_file.rsplit(".", 1)[0] + ".dot")


def parse(program, options=None):
    """Build the control flow graphs of an ESTree program"""
    return CFGDriver(program, properties=options).flow_program
