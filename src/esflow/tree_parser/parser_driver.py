from collections.abc import Mapping

from loguru import logger

from ..errors import InvalidInputError
from .preprocessor import FunctionExpressionRewriter


def validate_program(program):
    """Check that the input is an ESTree Program node with a statement list body"""
    if not isinstance(program, Mapping):
        raise InvalidInputError("Invalid node: an ESTree node object is required")

    if "type" not in program or not program["type"]:
        raise InvalidInputError("Invalid node: 'type' property required")

    if program["type"] != "Program":
        raise InvalidInputError(f"The node type '{program['type']}' is not supported")

    if not isinstance(program.get("body"), list):
        raise InvalidInputError("Invalid Program node: 'body' must be a list of statements")


class ParserDriver:
    """Validate an ESTree program and normalize it for the CFG builder"""

    def __init__(self, program):
        validate_program(program)
        self.program = program

        rewriter = FunctionExpressionRewriter()
        self.root_node = rewriter.rewrite(dict(program))
        self.rewritten_function_count = rewriter.function_counter

        if self.rewritten_function_count:
            logger.debug(
                "Rewrote {} function expression(s) into declarations",
                self.rewritten_function_count,
            )
