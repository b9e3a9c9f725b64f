from .js_nodes import (
    create_binary_expression,
    create_literal,
    create_logical_expression,
    create_unary_negation,
    equality_operators,
    logical_operators,
)


def negate_truthiness(expression):
    """
    Return an expression whose truthiness is the negation of ``expression``.
    Handles:
    - Boolean literals (value is flipped)
    - Logical not (``!x`` unwraps to ``x``)
    - Equality comparisons (``==`` <-> ``!=``, ``===`` <-> ``!==``)
    - Logical and/or (De Morgan, both operands negated recursively)
    Anything else is wrapped in a unary ``!``. The input is never modified.
    """
    node_type = expression.get("type")

    if node_type == "Literal":
        if isinstance(expression.get("value"), bool):
            return create_literal(not expression["value"])

    elif node_type == "UnaryExpression":
        if expression["operator"] == "!":
            return expression["argument"]

    elif node_type == "BinaryExpression":
        operator = expression["operator"]
        if operator in equality_operators:
            return create_binary_expression(
                equality_operators[operator], expression["left"], expression["right"]
            )

    elif node_type == "LogicalExpression":
        operator = expression["operator"]
        if operator in logical_operators:
            return create_logical_expression(
                logical_operators[operator],
                negate_truthiness(expression["left"]),
                negate_truthiness(expression["right"]),
            )

    return create_unary_negation(expression)
