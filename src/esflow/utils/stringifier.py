import json
import math

from .js_nodes import statement_types

UNEXPECTED = "<UNEXPECTED>"


def stringify(expression):
    """Render an ESTree expression as source-like text for edge labels.

    Unsupported expression kinds render as ``<UNEXPECTED>`` instead of raising.
    """
    if expression is None:
        return UNEXPECTED

    stringifier = stringifiers.get(expression.get("type"))
    if stringifier is None:
        return UNEXPECTED
    return stringifier(expression)


def stringify_array_expression(expression):
    array_literal = ""
    is_first = True
    previous_element_was_hole = False

    for element in expression["elements"]:
        if not is_first and not previous_element_was_hole:
            array_literal += ","

        if element is None:
            array_literal += ","
            previous_element_was_hole = True
        else:
            array_literal += stringify(element)
            previous_element_was_hole = False

        is_first = False

    return f"[{array_literal}]"


def stringify_object_expression(expression):
    properties = ", ".join(
        f"{stringify_property_key(prop)}: {stringify(prop['value'])}"
        for prop in expression["properties"]
    )
    return f"{{ {properties} }}"


def stringify_property_key(prop):
    key = prop["key"]
    if prop.get("computed"):
        return f"[{stringify(key)}]"
    return stringify(key)


def stringify_literal(literal):
    if literal.get("regex"):
        regex = literal["regex"]
        return f"/{regex.get('pattern', '')}/{regex.get('flags', '')}"
    if literal.get("bigint") is not None:
        return literal["bigint"] + "n"

    value = literal.get("value")
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return stringify_number(value)
    return str(value)


def stringify_number(value):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def stringify_identifier(identifier):
    return identifier["name"]


def stringify_this_expression(expression):
    return "this"


def stringify_update_expression(expression):
    argument = stringify_operand(expression["argument"])
    if expression.get("prefix"):
        return expression["operator"] + argument
    return argument + expression["operator"]


def stringify_unary_expression(expression):
    operator = expression["operator"]
    argument = stringify_operand(expression["argument"])
    # typeof, void and delete need a separating space, and so does - -x
    if len(operator) > 1 or (operator in ("+", "-") and argument.startswith(operator)):
        joiner = " "
    else:
        joiner = ""

    if expression.get("prefix", True):
        return operator + joiner + argument
    return argument + joiner + operator


def stringify_binary_expression(expression):
    left = stringify_operand(expression["left"])
    right = stringify_operand(expression["right"])
    return f"{left} {expression['operator']} {right}"


def stringify_assignment_expression(expression):
    left = stringify(expression["left"])
    right = stringify(expression["right"])
    return f"{left} {expression['operator']} {right}"


def stringify_conditional_expression(expression):
    test = stringify_operand(expression["test"])
    consequent = stringify_operand(expression["consequent"])
    alternate = stringify_operand(expression["alternate"])
    return f"{test} ? {consequent} : {alternate}"


def stringify_sequence_expression(expression):
    return ", ".join(stringify(item) for item in expression["expressions"])


def stringify_call_expression(expression):
    callee = stringify_operand(expression["callee"])
    arguments = ", ".join(stringify(arg) for arg in expression.get("arguments", []))
    return f"{callee}({arguments})"


def stringify_new_expression(expression):
    return "new " + stringify_call_expression(expression)


def stringify_member_expression(expression):
    obj = stringify_operand(expression["object"])
    prop = stringify(expression["property"])
    if expression.get("computed"):
        return f"{obj}[{prop}]"
    return f"{obj}.{prop}"


def stringify_operand(expression):
    """Stringify a nested expression, parenthesizing it if its kind requires it"""
    text = stringify(expression)
    if expression is not None and expression.get("type") in statement_types["needs_parentheses"]:
        return f"({text})"
    return text


stringifiers = {
    "ArrayExpression": stringify_array_expression,
    "AssignmentExpression": stringify_assignment_expression,
    "BinaryExpression": stringify_binary_expression,
    "CallExpression": stringify_call_expression,
    "ConditionalExpression": stringify_conditional_expression,
    "Identifier": stringify_identifier,
    "Literal": stringify_literal,
    "LogicalExpression": stringify_binary_expression,
    "MemberExpression": stringify_member_expression,
    "NewExpression": stringify_new_expression,
    "ObjectExpression": stringify_object_expression,
    "SequenceExpression": stringify_sequence_expression,
    "ThisExpression": stringify_this_expression,
    "UnaryExpression": stringify_unary_expression,
    "UpdateExpression": stringify_update_expression,
}
