statement_types = {
    "loop_control_statement": [
        "WhileStatement",
        "DoWhileStatement",
        "ForStatement",
        "ForInStatement",
    ],
    # Bodies that take a label through a synthetic wrapper
    "labeled_wrapper_statement": [
        "BlockStatement",
        "IfStatement",
        "TryStatement",
        "WithStatement",
    ],
    "needs_parentheses": [
        "AssignmentExpression",
        "BinaryExpression",
        "ConditionalExpression",
        "LogicalExpression",
    ],
}

equality_operators = {
    "==": "!=",
    "!=": "==",
    "===": "!==",
    "!==": "===",
}

logical_operators = {
    "&&": "||",
    "||": "&&",
}


def create_identifier(name):
    return {"type": "Identifier", "name": name}


def create_literal(value):
    return {"type": "Literal", "value": value}


def create_assignment_expression(left, right):
    return {
        "type": "AssignmentExpression",
        "operator": "=",
        "left": left,
        "right": right,
    }


def create_binary_expression(operator, left, right):
    return {
        "type": "BinaryExpression",
        "operator": operator,
        "left": left,
        "right": right,
    }


def create_logical_expression(operator, left, right):
    return {
        "type": "LogicalExpression",
        "operator": operator,
        "left": left,
        "right": right,
    }


def create_unary_negation(argument):
    return {
        "type": "UnaryExpression",
        "operator": "!",
        "prefix": True,
        "argument": argument,
    }


def create_call_expression(callee, arguments=None):
    return {
        "type": "CallExpression",
        "callee": callee,
        "arguments": arguments or [],
    }


def create_member_expression(obj, prop, computed=False):
    return {
        "type": "MemberExpression",
        "computed": computed,
        "object": obj,
        "property": prop,
    }


def create_function_declaration(name, params, body):
    return {
        "type": "FunctionDeclaration",
        "id": create_identifier(name),
        "params": params,
        "body": body,
    }


def get_catch_handler(try_statement):
    """Return the catch clause of a try statement, accepting the legacy ``handlers`` list"""
    handler = try_statement.get("handler")
    if handler is None and try_statement.get("handlers"):
        handler = try_statement["handlers"][0]
    return handler


def get_function_name(function_node):
    identifier = function_node.get("id")
    if identifier:
        return identifier["name"]
    return "<anonymous>"
