"""Small constructors for ESTree test programs."""


def program(*body):
    return {"type": "Program", "body": list(body)}


def ident(name):
    return {"type": "Identifier", "name": name}


def lit(value):
    return {"type": "Literal", "value": value}


def regex(pattern, flags=""):
    return {"type": "Literal", "value": None, "regex": {"pattern": pattern, "flags": flags}}


def bigint(digits):
    return {"type": "Literal", "value": None, "bigint": digits}


def binary(operator, left, right):
    return {"type": "BinaryExpression", "operator": operator, "left": left, "right": right}


def logical(operator, left, right):
    return {"type": "LogicalExpression", "operator": operator, "left": left, "right": right}


def unary(operator, argument):
    return {"type": "UnaryExpression", "operator": operator, "prefix": True, "argument": argument}


def not_(argument):
    return unary("!", argument)


def update(operator, argument, prefix=False):
    return {"type": "UpdateExpression", "operator": operator, "prefix": prefix, "argument": argument}


def assign(left, right, operator="="):
    return {"type": "AssignmentExpression", "operator": operator, "left": left, "right": right}


def call(callee, *arguments):
    if isinstance(callee, str):
        callee = ident(callee)
    return {"type": "CallExpression", "callee": callee, "arguments": list(arguments)}


def member(obj, prop, computed=False):
    return {"type": "MemberExpression", "object": obj, "property": prop, "computed": computed}


def array(*elements):
    return {"type": "ArrayExpression", "elements": list(elements)}


def sequence(*expressions):
    return {"type": "SequenceExpression", "expressions": list(expressions)}


def expr(expression):
    return {"type": "ExpressionStatement", "expression": expression}


def call_stmt(name, *arguments):
    return expr(call(name, *arguments))


def empty():
    return {"type": "EmptyStatement"}


def debugger():
    return {"type": "DebuggerStatement"}


def block(*body):
    return {"type": "BlockStatement", "body": list(body)}


def var(name, init=None, kind="var"):
    return var_multi([(name, init)], kind)


def var_multi(declarations, kind="var"):
    return {
        "type": "VariableDeclaration",
        "kind": kind,
        "declarations": [
            {"type": "VariableDeclarator", "id": ident(name), "init": init}
            for name, init in declarations
        ],
    }


def if_(test, consequent, alternate=None):
    return {"type": "IfStatement", "test": test, "consequent": consequent, "alternate": alternate}


def while_(test, body):
    return {"type": "WhileStatement", "test": test, "body": body}


def do_while(body, test):
    return {"type": "DoWhileStatement", "body": body, "test": test}


def for_(init, test, update_, body):
    return {"type": "ForStatement", "init": init, "test": test, "update": update_, "body": body}


def for_in(left, right, body):
    return {"type": "ForInStatement", "left": left, "right": right, "body": body, "each": False}


def switch(discriminant, *cases):
    return {"type": "SwitchStatement", "discriminant": discriminant, "cases": list(cases)}


def case(test, *consequent):
    return {"type": "SwitchCase", "test": test, "consequent": list(consequent)}


def default(*consequent):
    return case(None, *consequent)


def break_(label=None):
    return {"type": "BreakStatement", "label": ident(label) if label else None}


def continue_(label=None):
    return {"type": "ContinueStatement", "label": ident(label) if label else None}


def return_(argument=None):
    return {"type": "ReturnStatement", "argument": argument}


def throw(argument):
    return {"type": "ThrowStatement", "argument": argument}


def try_(block_, handler=None, finalizer=None):
    return {"type": "TryStatement", "block": block_, "handler": handler, "finalizer": finalizer}


def catch(param, body):
    return {"type": "CatchClause", "param": ident(param) if param else None, "body": body}


def labeled(label, body):
    return {"type": "LabeledStatement", "label": ident(label), "body": body}


def with_(obj, body):
    return {"type": "WithStatement", "object": obj, "body": body}


def function(name, params, *body):
    return {
        "type": "FunctionDeclaration",
        "id": ident(name) if name else None,
        "params": [ident(param) for param in params],
        "body": block(*body),
    }


def function_expression(name, params, *body):
    node = function(name, params, *body)
    node["type"] = "FunctionExpression"
    return node
