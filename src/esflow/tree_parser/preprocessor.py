from ..utils.js_nodes import create_function_declaration, create_identifier


class FunctionExpressionRewriter:
    """
    Replace every function expression in a program by a reference to a
    synthetic top-level function declaration.

    The program is deep-cloned in a single bottom-up pass; function
    expressions nested inside other function expressions are rewritten by
    the same pass. The input tree is left untouched.
    """

    def __init__(self):
        self.function_counter = 0
        self.rewritten_functions = []

    def rewrite(self, program):
        cloned_program = self.clone_and_visit(program)

        declarations = [
            create_function_declaration(name, params, body)
            for name, params, body in self.rewritten_functions
        ]
        cloned_program["body"] = declarations + cloned_program["body"]

        return cloned_program

    def clone_and_visit(self, value):
        if isinstance(value, list):
            return [self.clone_and_visit(item) for item in value]

        if not isinstance(value, dict):
            return value

        cloned = {key: self.clone_and_visit(child) for key, child in value.items()}

        if cloned.get("type") == "FunctionExpression":
            return self.rewrite_function_expression(cloned)

        return cloned

    def rewrite_function_expression(self, function_expression):
        self.function_counter += 1
        name = f"$$func{self.function_counter}"

        identifier = function_expression.get("id")
        if identifier:
            name += "_" + identifier["name"]

        self.rewritten_functions.append(
            (name, function_expression.get("params", []), function_expression["body"])
        )

        return create_identifier(name)


def rewrite_function_expressions(program):
    return FunctionExpressionRewriter().rewrite(program)
