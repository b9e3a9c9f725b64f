from loguru import logger

from ...errors import InvalidControlTargetError, UnsupportedConstructError
from ...utils import js_nodes
from ...utils.js_nodes import (
    create_assignment_expression,
    create_binary_expression,
    create_call_expression,
    create_identifier,
    create_literal,
    create_member_expression,
    get_catch_handler,
    get_function_name,
)
from ...utils.negator import negate_truthiness
from ...utils.stringifier import stringify
from .CFG import EdgeType, FlowFunction, FlowProgram, NodeType
from .parsing_context import (
    BREAK,
    CONTINUE,
    RETURN,
    THROW,
    Completion,
    Finalizer,
    OtherStatement,
    ParsingContext,
    TryStatement,
)


class CFGGraph_js:
    """
    Build control flow graphs for an ESTree program.
    One handler per statement kind; every handler takes the statement and
    the node control currently sits at, and returns a Completion.
    """

    def __init__(self, root_node, context=None):
        self.root_node = root_node
        self.context = context if context is not None else ParsingContext()
        self.statement_types = js_nodes.statement_types

        self.statement_parsers = {
            "BlockStatement": self.parse_block_statement,
            "BreakStatement": self.parse_break_statement,
            "ContinueStatement": self.parse_continue_statement,
            "DebuggerStatement": self.parse_debugger_statement,
            "DoWhileStatement": self.parse_do_while_statement,
            "EmptyStatement": self.parse_empty_statement,
            "ExpressionStatement": self.parse_expression_statement,
            "ForInStatement": self.parse_for_in_statement,
            "ForStatement": self.parse_for_statement,
            "FunctionDeclaration": self.parse_function_declaration,
            "IfStatement": self.parse_if_statement,
            "LabeledStatement": self.parse_labeled_statement,
            "ReturnStatement": self.parse_return_statement,
            "SwitchStatement": self.parse_switch_statement,
            "ThrowStatement": self.parse_throw_statement,
            "TryStatement": self.parse_try_statement,
            "VariableDeclaration": self.parse_variable_declaration,
            "WhileStatement": self.parse_while_statement,
            "WithStatement": self.parse_with_statement,
        }

        self.flow_program = self.CFG_js()

    def CFG_js(self):
        """Parse the program body into the top-level graph; function graphs are collected on the way"""
        flow_graph = self.context.create_flow_graph()
        self.context.current_flow_graph = flow_graph

        self.parse_statements(self.root_node["body"], flow_graph.entry)

        logger.debug("Parsed program with {} function(s)", len(self.context.functions))
        return FlowProgram(flow_graph, self.context.functions)

    def create_node(self):
        return self.context.create_node()

    def parse_statements(self, statements, current_node):
        for statement in statements:
            completion = self.parse_statement(statement, current_node)

            # Statements after an abrupt completion are never executed
            if not completion.is_normal:
                return completion

            current_node = completion.node

        return Completion.normal(current_node)

    def parse_statement(self, statement, current_node):
        if statement is None:
            return Completion.normal(current_node)

        parser = self.statement_parsers.get(statement.get("type"))
        if parser is None:
            raise UnsupportedConstructError(statement.get("type"))

        return parser(statement, current_node)

    def loop_head(self, current_node):
        """Return a node that may receive back edges; the graph entry never may"""
        if current_node.type is NodeType.ENTRY:
            return self.create_node().append_epsilon_edge_to(current_node)
        return current_node

    # Declarations

    def parse_function_declaration(self, statement, current_node):
        flow_graph = self.context.create_flow_graph()
        func = FlowFunction(
            self.context.create_function_id(), get_function_name(statement), flow_graph
        )

        saved = self.context.enter_function(flow_graph)

        node = flow_graph.entry
        for index, param in enumerate(statement.get("params") or []):
            arguments_slot = create_member_expression(
                create_identifier("$$params"), create_literal(index), computed=True
            )
            binding = create_assignment_expression(param, arguments_slot)
            node = self.create_node().append_to(node, stringify(binding), binding)

        completion = self.parse_block_statement(statement["body"], node)

        if completion.is_normal:
            # No explicit return statement, so undefined is returned implicitly
            return_statement = {
                "type": "ReturnStatement",
                "argument": create_identifier("undefined"),
            }
            flow_graph.success_exit.append_to(
                completion.node, "return undefined", return_statement, EdgeType.ABRUPT_COMPLETION
            )

        self.context.functions.append(func)
        self.context.leave_function(saved)

        logger.debug("Parsed function {} ({})", func.id, func.name)
        return Completion.normal(current_node)

    def parse_variable_declaration(self, statement, current_node):
        for declarator in statement["declarations"]:
            if declarator.get("init") is None:
                expression = declarator["id"]
            else:
                expression = create_assignment_expression(declarator["id"], declarator["init"])

            current_node = self.create_node().append_to(current_node, stringify(expression), expression)

        return Completion.normal(current_node)

    # Simple statements

    def parse_empty_statement(self, statement, current_node):
        return Completion.normal(self.create_node().append_to(current_node, "(empty)", statement))

    def parse_debugger_statement(self, statement, current_node):
        return Completion.normal(current_node)

    def parse_block_statement(self, statement, current_node):
        return self.parse_statements(statement["body"], current_node)

    def parse_expression_statement(self, statement, current_node):
        return Completion.normal(self.parse_expression(statement["expression"], current_node))

    def parse_expression(self, expression, current_node):
        if expression["type"] == "SequenceExpression":
            for sub_expression in expression["expressions"]:
                current_node = self.parse_expression(sub_expression, current_node)
            return current_node

        return self.create_node().append_to(current_node, stringify(expression), expression)

    def parse_with_statement(self, statement, current_node):
        expression_node = self.create_node().append_to(
            current_node, stringify(statement["object"]), statement
        )
        return self.parse_statement(statement["body"], expression_node)

    # Branching

    def parse_if_statement(self, statement, current_node):
        test = statement["test"]
        negated_test = negate_truthiness(test)

        then_node = self.create_node().append_conditionally_to(current_node, stringify(test), test)
        then_completion = self.parse_statement(statement["consequent"], then_node)

        if statement.get("alternate") is None:
            final_node = self.create_node().append_conditionally_to(
                current_node, stringify(negated_test), negated_test
            )
            if then_completion.is_normal:
                final_node.append_epsilon_edge_to(then_completion.node)
            return Completion.normal(final_node)

        else_node = self.create_node().append_conditionally_to(
            current_node, stringify(negated_test), negated_test
        )
        else_completion = self.parse_statement(statement["alternate"], else_node)

        # Reported as normal even when both branches are abrupt; the
        # unreachable final node is pruned later
        final_node = self.create_node()
        if then_completion.is_normal:
            final_node.append_epsilon_edge_to(then_completion.node)
        if else_completion.is_normal:
            final_node.append_epsilon_edge_to(else_completion.node)

        return Completion.normal(final_node)

    def parse_switch_statement(self, statement, current_node, label=None):
        discriminant_name = self.context.create_temporary_local_variable_name()
        discriminant = create_identifier(discriminant_name)

        discriminant_assignment = create_assignment_expression(discriminant, statement["discriminant"])
        evaluated_discriminant_node = self.create_node().append_to(
            current_node, stringify(discriminant_assignment), discriminant_assignment
        )

        final_node = self.create_node()
        self.context.push(OtherStatement(break_target=final_node, label=label))

        case_clauses_a, default_case, case_clauses_b = partition_cases(statement["cases"])

        still_searching_node = evaluated_discriminant_node
        end_of_previous_case_body = None
        first_node_of_clauses_b = None

        for case_clause in case_clauses_a + case_clauses_b:
            truthy_condition = create_binary_expression("===", discriminant, case_clause["test"])
            begin_of_case_body = self.create_node().append_conditionally_to(
                still_searching_node, stringify(truthy_condition), truthy_condition
            )

            if case_clauses_b and case_clause is case_clauses_b[0]:
                first_node_of_clauses_b = begin_of_case_body

            # No break at the end of the previous case: fall through
            if end_of_previous_case_body is not None and end_of_previous_case_body.is_normal:
                begin_of_case_body.append_epsilon_edge_to(end_of_previous_case_body.node)

            end_of_previous_case_body = self.parse_statements(case_clause["consequent"], begin_of_case_body)

            falsy_condition = negate_truthiness(truthy_condition)
            still_searching_node = self.create_node().append_conditionally_to(
                still_searching_node, stringify(falsy_condition), falsy_condition
            )

        if end_of_previous_case_body is not None and end_of_previous_case_body.is_normal:
            final_node.append_epsilon_edge_to(end_of_previous_case_body.node)

        if default_case is not None:
            default_completion = self.parse_statements(default_case["consequent"], still_searching_node)
            if default_completion.is_normal:
                node_after_default = first_node_of_clauses_b or final_node
                node_after_default.append_epsilon_edge_to(default_completion.node)
        else:
            # Without a default case no clause may match at all
            final_node.append_epsilon_edge_to(still_searching_node)

        self.context.pop()
        return Completion.normal(final_node)

    def parse_labeled_statement(self, statement, current_node):
        body = statement["body"]
        label = statement["label"]["name"]
        body_type = body["type"]

        if body_type in self.statement_types["labeled_wrapper_statement"]:
            return self.parse_labeled_enclosing_statement(body, current_node, label)

        if body_type == "SwitchStatement" or body_type in self.statement_types["loop_control_statement"]:
            return self.statement_parsers[body_type](body, current_node, label=label)

        # Any other statement cannot be a break or continue target
        return self.parse_statement(body, current_node)

    def parse_labeled_enclosing_statement(self, body, current_node, label):
        final_node = self.create_node()

        self.context.push(OtherStatement(break_target=final_node, label=label))
        body_completion = self.parse_statement(body, current_node)
        self.context.pop()

        if body_completion.is_normal:
            final_node.append_epsilon_edge_to(body_completion.node)
            return Completion.normal(final_node)

        # A break out of the wrapper still resumes control after it
        if final_node.incoming_edges:
            return Completion.normal(final_node)

        return body_completion

    # Loops

    def parse_while_statement(self, statement, current_node, label=None):
        current_node = self.loop_head(current_node)

        truthy_condition = statement["test"]
        falsy_condition = negate_truthiness(truthy_condition)

        loop_body_node = self.create_node().append_conditionally_to(
            current_node, stringify(truthy_condition), truthy_condition
        )
        final_node = self.create_node()

        self.context.push(
            OtherStatement(break_target=final_node, continue_target=current_node, label=label)
        )
        loop_body_completion = self.parse_statement(statement["body"], loop_body_node)

        if loop_body_completion.is_normal:
            current_node.append_epsilon_edge_to(loop_body_completion.node)

        self.context.pop()

        final_node.append_conditionally_to(current_node, stringify(falsy_condition), falsy_condition)

        return Completion.normal(final_node)

    def parse_do_while_statement(self, statement, current_node, label=None):
        current_node = self.loop_head(current_node)

        truthy_condition = statement["test"]
        falsy_condition = negate_truthiness(truthy_condition)

        test_node = self.create_node()
        final_node = self.create_node()

        self.context.push(
            OtherStatement(break_target=final_node, continue_target=test_node, label=label)
        )
        loop_body_completion = self.parse_statement(statement["body"], current_node)
        self.context.pop()

        current_node.append_conditionally_to(test_node, stringify(truthy_condition), truthy_condition)
        final_node.append_conditionally_to(test_node, stringify(falsy_condition), falsy_condition)

        if loop_body_completion.is_normal:
            test_node.append_epsilon_edge_to(loop_body_completion.node)

        return Completion.normal(final_node)

    def parse_for_statement(self, statement, current_node, label=None):
        test_decision_node = self.loop_head(self.parse_for_init(statement.get("init"), current_node))

        begin_of_loop_body_node = self.create_node()
        update_node = self.create_node()
        final_node = self.create_node()

        test = statement.get("test")
        if test is not None:
            falsy_condition = negate_truthiness(test)
            begin_of_loop_body_node.append_conditionally_to(test_decision_node, stringify(test), test)
            final_node.append_conditionally_to(
                test_decision_node, stringify(falsy_condition), falsy_condition
            )
        else:
            # No test: the body is entered unconditionally
            begin_of_loop_body_node.append_epsilon_edge_to(test_decision_node)

        self.context.push(
            OtherStatement(break_target=final_node, continue_target=update_node, label=label)
        )
        loop_body_completion = self.parse_statement(statement["body"], begin_of_loop_body_node)
        self.context.pop()

        update = statement.get("update")
        if update is not None:
            end_of_update_node = self.parse_expression(update, update_node)
            test_decision_node.append_epsilon_edge_to(end_of_update_node)
        else:
            test_decision_node.append_epsilon_edge_to(update_node)

        if loop_body_completion.is_normal:
            update_node.append_epsilon_edge_to(loop_body_completion.node)

        return Completion.normal(final_node)

    def parse_for_init(self, init, current_node):
        if init is None:
            return current_node

        if init["type"] == "VariableDeclaration":
            return self.parse_variable_declaration(init, current_node).node

        return self.parse_expression(init, current_node)

    def parse_for_in_statement(self, statement, current_node, label=None):
        iterator_name = self.context.create_temporary_local_variable_name("iter")
        iterator = create_identifier(iterator_name)

        iterator_call = create_call_expression(create_identifier("$$iterator"), [statement["right"]])
        iterator_assignment = create_assignment_expression(iterator, iterator_call)
        condition_node = self.create_node().append_to(
            current_node, stringify(iterator_assignment), iterator_assignment
        )

        is_done = create_member_expression(iterator, create_identifier("done"))
        is_not_done = negate_truthiness(is_done)

        start_of_loop_body = self.create_node().append_conditionally_to(
            condition_node, stringify(is_not_done), is_not_done
        )
        final_node = self.create_node().append_conditionally_to(
            condition_node, stringify(is_done), is_done
        )

        left = statement["left"]
        if left["type"] == "VariableDeclaration":
            loop_variable = left["declarations"][0]["id"]
        else:
            loop_variable = left

        next_call = create_call_expression(create_member_expression(iterator, create_identifier("next")))
        loop_variable_assignment = create_assignment_expression(loop_variable, next_call)
        loop_variable_node = self.create_node().append_to(
            start_of_loop_body, stringify(loop_variable_assignment), loop_variable_assignment
        )

        self.context.push(
            OtherStatement(break_target=final_node, continue_target=condition_node, label=label)
        )
        loop_body_completion = self.parse_statement(statement["body"], loop_variable_node)
        self.context.pop()

        if loop_body_completion.is_normal:
            condition_node.append_epsilon_edge_to(loop_body_completion.node)

        return Completion.normal(final_node)

    # Abrupt completions

    def parse_break_statement(self, statement, current_node):
        enclosing_statement = self.find_labeled_enclosing_statement(statement.get("label"), "break")

        finalizer_completion = self.run_finalizers_before_break_or_continue(
            current_node, enclosing_statement
        )
        if not finalizer_completion.is_normal:
            return finalizer_completion

        enclosing_statement.break_target.append_to(
            finalizer_completion.node, "break", statement, EdgeType.ABRUPT_COMPLETION
        )
        return BREAK

    def parse_continue_statement(self, statement, current_node):
        enclosing_statement = self.find_labeled_enclosing_statement(statement.get("label"), "continue")

        if enclosing_statement.continue_target is None:
            label = enclosing_statement.label
            if label:
                message = f'Illegal continue target detected: "{label}" does not label an enclosing iteration statement'
            else:
                message = "Illegal continue target detected: the enclosing statement is not an iteration statement"
            raise InvalidControlTargetError(message, label)

        finalizer_completion = self.run_finalizers_before_break_or_continue(
            current_node, enclosing_statement
        )
        if not finalizer_completion.is_normal:
            return finalizer_completion

        enclosing_statement.continue_target.append_to(
            finalizer_completion.node, "continue", statement, EdgeType.ABRUPT_COMPLETION
        )
        return CONTINUE

    def find_labeled_enclosing_statement(self, label_node, keyword):
        if label_node:
            label = label_node["name"]
            enclosing_statement = self.context.find_enclosing_statement(
                lambda statement: statement.label == label
            )
        else:
            label = None
            enclosing_statement = self.context.find_enclosing_statement(is_break_or_continue_target)

        if enclosing_statement is None:
            target = f'label "{label}"' if label else "an enclosing statement"
            raise InvalidControlTargetError(f"Illegal {keyword} statement: {target} not found", label)

        return enclosing_statement

    def run_finalizers_before_break_or_continue(self, current_node, target):
        """Run the finalizers of try statements nested inside ``target``, innermost first"""
        for statement in self.context.enumerate_enclosing_statements():
            if isinstance(statement, TryStatement):
                finalizer = statement.run_finalizer(current_node)
                if finalizer is not None:
                    if not finalizer.body_completion.is_normal:
                        return finalizer.body_completion
                    current_node = finalizer.body_completion.node

            if statement is target:
                break

        return Completion.normal(current_node)

    def parse_return_statement(self, statement, current_node):
        argument = statement.get("argument")
        return_label = "return " + (stringify(argument) if argument is not None else "undefined")

        for enclosing_statement in self.context.enumerate_enclosing_statements():
            if not isinstance(enclosing_statement, TryStatement):
                continue

            finalizer = enclosing_statement.run_finalizer(current_node)
            if finalizer is not None:
                if not finalizer.body_completion.is_normal:
                    return finalizer.body_completion
                current_node = finalizer.body_completion.node

        self.context.current_flow_graph.success_exit.append_to(
            current_node, return_label, statement, EdgeType.ABRUPT_COMPLETION
        )
        return RETURN

    def parse_throw_statement(self, statement, current_node):
        argument = statement["argument"]
        throw_label = "throw " + stringify(argument)

        for enclosing_statement in self.context.enumerate_enclosing_statements():
            if not isinstance(enclosing_statement, TryStatement):
                continue

            if enclosing_statement.handler and enclosing_statement.is_currently_in_try_block:
                self.enter_handler(enclosing_statement, statement, current_node, throw_label)
                return THROW

            finalizer = enclosing_statement.run_finalizer(current_node)
            if finalizer is not None:
                if not finalizer.body_completion.is_normal:
                    return finalizer.body_completion
                current_node = finalizer.body_completion.node

        self.context.current_flow_graph.error_exit.append_to(
            current_node, throw_label, statement, EdgeType.ABRUPT_COMPLETION
        )
        return THROW

    def enter_handler(self, try_statement, throw_statement, current_node, throw_label):
        """Bind the thrown value to the catch parameter and jump into the handler body"""
        param = try_statement.handler.get("param")

        if param is None:
            try_statement.handler_body_entry.append_to(
                current_node, throw_label, throw_statement, EdgeType.ABRUPT_COMPLETION
            )
            return

        assignment = create_assignment_expression(param, throw_statement["argument"])
        assignment_node = self.create_node().append_to(current_node, stringify(assignment), assignment)
        try_statement.handler_body_entry.append_epsilon_edge_to(assignment_node)

    # Exception handling

    def parse_try_statement(self, statement, current_node):
        handler = get_catch_handler(statement)
        finalizer_block = statement.get("finalizer")
        depth = len(self.context.enclosing_statements)

        def parse_finalizer():
            # A finally block only sees the statements enclosing its try statement
            saved = self.context.enclosing_statements
            self.context.enclosing_statements = saved[: depth + 1]
            try:
                body_entry = self.create_node()
                body_completion = self.parse_block_statement(finalizer_block, body_entry)
            finally:
                self.context.enclosing_statements = saved
            return Finalizer(body_entry, body_completion)

        try_statement = TryStatement(
            handler=handler,
            handler_body_entry=self.create_node() if handler else None,
            parse_finalizer=parse_finalizer if finalizer_block else None,
        )

        self.context.push(try_statement)

        try_statement.is_currently_in_try_block = True
        try_completion = self.parse_block_statement(statement["block"], current_node)
        try_statement.is_currently_in_try_block = False

        handler_completion = None
        if handler:
            handler_completion = self.parse_block_statement(handler["body"], try_statement.handler_body_entry)

        self.context.pop()

        if not finalizer_block:
            if not handler:
                return try_completion
            return self.join_try_exits(try_completion, handler_completion)

        normal_exits = [
            completion
            for completion in (try_completion, handler_completion)
            if completion is not None and completion.is_normal
        ]

        if not handler and not normal_exits:
            return try_completion

        # Every normal way out gets its own copy of the finally block
        final_node = self.create_node()
        abrupt_completion = None

        for completion in normal_exits:
            finalizer = parse_finalizer()
            finalizer.body_entry.append_epsilon_edge_to(completion.node)

            if finalizer.body_completion.is_normal:
                final_node.append_epsilon_edge_to(finalizer.body_completion.node)
            else:
                abrupt_completion = finalizer.body_completion

        if abrupt_completion is not None and not final_node.incoming_edges:
            return abrupt_completion

        return Completion.normal(final_node)

    def join_try_exits(self, try_completion, handler_completion):
        final_node = self.create_node()

        if try_completion.is_normal:
            final_node.append_epsilon_edge_to(try_completion.node)
        if handler_completion.is_normal:
            final_node.append_epsilon_edge_to(handler_completion.node)

        return Completion.normal(final_node)


def partition_cases(cases):
    """
    Split switch cases into the clauses before the default clause, the
    default clause itself (None when absent) and the clauses after it.
    """
    case_clauses_a = []
    default_case = None
    case_clauses_b = []

    for switch_case in cases:
        if switch_case.get("test") is None:
            default_case = switch_case
        elif default_case is None:
            case_clauses_a.append(switch_case)
        else:
            case_clauses_b.append(switch_case)

    return case_clauses_a, default_case, case_clauses_b


def is_break_or_continue_target(statement):
    # A try statement is never itself the target of a plain break or continue
    return not isinstance(statement, TryStatement)
