from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Callable, Optional

from .CFG import ControlFlowGraph, FlowNode, NodeType


class CompletionType(Enum):
    NORMAL = "normal"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"
    THROW = "throw"


@dataclass(frozen=True)
class Completion:
    """Outcome of parsing a statement.

    Only a normal completion carries a node: after an abrupt completion
    control has already been transferred to its target.
    """

    type: CompletionType
    node: Optional[FlowNode] = None

    @classmethod
    def normal(cls, node):
        return cls(CompletionType.NORMAL, node)

    @property
    def is_normal(self):
        return self.type is CompletionType.NORMAL


BREAK = Completion(CompletionType.BREAK)
CONTINUE = Completion(CompletionType.CONTINUE)
RETURN = Completion(CompletionType.RETURN)
THROW = Completion(CompletionType.THROW)


@dataclass
class Finalizer:
    body_entry: FlowNode
    body_completion: Completion


@dataclass
class OtherStatement:
    """A loop, switch or labeled statement that break/continue can target"""

    break_target: FlowNode
    continue_target: Optional[FlowNode] = None
    label: Optional[str] = None


@dataclass
class TryStatement:
    """A try statement currently being parsed.

    ``parse_finalizer`` builds a fresh copy of the finally block each time
    it is called; it is None when there is no finally block.
    """

    handler: Optional[dict] = None
    handler_body_entry: Optional[FlowNode] = None
    parse_finalizer: Optional[Callable[[], Finalizer]] = None
    is_currently_in_try_block: bool = False
    is_currently_in_finalizer: bool = False
    label: Optional[str] = field(default=None, init=False)

    def run_finalizer(self, current_node):
        """
        Build a finalizer copy entered from ``current_node``.
        Returns None when there is nothing to run (no finally block, or we
        are already inside it).
        """
        if self.parse_finalizer is None or self.is_currently_in_finalizer:
            return None

        # A throw inside the finally block is not caught by this statement's handler
        in_try_block = self.is_currently_in_try_block
        self.is_currently_in_finalizer = True
        self.is_currently_in_try_block = False
        try:
            finalizer = self.parse_finalizer()
        finally:
            self.is_currently_in_finalizer = False
            self.is_currently_in_try_block = in_try_block

        finalizer.body_entry.append_epsilon_edge_to(current_node)
        return finalizer


class ParsingContext:
    """Mutable state of a single parse invocation"""

    def __init__(self):
        self._node_ids = count(1)
        self._function_ids = count(1)
        self._variable_name_ids = count(1)

        self.functions = []
        self.current_flow_graph = None
        self.enclosing_statements = []

    def create_node(self, node_type=NodeType.NORMAL):
        return FlowNode(next(self._node_ids), node_type)

    def create_function_id(self):
        return next(self._function_ids)

    def create_temporary_local_variable_name(self, name="temp"):
        return f"$${name}{next(self._variable_name_ids)}"

    def create_flow_graph(self):
        entry = self.create_node(NodeType.ENTRY)
        success_exit = self.create_node(NodeType.SUCCESS_EXIT)
        error_exit = self.create_node(NodeType.ERROR_EXIT)
        return ControlFlowGraph(entry, success_exit, error_exit)

    def push(self, enclosing_statement):
        self.enclosing_statements.append(enclosing_statement)

    def pop(self):
        return self.enclosing_statements.pop()

    def enumerate_enclosing_statements(self):
        """Innermost first"""
        return list(reversed(self.enclosing_statements))

    def find_enclosing_statement(self, predicate):
        for statement in reversed(self.enclosing_statements):
            if predicate(statement):
                return statement
        return None

    def enter_function(self, flow_graph):
        """Switch to a function's graph with an empty enclosing-statement stack"""
        saved = (self.current_flow_graph, self.enclosing_statements)
        self.current_flow_graph = flow_graph
        self.enclosing_statements = []
        return saved

    def leave_function(self, saved):
        self.current_flow_graph, self.enclosing_statements = saved
