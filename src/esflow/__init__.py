from .codeviews.CFG.CFG import (
    ControlFlowGraph,
    EdgeType,
    FlowEdge,
    FlowFunction,
    FlowNode,
    FlowProgram,
    NodeType,
)
from .codeviews.CFG.CFG_driver import CFGDriver, parse
from .errors import (
    ESFlowError,
    InvalidControlTargetError,
    InvalidInputError,
    UnsupportedConstructError,
)
from .utils.postprocessor import (
    export_as_dot,
    export_as_json,
    export_as_object,
    export_program,
)

__version__ = "0.1.0"
