class ESFlowError(Exception):
    """Base class for every error raised while building control flow graphs"""


class InvalidInputError(ESFlowError, ValueError):
    """The input is not an ESTree Program node"""


class UnsupportedConstructError(ESFlowError):
    """An AST node kind has no registered handler"""

    def __init__(self, node_type):
        super().__init__(f'Encountered unsupported statement type "{node_type}"')
        self.node_type = node_type


class InvalidControlTargetError(ESFlowError):
    """A break or continue statement does not resolve to a legal target"""

    def __init__(self, message, label=None):
        super().__init__(message)
        self.label = label
