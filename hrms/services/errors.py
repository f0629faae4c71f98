class HRMSError(Exception):
    """Base class for rule-engine errors surfaced to request handlers."""


class InvalidContext(HRMSError):
    """Role context is missing or carries an unknown role code."""


class MalformedMenuNode(HRMSError):
    """A menu node's parent reference does not match the supplied forest."""

    def __init__(self, message, node_id=None, parent_id=None):
        super().__init__(message)
        self.node_id = node_id
        self.parent_id = parent_id


class InvalidCandidatePool(HRMSError):
    """A candidate in the pool cannot be identified."""


class InvalidWeights(HRMSError, ValueError):
    """Scoring weight vector is incomplete, negative or does not sum to 1."""
