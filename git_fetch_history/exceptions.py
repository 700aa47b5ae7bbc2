"""Error taxonomy for the commit history service.

Every stage raises one of these and lets it propagate. The supervisor is the
only place that decides an error is fatal; HistoryInconsistency is the one
condition the commit pipeline recovers from on its own.
"""


class GitFetchHistoryError(Exception):
    """Base class for all service errors."""


class ConfigurationError(GitFetchHistoryError):
    """Required settings are missing or invalid."""


class CredentialError(GitFetchHistoryError):
    """Repository access key material cannot be loaded."""


class TransportError(GitFetchHistoryError):
    """A clone, pull, log or diff operation failed."""


class HistoryInconsistency(GitFetchHistoryError):
    """A commit's first parent is not one of its ancestors."""

    def __init__(self, commit: str, parent: str):
        super().__init__(f"Parent {parent} is not an ancestor of {commit}")
        self.commit = commit
        self.parent = parent


class PublishError(GitFetchHistoryError):
    """Writing a record to the sink failed."""
