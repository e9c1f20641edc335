"""Error taxonomy for a skip-review run.

Every error here is fatal: the run aborts and no label or comment is applied.
"""


class SkipReviewError(Exception):
    """Base class for fatal run errors."""


class ConfigurationError(SkipReviewError):
    """Required credential, setting or PR context is missing or invalid."""


class CollaboratorIOError(SkipReviewError):
    """A GitHub call (file fetch, label, comment) failed."""


class OracleIOError(SkipReviewError):
    """The inference call failed at the transport or HTTP level."""


class OracleSchemaError(SkipReviewError):
    """The oracle response is not JSON or is not a well-formed verdict."""
