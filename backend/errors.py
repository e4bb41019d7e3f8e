"""Exception taxonomy for the review core.

``NotFoundError`` and ``ValidationError`` describe bad input and carry a
human-readable reason.  ``RepositoryError`` wraps a storage or database
failure (the original exception is chained as ``__cause__``).  None of them
are retried inside the core.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for every error raised by the review core."""


class NotFoundError(ReviewError):
    """An unknown project, version or comment id was referenced."""


class ValidationError(ReviewError):
    """Input was rejected: empty field, out-of-range value, bad manifest."""


class RepositoryError(ReviewError):
    """The database or the version file store failed underneath us."""
