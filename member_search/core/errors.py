"""Errors raised by the search core.

Storage failures are not wrapped here: anything raised by SQLAlchemy reaches
the caller unchanged.
"""


class SearchError(Exception):
    """Base class for member search errors."""


class InvalidFilterError(SearchError, ValueError):
    """A filter value was supplied but could not be understood."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for filter '{field}': {value!r}")


class InvalidPageError(SearchError, ValueError):
    """Offset or limit outside the accepted range."""


class NonUniqueResultError(SearchError):
    """A single-result fetch matched more than one row."""


class ProjectionError(SearchError):
    """A row could not be mapped into the requested output shape."""
