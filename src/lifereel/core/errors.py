"""Exception hierarchy for the lifereel chronology engine.

Bucketing and ordering are total functions over valid instants, so the
engine only fails in two ways: it was handed something that is not an
instant, or it was asked to resolve a label outside its vocabulary.

Example:
    >>> from lifereel.core.errors import UnresolvableLabelError
    >>> try:
    ...     resolver.resolve_range("Someday", birth)
    ... except UnresolvableLabelError as e:
    ...     print(f"No window for {e.label!r}")
"""


class ChronologyError(Exception):
    """Base exception for chronology engine errors."""

    pass


class InvalidInputError(ChronologyError, ValueError):
    """Raised when a birth date or photo timestamp is absent or malformed.

    Also raised when a naive and a timezone-aware datetime are mixed in one
    computation, since their difference is undefined.
    """

    pass


class UnresolvableLabelError(ChronologyError, ValueError):
    """Raised when a bucket label has no date range.

    Attributes:
        label: The label text (or label object) that could not be resolved.
    """

    def __init__(self, label: object, message: str | None = None) -> None:
        self.label = label
        super().__init__(message or f"Cannot resolve a date range for label {str(label)!r}")
