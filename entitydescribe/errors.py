"""Errors raised while describing registered entities."""


class DescribeError(Exception):
    """Base class for describe failures."""
    pass


class UnknownPrefixError(DescribeError, LookupError):
    """Raised when a prefix is not registered with any entity provider."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(
            f"Invalid prefix ({prefix}), entity with that prefix does not exist"
        )
