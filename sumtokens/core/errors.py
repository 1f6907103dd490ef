class SumTokensError(Exception):
    """Base class for balance aggregation failures."""


class ConfigurationError(SumTokensError):
    """Request or wiring problem: missing chain, no handler, wrong pool type."""


class DataError(SumTokensError):
    """A fetched resource does not contain what the caller referenced."""
