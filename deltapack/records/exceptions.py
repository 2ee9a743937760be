"""Records subsystem exceptions."""


class RecordsError(Exception):
    """Base class for dataset and record errors."""


class DatasetFormatError(RecordsError):
    """Dataset file could not be read as delimited text."""


class SanitationPolicyConfigError(ValueError):
    """Raised when a sanitation policy config payload is invalid."""
