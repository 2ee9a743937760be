"""Core subsystem exceptions."""


class DeltaError(Exception):
    """Base class for jsondelta core errors."""


class InvalidValueError(DeltaError, ValueError):
    """Input is outside the JSON value domain (cycle, NaN, unsupported type)."""


class InvalidSideError(DeltaError, ValueError):
    """Render side is neither left nor right."""
