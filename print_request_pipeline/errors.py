"""Exceptions raised by the print request pipeline."""


class PipelineError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(PipelineError):
    """Required configuration is missing or malformed.

    Raised once while building components; the process should not continue.
    """
