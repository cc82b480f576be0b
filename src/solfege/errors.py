"""
Exception types raised by the recognition pipeline.
"""


class SolfegeError(Exception):
    """Base class for all pipeline errors."""


class InputError(SolfegeError, ValueError):
    """A landmark frame was malformed (wrong landmark count, non-finite value)."""


class ConfigError(SolfegeError, ValueError):
    """A configuration value is out of range or inconsistent."""


class ModelError(SolfegeError):
    """A trained classifier model could not be loaded."""
