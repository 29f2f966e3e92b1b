"""
Exception types for fatal pipeline failures.
"""


class RegwatchError(Exception):
    """Base class for errors that abort a run."""


class RegistryError(RegwatchError):
    """The source registry could not be read or has the wrong shape."""


class PublishError(RegwatchError):
    """The feed artifact could not be written."""
