"""Exceptions raised by hogwatch."""


class HogwatchError(Exception):
    """Base class for all hogwatch errors."""


class CacheError(HogwatchError):
    """The ignore cache cannot be created, read, decoded or written."""


class ConfigError(HogwatchError):
    """The settings file exists but is not valid."""


class NotifierError(HogwatchError):
    """The notifier could not be launched at all."""
