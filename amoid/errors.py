# errors.py


class AmoidError(Exception):
    """Base class for errors that end the command with exit code 1."""


class ConfigError(AmoidError):
    """Missing or unreadable config file, or a missing credential."""


class InvalidArgument(AmoidError):
    """Conflicting or malformed command line arguments."""

    def __init__(self, message, usage=None):
        super().__init__(message)
        self.usage = usage


class RemoteQueryError(AmoidError):
    """The query service reported a failure or could not be reached."""


class InvalidInput(AmoidError, ValueError):
    """Inputs the query builder cannot turn into SQL."""
