"""Exceptions raised while importing and querying statistics."""


class BethYwError(Exception):
    """Base class for every error raised by the importer."""


class NotFound(BethYwError, KeyError):
    """Raised when an area, measure, name or year lookup misses."""

    def __str__(self) -> str:
        # KeyError would otherwise quote the message.
        return str(self.args[0]) if self.args else ""


class InvalidArgument(BethYwError, ValueError):
    """Raised when caller supplied input has the wrong shape."""


class MalformedInput(BethYwError, ValueError):
    """Raised when source data does not match the expected layout."""


class InvalidInput(BethYwError, RuntimeError):
    """Raised when a stream cannot be read before parsing starts."""
