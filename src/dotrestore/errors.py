"""Exceptions raised by dotrestore."""


class RestoreError(Exception):
    """A fatal condition that stops the restore run."""
