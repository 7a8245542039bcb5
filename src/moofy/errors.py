"""Exception types shared by the storage layer, integrations and cogs."""

from __future__ import annotations

from discord.ext import commands

__all__ = [
    "MoofyError",
    "StorageError",
    "FetchError",
    "ErrorWithReason",
]


class MoofyError(Exception):
    """Base class for errors raised outside of command parsing."""


class StorageError(MoofyError):
    """A record could not be written to disk."""

    def __init__(self, path, cause: BaseException):
        super().__init__(f"Failed to save {path}: {cause}")
        self.path = path
        self.cause = cause


class FetchError(MoofyError):
    """An outbound HTTP request failed or returned a non-success status."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


class ErrorWithReason(commands.CommandError):
    """A command rejection whose message is meant for the person who ran it.

    The central error handler sends ``reason`` to the channel verbatim.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
