"""Errors raised while configuring and sampling a typing session."""

from __future__ import annotations


class CodeTyperError(Exception):
    """Base class for every error surfaced to the user."""

    message = "unknown error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class PathMissing(CodeTyperError):
    message = "provide a path to a project"


class ZeroWordCount(CodeTyperError):
    message = "Word count can not be zero"


class InvalidConfig(CodeTyperError):
    message = "invalid configuration"


class NoFilesFound(CodeTyperError):
    message = "No code files found"


class InsufficientWords(CodeTyperError):
    message = "Not enough words to meet word count"
