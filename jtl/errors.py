"""Error kinds raised while parsing a JTL document.

Every error is fatal: the parser aborts on the first one and no partial
document is returned.
"""

from __future__ import annotations

from typing import Optional


class ParseException(Exception):
    def __init__(
        self,
        message: str,
        statement: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.message = message
        self.statement = statement
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} at line {line}, column {column or 1}"
        if statement is not None:
            message = f"{message}: {statement!r}"
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class MissingOrInvalidHeader(ParseException):
    """The first line is not ``DOCTYPE=JTL``."""


class UnexpectedDirective(ParseException):
    """A statement appeared in a section where it is not allowed."""

    def __init__(self, message: str, state: str, **kwargs):
        self.state = state
        super().__init__(f"{message} (state {state})", **kwargs)


class MalformedEnvAssignment(ParseException):
    """An ENV statement is not of the form ``>>>name=value``."""


class MalformedElementLine(ParseException):
    """A body statement could not be split into attributes, key and content."""


class UndefinedEnvReference(ParseException):
    def __init__(self, name: str, **kwargs):
        self.name = name
        super().__init__(f"Undefined environment reference '$env:{name}'", **kwargs)


class UnterminatedSection(ParseException):
    def __init__(self, state: str, expected: str):
        self.state = state
        self.expected = expected
        super().__init__(f"Reached end of input in state {state}, expected '{expected}'")


__all__ = [
    "ParseException",
    "MissingOrInvalidHeader",
    "UnexpectedDirective",
    "MalformedEnvAssignment",
    "MalformedElementLine",
    "UndefinedEnvReference",
    "UnterminatedSection",
]
