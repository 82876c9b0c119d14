"""Parser for JTL, a line-oriented tag language."""

from .errors import (
    ParseException,
    MissingOrInvalidHeader,
    UnexpectedDirective,
    MalformedEnvAssignment,
    MalformedElementLine,
    UndefinedEnvReference,
    UnterminatedSection,
)
from .nodes import JTLString, JTLObject, JTLElement, JTLValue
from .document import JTLDocument, DocumentAssembler
from .environment import EnvironmentTable
from .scanner import LineScanner, ScannerConfig, Statement, StatementKind
from .element_parser import ElementParser
from .parser import JTLParser, ParserConfig, ParserState, parse, parse_env, stringify

__all__ = [
    "ParseException",
    "MissingOrInvalidHeader",
    "UnexpectedDirective",
    "MalformedEnvAssignment",
    "MalformedElementLine",
    "UndefinedEnvReference",
    "UnterminatedSection",
    "JTLString",
    "JTLObject",
    "JTLElement",
    "JTLValue",
    "JTLDocument",
    "DocumentAssembler",
    "EnvironmentTable",
    "LineScanner",
    "ScannerConfig",
    "Statement",
    "StatementKind",
    "ElementParser",
    "JTLParser",
    "ParserConfig",
    "ParserState",
    "parse",
    "parse_env",
    "stringify",
]
