import logging
from enum import Enum, auto
from typing import NotRequired, Optional, TypedDict
from jtl.document import DocumentAssembler, JTLDocument
from jtl.element_parser import ElementParser
from jtl.environment import EnvironmentTable
from jtl.errors import (
    MalformedEnvAssignment,
    ParseException,
    UnexpectedDirective,
    UnterminatedSection,
)
from jtl.logger import Logger
from jtl.scanner import DIRECTIVE_PREFIX, LineScanner, Statement, StatementKind
from jtl.utils import resolve_config


class ParserState(Enum):
    AWAITING_ENV = auto()
    COLLECTING_ENV = auto()
    IN_BODY = auto()
    DONE = auto()


class ParserConfig(TypedDict):
    strip_comments: NotRequired[bool]
    enable_logger: NotRequired[bool]
    log_level: NotRequired[int]


class ParserConfigRequired(TypedDict):
    strip_comments: bool
    enable_logger: bool
    log_level: int


DEFAULT_CONFIG: ParserConfigRequired = {"strip_comments": True, "enable_logger": False, "log_level": logging.DEBUG}


class JTLParser:
    """Single-pass section state machine over the statements of one document.

    Every call to :meth:`parse_document` or :meth:`parse_environment` starts
    from a fresh environment table and assembler, so one instance never leaks
    state between calls and separate instances share nothing.
    """

    def __init__(self, text: str, config: Optional[ParserConfig] = None):
        self.text = text
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(
            config={"name": "jtl.parser", "is_enabled": self.config["enable_logger"], "level": self.config["log_level"]}
        ).logger
        self._reset()

    def _reset(self) -> None:
        self.state = ParserState.AWAITING_ENV
        self.environment = EnvironmentTable()
        self.assembler = DocumentAssembler()
        self.element_parser = ElementParser(self.environment, logger=self.logger)

    def _scanner(self) -> LineScanner:
        return LineScanner(
            self.text,
            config={"strip_comments": self.config["strip_comments"], "enable_logger": self.config["enable_logger"]},
        )

    def parse_document(self) -> JTLDocument:
        self._reset()
        self.logger.info("Parsing JTL document")
        self._run(until=ParserState.DONE)
        document = self.assembler.build()
        self.logger.info(f"Parsed {len(document)} element(s)")
        return document

    def parse_environment(self) -> EnvironmentTable:
        self._reset()
        self.logger.info("Parsing JTL environment")
        self._run(until=ParserState.IN_BODY)
        return self.environment

    def _run(self, until: ParserState) -> None:
        try:
            for statement in self._scanner().statements():
                self._dispatch(statement)
                if until != ParserState.DONE and self.state == until:
                    return
            if self.state != until:
                expected = ">>>END" if until == ParserState.DONE else ">>>BEGIN"
                raise UnterminatedSection(self.state.name, expected=expected)
        except ParseException as e:
            self.logger.error(e)
            raise

    def _transition(self, state: ParserState) -> None:
        self.logger.debug(f"Transition {self.state.name} -> {state.name}")
        self.state = state

    def _unexpected(self, statement: Statement) -> UnexpectedDirective:
        return UnexpectedDirective(
            f"Unexpected {statement.kind.name.lower()} statement",
            state=self.state.name,
            statement=statement.text,
            line=statement.line,
            column=statement.column,
        )

    def _dispatch(self, statement: Statement) -> None:
        match self.state:
            case ParserState.AWAITING_ENV:
                if statement.directive != "ENV":
                    raise self._unexpected(statement)
                self._transition(ParserState.COLLECTING_ENV)
            case ParserState.COLLECTING_ENV:
                if statement.directive == "BEGIN":
                    self.environment.seal()
                    self._transition(ParserState.IN_BODY)
                elif statement.kind == StatementKind.ENV_ASSIGNMENT:
                    self._define(statement)
                else:
                    raise self._unexpected(statement)
            case ParserState.IN_BODY:
                if statement.directive == "END":
                    self._transition(ParserState.DONE)
                elif statement.text.startswith(DIRECTIVE_PREFIX):
                    raise self._unexpected(statement)
                else:
                    self.assembler.append(self.element_parser.parse(statement))
            case ParserState.DONE:
                raise self._unexpected(statement)

    def _define(self, statement: Statement) -> None:
        assignment = statement.text[len(DIRECTIVE_PREFIX) :]
        name, separator, value = assignment.partition("=")
        name = name.strip()
        if not separator or not name:
            raise MalformedEnvAssignment(
                "Environment assignment must be of the form >>>name=value",
                statement=statement.text,
                line=statement.line,
                column=statement.column,
            )
        self.environment.define(name, value.strip())
        self.logger.debug(f"Defined environment value '{name}'")


def parse(text: str, config: Optional[ParserConfig] = None) -> JTLDocument:
    """Parse a complete JTL document into an ordered, immutable :class:`JTLDocument`."""
    return JTLParser(text, config=config).parse_document()


def parse_env(text: str, config: Optional[ParserConfig] = None) -> EnvironmentTable:
    """Parse only the header and ENV section, returning the sealed environment table."""
    return JTLParser(text, config=config).parse_environment()


def stringify(document: JTLDocument, indent: Optional[int] = None) -> str:
    return document.to_json(indent=indent)


__all__ = ["JTLParser", "ParserConfig", "ParserState", "parse", "parse_env", "stringify"]
