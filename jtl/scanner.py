import re
from typing import Iterator, List, NotRequired, Optional, Tuple, TypedDict
from enum import Enum, auto
from dataclasses import dataclass
from jtl.errors import MissingOrInvalidHeader
from jtl.logger import Logger
from jtl.utils import resolve_config


HEADER = "DOCTYPE=JTL"
TERMINATOR = ";"
DIRECTIVE_PREFIX = ">>>"
ELEMENT_PREFIX = ">"
LINE_COMMENT_PREFIX = ">//>"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"

SECTION_DIRECTIVES = {"ENV", "BEGIN", "END"}
LINE_BREAK = re.compile(r"(\r\n|\r|\n)")


class StatementKind(Enum):
    DIRECTIVE = auto()
    ENV_ASSIGNMENT = auto()
    ELEMENT = auto()
    TEXT = auto()

    @classmethod
    def classify(cls, text: str) -> "StatementKind":
        if text.startswith(DIRECTIVE_PREFIX):
            if text[len(DIRECTIVE_PREFIX) :] in SECTION_DIRECTIVES:
                return cls.DIRECTIVE
            return cls.ENV_ASSIGNMENT
        if text.startswith(ELEMENT_PREFIX):
            return cls.ELEMENT
        return cls.TEXT


@dataclass(slots=True)
class Statement:
    kind: StatementKind
    text: str
    line: int
    column: int

    @property
    def directive(self) -> Optional[str]:
        if self.kind != StatementKind.DIRECTIVE:
            return None
        return self.text[len(DIRECTIVE_PREFIX) :]


class ScannerConfig(TypedDict):
    strip_comments: NotRequired[bool]
    enable_logger: NotRequired[bool]


class ScannerConfigRequired(TypedDict):
    strip_comments: bool
    enable_logger: bool


DEFAULT_CONFIG: ScannerConfigRequired = {
    "strip_comments": True,
    "enable_logger": False,
}


class LineScanner:
    """Splits a JTL document into trimmed, ``;``-terminated statements.

    ``statements()`` is a generator: it verifies the ``DOCTYPE=JTL`` header on
    first use and then yields one :class:`Statement` at a time. A statement may
    span several physical lines; its position is that of its first
    non-whitespace character.
    """

    def __init__(self, text: str, config: Optional[ScannerConfig] = None):
        self.text = text[1:] if text.startswith("\ufeff") else text
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "jtl.scanner", "is_enabled": self.config["enable_logger"]}).logger

    def _split_lines(self) -> List[Tuple[str, str]]:
        parts = LINE_BREAK.split(self.text)
        return list(zip(parts[0::2], parts[1::2] + [""]))

    def _verify_header(self, first_line: str) -> None:
        first_line = first_line.strip()
        if first_line not in {HEADER, HEADER + TERMINATOR}:
            raise MissingOrInvalidHeader(f"Expected '{HEADER}' on the first line", statement=first_line, line=1)
        self.logger.debug("Header verified")

    def _is_comment_line(self, stripped: str) -> bool:
        return stripped.startswith(LINE_COMMENT_PREFIX) or stripped.startswith(BLOCK_COMMENT_CLOSE)

    def _flush(self, buffer: List[str], start: Optional[Tuple[int, int]]) -> Optional[Statement]:
        text = "".join(buffer).strip()
        if not text or start is None:
            return None
        if self.config["strip_comments"] and text.startswith(LINE_COMMENT_PREFIX):
            self.logger.debug(f"Skipping comment statement at line {start[0]}")
            return None
        statement = Statement(StatementKind.classify(text), text, start[0], start[1])
        self.logger.debug(f"Scanned {statement.kind.name} statement '{text}' at line {start[0]}, column {start[1]}")
        return statement

    def statements(self) -> Iterator[Statement]:
        lines = self._split_lines()
        self._verify_header(lines[0][0])
        strip_comments = self.config["strip_comments"]
        in_block_comment = False
        buffer: List[str] = []
        start: Optional[Tuple[int, int]] = None

        for line_number, (raw_line, line_ending) in enumerate(lines[1:], start=2):
            stripped = raw_line.strip()
            if strip_comments:
                if in_block_comment:
                    in_block_comment = BLOCK_COMMENT_CLOSE not in raw_line
                    continue
                if stripped.startswith(BLOCK_COMMENT_OPEN):
                    in_block_comment = BLOCK_COMMENT_CLOSE not in stripped[len(BLOCK_COMMENT_OPEN) :]
                    continue
                if self._is_comment_line(stripped):
                    continue

            column = 1
            pieces = raw_line.split(TERMINATOR)
            for index, piece in enumerate(pieces):
                if start is None and piece.strip():
                    start = (line_number, column + len(piece) - len(piece.lstrip()))
                buffer.append(piece)
                if index < len(pieces) - 1:
                    statement = self._flush(buffer, start)
                    if statement is not None:
                        yield statement
                    buffer = []
                    start = None
                column += len(piece) + len(TERMINATOR)
            buffer.append(line_ending)

        # unterminated trailing text still counts as a statement
        statement = self._flush(buffer, start)
        if statement is not None:
            yield statement


__all__ = ["LineScanner", "ScannerConfig", "Statement", "StatementKind", "HEADER"]
