import re
from typing import Dict, Optional, Tuple
from jtl.environment import EnvironmentTable
from jtl.errors import MalformedElementLine, UndefinedEnvReference
from jtl.nodes import JTLElement, RESERVED_ATTRIBUTES
from jtl.scanner import ELEMENT_PREFIX, Statement


SEGMENT_DELIMITER = ">"
ENV_REFERENCE_PREFIX = "$env:"

ASSIGNMENT_PATTERN = re.compile(r'\s*([A-Za-z_][A-Za-z0-9_.:-]*)="([^"]*)"\s*' + SEGMENT_DELIMITER)
KEY_PATTERN = re.compile(r'^[^\s="]+$')


class ElementParser:
    """Turns a body statement ``>a="1">b="2">key>content`` into a :class:`JTLElement`.

    Leading ``name="value">`` assignments are read first, so a ``>`` inside a
    quoted value does not split. The rest must be exactly ``key>content``;
    the content is taken verbatim, quotes included.
    """

    def __init__(self, environment: EnvironmentTable, logger=None):
        self.environment = environment
        self.logger = logger

    def parse(self, statement: Statement) -> JTLElement:
        text = statement.text
        if not text.startswith(ELEMENT_PREFIX):
            raise self._malformed(f"Element line must start with '{ELEMENT_PREFIX}'", statement)

        attributes, tail = self._read_attributes(text[len(ELEMENT_PREFIX) :], statement)
        segments = tail.split(SEGMENT_DELIMITER)
        if len(segments) < 2:
            raise self._malformed("Element needs at least a key and a content segment", statement)

        *unparsed, key, content_expression = segments
        if unparsed:
            raise self._malformed(f"Attribute '{unparsed[0]}' is not of the form name=\"value\"", statement)
        key = key.strip()
        if not KEY_PATTERN.match(key):
            raise self._malformed(f"Invalid key token '{key}'", statement)
        if not content_expression:
            raise self._malformed("Element content is empty", statement)
        content = self.resolve_content(content_expression, statement)

        element = JTLElement.build(attributes, key=key, content=content)
        if self.logger:
            self.logger.debug(f"Parsed element {key} with {len(attributes)} attribute(s) at line {statement.line}")
        return element

    def _read_attributes(self, body: str, statement: Statement) -> Tuple[Dict[str, str], str]:
        attributes: Dict[str, str] = {}
        position = 0
        while match := ASSIGNMENT_PATTERN.match(body, position):
            name, value = match.group(1), match.group(2)
            if name in RESERVED_ATTRIBUTES and self.logger:
                self.logger.warning(f"Attribute '{name}' at line {statement.line} is reserved and will be overwritten")
            attributes[name] = value
            position = match.end()
        return attributes, body[position:]

    def resolve_content(self, expression: str, statement: Optional[Statement] = None) -> str:
        if not expression.startswith(ENV_REFERENCE_PREFIX):
            return expression
        name = expression[len(ENV_REFERENCE_PREFIX) :]
        value = self.environment.resolve(name)
        if value is None:
            raise UndefinedEnvReference(
                name,
                statement=statement.text if statement else None,
                line=statement.line if statement else None,
                column=statement.column if statement else None,
            )
        return value

    def _malformed(self, message: str, statement: Statement) -> MalformedElementLine:
        return MalformedElementLine(message, statement=statement.text, line=statement.line, column=statement.column)


__all__ = ["ElementParser", "ENV_REFERENCE_PREFIX"]
