"""Ordered JTL document container and the assembler that builds it."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator

from .nodes import JTLElement


@dataclass(frozen=True, slots=True)
class JTLDocument:
    elements: tuple[JTLElement, ...] = ()

    def __iter__(self) -> Iterator[JTLElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __getitem__(self, index: int) -> JTLElement:
        return self.elements[index]

    def to_python(self) -> list[dict[str, Any]]:
        return [element.to_python() for element in self.elements]

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_python(), indent=indent, ensure_ascii=False)


@dataclass
class DocumentAssembler:
    elements: list[JTLElement] = field(default_factory=list)

    def append(self, element: JTLElement) -> None:
        self.elements.append(element)

    def build(self) -> JTLDocument:
        return JTLDocument(elements=tuple(self.elements))


__all__ = ["JTLDocument", "DocumentAssembler"]
