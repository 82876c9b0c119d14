"""Per-parse table of values declared in the ENV section."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping


class EnvironmentTable:
    def __init__(self, values: Mapping[str, str] | None = None):
        self._values: dict[str, str] | Mapping[str, str] = dict(values or {})
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def define(self, name: str, value: str) -> None:
        if self._sealed:
            raise RuntimeError(f"Environment is sealed, cannot define '{name}'")
        self._values[name] = value  # type: ignore[index]

    def seal(self) -> None:
        self._values = MappingProxyType(dict(self._values))
        self._sealed = True

    def resolve(self, name: str) -> str | None:
        return self._values.get(name)

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EnvironmentTable):
            return self.as_dict() == other.as_dict()
        return NotImplemented

    def __repr__(self) -> str:
        return f"EnvironmentTable({self.as_dict()!r}, sealed={self._sealed})"
