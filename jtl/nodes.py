"""Value types produced by the JTL parser."""

from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


KEY_ATTRIBUTE = "KEY"
CONTENT_ATTRIBUTE = "Content"
CONTENTS_ATTRIBUTE = "Contents"
RESERVED_ATTRIBUTES = (KEY_ATTRIBUTE, CONTENT_ATTRIBUTE, CONTENTS_ATTRIBUTE)


class JTLString(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str

    def is_string(self) -> bool:
        return True

    def is_object(self) -> bool:
        return False

    def as_string(self) -> str:
        return self.value

    def as_object(self) -> "JTLObject":
        raise TypeError("JTL value is a string, not an object")

    def to_python(self) -> str:
        return self.value


class JTLObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    entries: Mapping[str, "JTLValue"] = Field(default_factory=dict, validate_default=True)

    @field_validator("entries", mode="after")
    @classmethod
    def freeze_entries(cls, entries: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(entries))

    @field_serializer("entries")
    def serialize_entries(self, entries: Mapping[str, Any]) -> dict[str, Any]:
        return {name: value.model_dump() for name, value in entries.items()}

    def is_string(self) -> bool:
        return False

    def is_object(self) -> bool:
        return True

    def as_string(self) -> str:
        raise TypeError("JTL value is an object, not a string")

    def as_object(self) -> "JTLObject":
        return self

    def get(self, name: str, default: "JTLValue | None" = None) -> "JTLValue | None":
        return self.entries.get(name, default)

    def keys(self) -> list[str]:
        return list(self.entries)

    def __getitem__(self, name: str) -> "JTLValue":
        return self.entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def to_python(self) -> dict[str, Any]:
        return {name: value.to_python() for name, value in self.entries.items()}


JTLValue = Annotated[Union[JTLString, JTLObject], Field(discriminator="kind")]

JTLObject.model_rebuild()


class JTLElement(JTLObject):
    """One parsed body line: explicit attributes plus ``KEY``/``Content``/``Contents``."""

    @classmethod
    def build(cls, attributes: dict[str, str], key: str, content: str) -> "JTLElement":
        entries: dict[str, JTLValue] = {name: JTLString(value=value) for name, value in attributes.items()}
        entries[KEY_ATTRIBUTE] = JTLString(value=key)
        entries[CONTENT_ATTRIBUTE] = JTLString(value=content)
        entries[CONTENTS_ATTRIBUTE] = JTLString(value=content)
        return cls(entries=entries)

    @property
    def key(self) -> str:
        return self.entries[KEY_ATTRIBUTE].as_string()

    @property
    def content(self) -> str:
        return self.entries[CONTENT_ATTRIBUTE].as_string()

    @property
    def attributes(self) -> dict[str, str]:
        return {
            name: value.as_string()
            for name, value in self.entries.items()
            if name not in RESERVED_ATTRIBUTES and value.is_string()
        }


__all__ = [
    "JTLString",
    "JTLObject",
    "JTLElement",
    "JTLValue",
    "KEY_ATTRIBUTE",
    "CONTENT_ATTRIBUTE",
    "CONTENTS_ATTRIBUTE",
    "RESERVED_ATTRIBUTES",
]
