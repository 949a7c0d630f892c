"""Data model for the Unicode Character Database and its stored documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping

from .properties import ATTRIBUTES, PropertyValue, default_properties, lookup_attribute

_RANGE_ATTRIBUTES = {"cp": "cp", "first-cp": "first_cp", "last-cp": "last_cp"}


@dataclass
class NameAlias:
    """An alternative name of a code point."""

    alias: str = ""
    type: str = ""

    def to_document(self) -> dict[str, str]:
        """Return the stored form of the alias."""
        return {"alias": self.alias, "type": self.type}


@dataclass
class CodePoint:
    """A single code point or a range of code points with its properties."""

    cp: str = ""
    first_cp: str = ""
    last_cp: str = ""
    properties: dict[str, PropertyValue] = field(default_factory=default_properties)
    name_aliases: list[NameAlias] = field(default_factory=list)
    id: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_attributes(
        cls,
        attributes: Mapping[str, str],
        name_aliases: Iterable[NameAlias] = (),
    ) -> CodePoint:
        """Build a code point from XML attribute names and raw values.

        Attributes that are not tracked are ignored. Raises ValueError when a
        value cannot be decoded for its property kind.
        """
        point = cls(name_aliases=list(name_aliases))
        for name, value in attributes.items():
            range_field = _RANGE_ATTRIBUTES.get(name)
            if range_field is not None:
                setattr(point, range_field, value)
                continue
            spec = lookup_attribute(name)
            if spec is not None:
                point.properties[spec.key] = spec.convert(value)
        return point

    def to_document(self) -> dict[str, Any]:
        """Return the stored form of the code point, properties inlined."""
        document: dict[str, Any] = {}
        if self.id is not None:
            document["_id"] = self.id
        document["cp"] = self.cp
        document["first_cp"] = self.first_cp
        document["last_cp"] = self.last_cp
        for spec in ATTRIBUTES:
            document[spec.key] = self.properties.get(spec.key, spec.kind.default)
            if spec.key == "name1":
                document["name_aliases"] = [
                    alias.to_document() for alias in self.name_aliases
                ]
        document["created_at"] = self.created_at
        document["updated_at"] = self.updated_at
        return document


@dataclass
class Block:
    """A named block of code points."""

    first_cp: str = ""
    last_cp: str = ""
    name: str = ""
    id: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> Block:
        """Build a block from the attributes of a ``block`` element."""
        return cls(
            first_cp=attributes.get("first-cp", ""),
            last_cp=attributes.get("last-cp", ""),
            name=attributes.get("name", ""),
        )

    def to_document(self) -> dict[str, Any]:
        """Return the stored form of the block."""
        document: dict[str, Any] = {}
        if self.id is not None:
            document["_id"] = self.id
        document["first_cp"] = self.first_cp
        document["last_cp"] = self.last_cp
        document["name"] = self.name
        document["created_at"] = self.created_at
        document["updated_at"] = self.updated_at
        return document


@dataclass
class Repertoire:
    """The code points of the database, grouped by element kind."""

    reserved: list[CodePoint] = field(default_factory=list)
    noncharacter: list[CodePoint] = field(default_factory=list)
    surrogate: list[CodePoint] = field(default_factory=list)
    code_points: list[CodePoint] = field(default_factory=list)


@dataclass
class UCD:
    """A parsed Unicode Character Database."""

    xmlns: str = ""
    description: str = ""
    repertoire: Repertoire | None = None
    blocks: list[Block] | None = None
    version: str = ""
    id: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        """Return the stored metadata; repertoire, blocks and namespace are left out."""
        document: dict[str, Any] = {}
        if self.id is not None:
            document["_id"] = self.id
        document["description"] = self.description
        document["created_at"] = self.created_at
        document["updated_at"] = self.updated_at
        document["version"] = self.version
        return document