"""Reading the flat UCD XML format and preparing its contents for storage."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import replace
from typing import Union

from .models import UCD, Block, CodePoint, NameAlias, Repertoire

logger = logging.getLogger(__name__)

_TRIMMED_KEYS = ("name", "name1", "block", "script")
_SELF_MAPPED_KEYS = (
    "bidi_mirroring_glyph",
    "decomposition_mapping",
    "simple_uppercase",
    "simple_lowercase",
    "simple_titlecase",
    "uppercase_mapping",
    "lowercase_mapping",
    "titlecase_mapping",
    "simple_case_folding",
    "case_folding",
)
_REPERTOIRE_LISTS = {
    "reserved": "reserved",
    "noncharacter": "noncharacter",
    "surrogate": "surrogate",
    "char": "code_points",
}


class UCDParseError(ValueError):
    """The XML data could not be read as a UCD document."""


class InvalidCodePointError(ValueError):
    """A code point lacks the fields that identify it."""


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rpartition("}")[2] if tag.startswith("{") else tag


def _namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].partition("}")[0]
    return ""


def _attributes(element: ET.Element) -> dict[str, str]:
    return {_local_name(name): value for name, value in element.attrib.items()}


def _read_code_point(element: ET.Element) -> CodePoint:
    aliases = []
    for child in element:
        if _local_name(child.tag) == "name-alias":
            attrs = _attributes(child)
            aliases.append(NameAlias(attrs.get("alias", ""), attrs.get("type", "")))
    return CodePoint.from_attributes(_attributes(element), aliases)


def _read_repertoire(element: ET.Element, repertoire: Repertoire) -> None:
    for child in element:
        target = _REPERTOIRE_LISTS.get(_local_name(child.tag))
        if target is not None:
            getattr(repertoire, target).append(_read_code_point(child))


def parse_ucd_xml(data: Union[bytes, str]) -> UCD:
    """Parse a flat UCD XML document. Raises UCDParseError on bad input."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise UCDParseError(f"failed to parse XML: {exc}") from exc

    ucd = UCD(xmlns=_namespace(root.tag))
    try:
        for child in root:
            name = _local_name(child.tag)
            if name == "description":
                ucd.description = "".join(child.itertext())
            elif name == "repertoire":
                if ucd.repertoire is None:
                    ucd.repertoire = Repertoire()
                _read_repertoire(child, ucd.repertoire)
            elif name == "blocks":
                if ucd.blocks is None:
                    ucd.blocks = []
                ucd.blocks.extend(
                    Block.from_attributes(_attributes(block))
                    for block in child
                    if _local_name(block.tag) == "block"
                )
    except ValueError as exc:
        raise UCDParseError(f"failed to parse XML: {exc}") from exc

    repertoire = ucd.repertoire
    items = 0
    if repertoire is not None:
        items = (
            len(repertoire.code_points)
            + len(repertoire.reserved)
            + len(repertoire.noncharacter)
            + len(repertoire.surrogate)
        )
    logger.info("Parsed UCD with %d repertoire items", items)
    if ucd.blocks is not None:
        logger.info("Found %d blocks", len(ucd.blocks))
    return ucd


def _clone(point: CodePoint) -> CodePoint:
    return replace(
        point,
        properties=dict(point.properties),
        name_aliases=list(point.name_aliases),
    )


def code_points_from_repertoire(repertoire: Repertoire | None) -> list[CodePoint]:
    """Return copies of every code point, reserved ones marked deprecated and
    noncharacters marked as such, in the order chars, reserved, noncharacters,
    surrogates."""
    if repertoire is None:
        return []

    logger.info("  - Regular characters: %d", len(repertoire.code_points))
    points = [_clone(point) for point in repertoire.code_points]

    logger.info("  - Reserved characters: %d", len(repertoire.reserved))
    for point in repertoire.reserved:
        copy = _clone(point)
        copy.properties["deprecated"] = True
        points.append(copy)

    logger.info("  - Noncharacters: %d", len(repertoire.noncharacter))
    for point in repertoire.noncharacter:
        copy = _clone(point)
        copy.properties["noncharacter"] = True
        points.append(copy)

    logger.info("  - Surrogate characters: %d", len(repertoire.surrogate))
    points.extend(_clone(point) for point in repertoire.surrogate)
    return points


def extract_all_code_points(ucd: UCD) -> list[CodePoint]:
    """Return all code points of the database for separate storage."""
    points = code_points_from_repertoire(ucd.repertoire)
    logger.info("Extracted %d total code points", len(points))
    return points


def extract_blocks(ucd: UCD) -> list[Block]:
    """Return the blocks of the database, or an empty list if it has none."""
    return list(ucd.blocks) if ucd.blocks is not None else []


def validate_code_point(cp: CodePoint) -> None:
    """Raise InvalidCodePointError unless the code point is identifiable."""
    if not cp.cp and not cp.first_cp:
        raise InvalidCodePointError("code point must have either cp or first-cp")
    if cp.first_cp and not cp.last_cp:
        raise InvalidCodePointError("code point with first-cp must also have last-cp")


def normalize_code_point(cp: CodePoint) -> None:
    """Trim name, block and script fields and clear ``#`` self-mappings, in place."""
    for key in _TRIMMED_KEYS:
        cp.properties[key] = str(cp.properties.get(key, "")).strip()
    for key in _SELF_MAPPED_KEYS:
        if cp.properties.get(key) == "#":
            cp.properties[key] = ""


def process_ucd_for_mongodb(ucd: UCD) -> tuple[list[CodePoint], list[Block]]:
    """Return the valid, normalized code points and the blocks of the database."""
    valid = []
    for point in extract_all_code_points(ucd):
        try:
            validate_code_point(point)
        except InvalidCodePointError as exc:
            logger.warning("Warning: skipping invalid code point: %s", exc)
            continue
        normalize_code_point(point)
        valid.append(point)

    blocks = extract_blocks(ucd)
    logger.info(
        "Processed %d valid code points and %d blocks", len(valid), len(blocks)
    )
    return valid, blocks