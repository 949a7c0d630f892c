from datetime import datetime

import pytest

from ucdmongo.models import UCD, Block, CodePoint, NameAlias, Repertoire
from ucdmongo.properties import ATTRIBUTES, default_properties


def test_from_attributes_maps_xml_names_to_keys():
    point = CodePoint.from_attributes(
        {
            "cp": "00E9",
            "na": "LATIN SMALL LETTER E WITH ACUTE",
            "gc": "Ll",
            "Lower": "Y",
            "WSpace": "N",
        }
    )
    assert point.cp == "00E9"
    assert point.properties["name"] == "LATIN SMALL LETTER E WITH ACUTE"
    assert point.properties["general_category"] == "Ll"
    assert point.properties["lowercase"] is True
    assert point.properties["white_space"] is False


def test_from_attributes_reads_range():
    point = CodePoint.from_attributes({"first-cp": "3400", "last-cp": "4DBF"})
    assert (point.cp, point.first_cp, point.last_cp) == ("", "3400", "4DBF")


def test_absent_attributes_keep_defaults():
    point = CodePoint.from_attributes({})
    assert point.properties == default_properties()
    assert point.name_aliases == []


def test_unknown_attributes_are_ignored():
    point = CodePoint.from_attributes({"cp": "0041", "zzUnknown": "whatever"})
    assert point.properties == default_properties()


def test_combining_class_is_integer():
    point = CodePoint.from_attributes({"cp": "0301", "ccc": "230"})
    assert point.properties["combining_class"] == 230


def test_invalid_boolean_raises():
    with pytest.raises(ValueError):
        CodePoint.from_attributes({"cp": "0041", "Upper": "yes"})


def test_name_aliases_are_kept():
    aliases = [NameAlias("ALERT", "control"), NameAlias("BEL", "abbreviation")]
    point = CodePoint.from_attributes({"cp": "0007"}, aliases)
    assert [a.alias for a in point.name_aliases] == ["ALERT", "BEL"]


def test_name_alias_document():
    assert NameAlias("ALERT", "control").to_document() == {
        "alias": "ALERT",
        "type": "control",
    }


def test_code_point_document_key_order():
    document = CodePoint.from_attributes({"cp": "0041"}).to_document()
    keys = list(document)
    assert keys[:8] == [
        "cp",
        "first_cp",
        "last_cp",
        "age",
        "name",
        "name1",
        "name_aliases",
        "block",
    ]
    assert keys[-2:] == ["created_at", "updated_at"]
    assert "_id" not in document


def test_code_point_document_holds_every_property():
    document = CodePoint().to_document()
    assert all(spec.key in document for spec in ATTRIBUTES)


def test_code_point_document_with_id_and_aliases():
    marker = object()
    stamp = datetime(2024, 1, 1)
    point = CodePoint(
        cp="0007",
        name_aliases=[NameAlias("ALERT", "control")],
        id=marker,
        created_at=stamp,
        updated_at=stamp,
    )
    document = point.to_document()
    assert next(iter(document)) == "_id"
    assert document["_id"] is marker
    assert document["name_aliases"] == [{"alias": "ALERT", "type": "control"}]
    assert document["created_at"] == stamp


def test_code_points_do_not_share_properties():
    first = CodePoint()
    second = CodePoint()
    first.properties["name"] = "X"
    assert second.properties["name"] == ""


def test_block_round_trip():
    block = Block.from_attributes({"first-cp": "0000", "last-cp": "007F", "name": "ASCII"})
    assert block == Block("0000", "007F", "ASCII")
    document = block.to_document()
    assert document["first_cp"] == "0000"
    assert document["last_cp"] == "007F"
    assert document["name"] == "ASCII"
    assert "_id" not in document


def test_ucd_document_excludes_unstored_fields():
    ucd = UCD(
        xmlns="urn:example:ucd",
        description="sample",
        repertoire=Repertoire(),
        blocks=[Block(name="ASCII")],
        version="16.0.0",
    )
    document = ucd.to_document()
    assert set(document) == {"description", "created_at", "updated_at", "version"}
    assert document["version"] == "16.0.0"
    assert document["description"] == "sample"


def test_repertoire_defaults_are_empty():
    repertoire = Repertoire()
    assert (
        repertoire.reserved,
        repertoire.noncharacter,
        repertoire.surrogate,
        repertoire.code_points,
    ) == ([], [], [], [])