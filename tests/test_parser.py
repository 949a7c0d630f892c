import pytest

from ucdmongo.models import UCD, CodePoint, Repertoire
from ucdmongo.parser import (
    InvalidCodePointError,
    UCDParseError,
    code_points_from_repertoire,
    extract_all_code_points,
    extract_blocks,
    normalize_code_point,
    parse_ucd_xml,
    process_ucd_for_mongodb,
    validate_code_point,
)

SAMPLE = b"""<?xml version="1.0" encoding="UTF-8"?>
<ucd xmlns="urn:example:ucd">
  <description>Unicode 16.0.0</description>
  <repertoire>
    <char cp="0041" age="1.1" na="LATIN CAPITAL LETTER A" blk="ASCII" gc="Lu"
          ccc="0" sc="Latn" slc="0061" suc="#" Upper="Y" Lower="N"/>
    <char cp="0007" na="" blk="ASCII" gc="Cc" ccc="0">
      <name-alias alias="ALERT" type="control"/>
      <name-alias alias="BEL" type="abbreviation"/>
    </char>
    <reserved first-cp="0378" last-cp="0379" blk="Greek"/>
    <noncharacter first-cp="FDD0" last-cp="FDEF" blk="Arabic_PF_A"/>
    <surrogate first-cp="D800" last-cp="DB7F" blk="High_Surrogates"/>
    <group/>
  </repertoire>
  <blocks>
    <block first-cp="0000" last-cp="007F" name="ASCII"/>
    <block first-cp="0080" last-cp="00FF" name="Latin_1_Sup"/>
  </blocks>
</ucd>"""


def _ident(point):
    return point.cp or point.first_cp


def test_parse_reads_namespace_and_description():
    ucd = parse_ucd_xml(SAMPLE)
    assert ucd.xmlns == "urn:example:ucd"
    assert ucd.description == "Unicode 16.0.0"


def test_parse_reads_chars():
    ucd = parse_ucd_xml(SAMPLE)
    chars = ucd.repertoire.code_points
    assert [p.cp for p in chars] == ["0041", "0007"]
    first = chars[0]
    assert first.properties["name"] == "LATIN CAPITAL LETTER A"
    assert first.properties["script"] == "Latn"
    assert first.properties["uppercase"] is True
    assert first.properties["lowercase"] is False
    assert [(a.alias, a.type) for a in chars[1].name_aliases] == [
        ("ALERT", "control"),
        ("BEL", "abbreviation"),
    ]


def test_parse_reads_other_repertoire_kinds():
    repertoire = parse_ucd_xml(SAMPLE).repertoire
    assert [p.first_cp for p in repertoire.reserved] == ["0378"]
    assert [p.last_cp for p in repertoire.noncharacter] == ["FDEF"]
    assert [p.properties["block"] for p in repertoire.surrogate] == ["High_Surrogates"]


def test_parse_reads_blocks():
    ucd = parse_ucd_xml(SAMPLE)
    assert [(b.first_cp, b.last_cp, b.name) for b in ucd.blocks] == [
        ("0000", "007F", "ASCII"),
        ("0080", "00FF", "Latin_1_Sup"),
    ]


def test_parse_accepts_text():
    ucd = parse_ucd_xml(SAMPLE.decode("utf-8"))
    assert len(ucd.repertoire.code_points) == 2


def test_parse_without_sections():
    ucd = parse_ucd_xml(b"<ucd><description>empty</description></ucd>")
    assert ucd.xmlns == ""
    assert ucd.repertoire is None
    assert ucd.blocks is None
    assert extract_all_code_points(ucd) == []
    assert extract_blocks(ucd) == []


def test_parse_merges_repeated_repertoires():
    data = b"""<ucd><repertoire><char cp="0041"/></repertoire>
    <repertoire><char cp="0042"/></repertoire></ucd>"""
    ucd = parse_ucd_xml(data)
    assert [p.cp for p in ucd.repertoire.code_points] == ["0041", "0042"]


def test_parse_rejects_malformed_xml():
    with pytest.raises(UCDParseError):
        parse_ucd_xml(b"<ucd><repertoire></ucd>")


def test_parse_rejects_empty_input():
    with pytest.raises(UCDParseError):
        parse_ucd_xml(b"")


def test_parse_rejects_invalid_boolean():
    with pytest.raises(UCDParseError):
        parse_ucd_xml(b'<ucd><repertoire><char cp="0041" Upper="maybe"/></repertoire></ucd>')


def test_parse_rejects_invalid_integer():
    with pytest.raises(UCDParseError):
        parse_ucd_xml(b'<ucd><repertoire><char cp="0041" ccc="x"/></repertoire></ucd>')


def test_code_points_from_repertoire_order_and_flags():
    repertoire = parse_ucd_xml(SAMPLE).repertoire
    points = code_points_from_repertoire(repertoire)
    assert [_ident(p) for p in points] == ["0041", "0007", "0378", "FDD0", "D800"]
    assert points[2].properties["deprecated"] is True
    assert points[3].properties["noncharacter"] is True
    assert points[4].properties["deprecated"] is False


def test_code_points_from_repertoire_leaves_source_untouched():
    repertoire = parse_ucd_xml(SAMPLE).repertoire
    code_points_from_repertoire(repertoire)
    assert repertoire.reserved[0].properties["deprecated"] is False
    assert repertoire.noncharacter[0].properties["noncharacter"] is False


def test_code_points_from_missing_repertoire():
    assert code_points_from_repertoire(None) == []


def test_extract_blocks_returns_copy_of_list():
    ucd = parse_ucd_xml(SAMPLE)
    blocks = extract_blocks(ucd)
    blocks.clear()
    assert len(ucd.blocks) == 2


def test_validate_requires_identifier():
    with pytest.raises(InvalidCodePointError, match="either cp or first-cp"):
        validate_code_point(CodePoint())


def test_validate_requires_last_cp():
    with pytest.raises(InvalidCodePointError, match="must also have last-cp"):
        validate_code_point(CodePoint(first_cp="3400"))


def test_normalize_trims_and_clears_self_mappings():
    point = CodePoint.from_attributes(
        {
            "cp": "0041",
            "na": "  LETTER  ",
            "blk": " ASCII ",
            "suc": "#",
            "dm": "#",
            "cf": "0061",
        }
    )
    normalize_code_point(point)
    assert point.properties["name"] == "LETTER"
    assert point.properties["block"] == "ASCII"
    assert point.properties["simple_uppercase"] == ""
    assert point.properties["decomposition_mapping"] == ""
    assert point.properties["case_folding"] == "0061"


def test_process_skips_invalid_and_normalizes():
    ucd = parse_ucd_xml(SAMPLE)
    ucd.repertoire.code_points.append(CodePoint())
    ucd.repertoire.reserved.append(CodePoint(first_cp="E000"))
    points, blocks = process_ucd_for_mongodb(ucd)
    assert [_ident(p) for p in points] == ["0041", "0007", "0378", "FDD0", "D800"]
    assert points[0].properties["simple_uppercase"] == ""
    assert points[0].properties["simple_lowercase"] == "0061"
    assert [b.name for b in blocks] == ["ASCII", "Latin_1_Sup"]


def test_process_empty_ucd():
    points, blocks = process_ucd_for_mongodb(UCD(repertoire=Repertoire()))
    assert (points, blocks) == ([], [])