"""Table of code point property attributes and their document keys."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .ucdbool import parse_ucd_bool

PropertyValue = Union[str, bool, int]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class PropertyKind(Enum):
    """How an attribute value is decoded."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"

    @property
    def default(self) -> PropertyValue:
        """Value a property holds when its attribute is absent."""
        if self is PropertyKind.BOOL:
            return False
        if self is PropertyKind.INT:
            return 0
        return ""


@dataclass(frozen=True)
class AttributeSpec:
    """One XML attribute of a code point and the document key it maps to."""

    xml_name: str
    key: str
    kind: PropertyKind

    def convert(self, value: str) -> PropertyValue:
        """Decode a raw attribute value according to the property kind."""
        if self.kind is PropertyKind.BOOL:
            return parse_ucd_bool(value)
        if self.kind is PropertyKind.INT:
            text = value.strip()
            if not text:
                return 0
            if not _INT_PATTERN.fullmatch(text):
                raise ValueError(
                    f"invalid integer for attribute {self.xml_name!r}: {value!r}"
                )
            number = int(text)
            if not _INT64_MIN <= number <= _INT64_MAX:
                raise ValueError(
                    f"integer out of range for attribute {self.xml_name!r}: {value!r}"
                )
            return number
        return value


_S = PropertyKind.STRING
_B = PropertyKind.BOOL
_I = PropertyKind.INT

_TABLE = (
    # age and names
    ("age", "age", _S),
    ("na", "name", _S),
    ("na1", "name1", _S),
    ("blk", "block", _S),
    ("gc", "general_category", _S),
    ("ccc", "combining_class", _I),
    # bidi
    ("bc", "bidi_class", _S),
    ("Bidi_M", "bidi_mirrored", _B),
    ("bmg", "bidi_mirroring_glyph", _S),
    ("Bidi_C", "bidi_control", _B),
    ("bpt", "bidi_paired_bracket_type", _S),
    ("bpb", "bidi_paired_bracket", _S),
    # decomposition and normalization
    ("dt", "decomposition_type", _S),
    ("dm", "decomposition_mapping", _S),
    ("CE", "composition_exclusion", _B),
    ("Comp_Ex", "full_composition_exclusion", _B),
    ("NFC_QC", "nfc_qc", _S),
    ("NFD_QC", "nfd_qc", _S),
    ("NFKC_QC", "nfkc_qc", _S),
    ("NFKD_QC", "nfkd_qc", _S),
    ("XO_NFC", "xo_nfc", _B),
    ("XO_NFD", "xo_nfd", _B),
    ("XO_NFKC", "xo_nfkc", _B),
    ("XO_NFKD", "xo_nfkd", _B),
    ("FC_NFKC", "fc_nfkc", _S),
    # numeric
    ("nt", "numeric_type", _S),
    ("nv", "numeric_value", _S),
    # joining
    ("jt", "joining_type", _S),
    ("jg", "joining_group", _S),
    ("Join_C", "join_control", _B),
    ("lb", "line_break", _S),
    ("ea", "east_asian_width", _S),
    # case
    ("Upper", "uppercase", _B),
    ("Lower", "lowercase", _B),
    ("OUpper", "other_uppercase", _B),
    ("OLower", "other_lowercase", _B),
    ("suc", "simple_uppercase", _S),
    ("slc", "simple_lowercase", _S),
    ("stc", "simple_titlecase", _S),
    ("uc", "uppercase_mapping", _S),
    ("lc", "lowercase_mapping", _S),
    ("tc", "titlecase_mapping", _S),
    ("scf", "simple_case_folding", _S),
    ("cf", "case_folding", _S),
    ("CI", "case_ignorable", _B),
    ("Cased", "cased", _B),
    ("CWCF", "changes_when_casefolded", _B),
    ("CWCM", "changes_when_casemapped", _B),
    ("CWL", "changes_when_lowercased", _B),
    ("CWKCF", "changes_when_nfkc_casefolded", _B),
    ("CWT", "changes_when_titlecased", _B),
    ("CWU", "changes_when_uppercased", _B),
    ("NFKC_CF", "nfkc_cf", _S),
    ("NFKC_SCF", "nfkc_scf", _S),
    # script
    ("sc", "script", _S),
    ("scx", "script_extensions", _S),
    ("isc", "iso_comment", _S),
    # hangul
    ("hst", "hangul_syllable_type", _S),
    ("JSN", "jamo_short_name", _S),
    # indic
    ("InSC", "indic_syllabic_category", _S),
    ("InMC", "indic_matra_category", _S),
    ("InPC", "indic_positional_category", _S),
    ("InCB", "indic_conjunct_break", _S),
    # identifiers
    ("IDS", "id_start", _B),
    ("OIDS", "other_id_start", _B),
    ("XIDS", "xid_start", _B),
    ("IDC", "id_continue", _B),
    ("OIDC", "other_id_continue", _B),
    ("XIDC", "xid_continue", _B),
    ("ID_Compat_Math_Start", "id_compat_math_start", _B),
    ("ID_Compat_Math_Continue", "id_compat_math_continue", _B),
    # patterns
    ("Pat_Syn", "pattern_syntax", _B),
    ("Pat_WS", "pattern_white_space", _B),
    # punctuation
    ("Dash", "dash", _B),
    ("Hyphen", "hyphen", _B),
    ("QMark", "quotation_mark", _B),
    ("Term", "terminal_punctuation", _B),
    ("STerm", "sentence_terminal", _B),
    # diacritics
    ("Dia", "diacritic", _B),
    ("Ext", "extender", _B),
    ("PCM", "prepended_concatenation_mark", _B),
    # character properties
    ("Alpha", "alphabetic", _B),
    ("OAlpha", "other_alphabetic", _B),
    ("Math", "math", _B),
    ("OMath", "other_math", _B),
    ("Hex", "hex_digit", _B),
    ("AHex", "ascii_hex_digit", _B),
    ("DI", "default_ignorable", _B),
    ("ODI", "other_default_ignorable", _B),
    ("LOE", "logical_order_exception", _B),
    ("WSpace", "white_space", _B),
    # orientation
    ("vo", "vertical_orientation", _S),
    ("RI", "regional_indicator", _B),
    # graphemes
    ("Gr_Base", "grapheme_base", _B),
    ("Gr_Ext", "grapheme_extend", _B),
    ("OGr_Ext", "other_grapheme_extend", _B),
    ("Gr_Link", "grapheme_link", _B),
    # segmentation
    ("GCB", "grapheme_cluster_break", _S),
    ("WB", "word_break", _S),
    ("SB", "sentence_break", _S),
    # ideographs
    ("Ideo", "ideographic", _B),
    ("UIdeo", "unified_ideograph", _B),
    ("EqUIdeo", "equivalent_unified_ideograph", _S),
    ("IDSB", "ids_binary_operator", _B),
    ("IDST", "ids_trinary_operator", _B),
    ("IDSU", "ids_unary_operator", _B),
    ("Radical", "radical", _B),
    # miscellaneous
    ("Dep", "deprecated", _B),
    ("VS", "variation_selector", _B),
    ("NChar", "noncharacter", _B),
    # emoji
    ("Emoji", "emoji", _B),
    ("EPres", "emoji_presentation", _B),
    ("EMod", "emoji_modifier", _B),
    ("EBase", "emoji_modifier_base", _B),
    ("EComp", "emoji_component", _B),
    ("ExtPict", "extended_pictographic", _B),
    # unihan
    ("kDefinition", "k_definition", _S),
    ("kMandarin", "k_mandarin", _S),
    ("kCantonese", "k_cantonese", _S),
    ("kJapaneseKun", "k_japanese_kun", _S),
    ("kJapaneseOn", "k_japanese_on", _S),
    ("kKorean", "k_korean", _S),
    ("kVietnamese", "k_vietnamese", _S),
    ("kTotalStrokes", "k_total_strokes", _S),
    ("kSimplifiedVariant", "k_simplified_variant", _S),
    ("kTraditionalVariant", "k_traditional_variant", _S),
)

ATTRIBUTES: tuple[AttributeSpec, ...] = tuple(
    AttributeSpec(xml_name, key, kind) for xml_name, key, kind in _TABLE
)

_BY_XML_NAME = {spec.xml_name: spec for spec in ATTRIBUTES}


def lookup_attribute(name: str) -> AttributeSpec | None:
    """Return the spec for an XML attribute name, or None if it is not tracked."""
    return _BY_XML_NAME.get(name)


def default_properties() -> dict[str, PropertyValue]:
    """Return a fresh mapping of every property key to its default value."""
    return {spec.key: spec.kind.default for spec in ATTRIBUTES}