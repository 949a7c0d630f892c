"""Boolean attribute values as written in the UCD XML format."""

_TRUE = "Y"
_FALSE = "N"


def parse_ucd_bool(value: str) -> bool:
    """Return the boolean for a UCD ``Y``/``N`` attribute value.

    Raises ValueError for anything other than exactly ``Y`` or ``N``.
    """
    if value == _TRUE:
        return True
    if value == _FALSE:
        return False
    raise ValueError(f"invalid syntax for UCD boolean: {value!r}")