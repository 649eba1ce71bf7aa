#!/usr/bin/env python3
"""
position.py

Position model for every coordinate system of the notation.

A position is a plain dict tagged by its ``kind`` (the position class name)
and ``prefix`` (the coordinate letter that produced it). Which other keys are
meaningful depends on the coordinate system:

    g, e, i (basic):     pos
    c, n, r (cds-like):  pos, offset
    p (protein):         pos, ref_aa, long_ref_aa
    y (cytoband):        arm, major_band, minor_band

A key which is absent was never specified. A key holding None was given as
unknown ('?'). The two render differently for cytoband bands, so the
distinction must survive construction.

Functions:
    create_position: Validate raw fields and build a position
    parse_position: Parse a position token for a given prefix
    convert_position_to_string: Render a position without its prefix
    convert_position_to_json: Project a position to a JSON-safe dict
    create_break_repr: Render a breakpoint or breakpoint range with its prefix
"""

import logging
from typing import Optional, TypedDict

import regex as re

from variant_notation.scripts.constants import (
    AA_CODES,
    AA_PATTERN,
    BASIC_PREFIXES,
    CDS_LIKE_PREFIXES,
    PREFIX_CLASS,
)
from variant_notation.scripts.error import InputValidationError, ParsingError


class Position(TypedDict, total=False):
    """Tagged union of all coordinate system positions."""

    kind: str
    prefix: str
    pos: Optional[int]
    offset: Optional[int]
    ref_aa: Optional[str]
    long_ref_aa: Optional[str]
    arm: str
    major_band: Optional[int]
    minor_band: Optional[int]


CLASS_FIELD = "@class"

_CDS_LIKE_PATTERN = r"(?P<pos>-?(?:\d+|\?))?(?P<offset>[-+](?:\d+|\?))?"

PATTERNS = {
    "y": r"(?P<arm>[pq])(?:(?P<major_band>\d+|\?)(?:\.(?P<minor_band>\d+|\?))?)?",
    "p": rf"(?P<ref_aa>{AA_PATTERN})?(?P<pos>\d+|\?)",
    "c": _CDS_LIKE_PATTERN,
    "n": _CDS_LIKE_PATTERN,
    "r": _CDS_LIKE_PATTERN,
    "g": r"(?P<pos>\d+|\?)",
    "e": r"(?P<pos>\d+|\?)",
    "i": r"(?P<pos>\d+|\?)",
}

# JSON names of the position fields
_JSON_FIELDS = {
    "pos": "pos",
    "offset": "offset",
    "ref_aa": "refAA",
    "long_ref_aa": "longRefAA",
    "arm": "arm",
    "major_band": "majorBand",
    "minor_band": "minorBand",
}


def _to_int(value):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _check_basic_position(pos, allow_negative: bool = False) -> Optional[int]:
    if pos is None or pos == "?":
        return None
    number = _to_int(pos)
    if number is None or (number <= 0 and not allow_negative):
        raise InputValidationError(f"pos ({pos}) must be a positive integer", violated_attr="pos")
    return number


def _create_basic_position(prefix: str, pos, allow_negative: bool = False) -> Position:
    return {
        "kind": PREFIX_CLASS[prefix],
        "prefix": prefix,
        "pos": _check_basic_position(pos, allow_negative),
    }


def _create_cds_like_position(prefix: str, fields: dict) -> Position:
    result = _create_basic_position(prefix, fields.get("pos"), allow_negative=True)

    if "offset" in fields:
        offset = fields["offset"]
        if offset is None:
            result["offset"] = None
        else:
            number = _to_int(offset)
            if number is None:
                raise InputValidationError(f"offset ({offset}) must be an integer", violated_attr="offset")
            result["offset"] = number
    return result


def _create_protein_position(fields: dict) -> Position:
    result = _create_basic_position("p", fields.get("pos"))
    result["long_ref_aa"] = fields.get("long_ref_aa")

    if "ref_aa" in fields:
        ref_aa = fields["ref_aa"]
        if not ref_aa or ref_aa == "?":
            result["ref_aa"] = None
        elif ref_aa.lower() in AA_CODES:
            result["long_ref_aa"] = ref_aa
            result["ref_aa"] = AA_CODES[ref_aa.lower()]
        else:
            result["ref_aa"] = ref_aa.upper()
    return result


def _create_cytoband_position(fields: dict) -> Position:
    arm = fields.get("arm")
    if arm not in ("p", "q"):
        raise InputValidationError(f"cytoband arm must be p or q ({arm})", violated_attr="arm")

    result: Position = {"kind": PREFIX_CLASS["y"], "prefix": "y", "arm": arm}

    for band, json_name in (("major_band", "majorBand"), ("minor_band", "minorBand")):
        if band not in fields:
            continue
        value = fields[band]
        if value is None:
            result[band] = None
            continue
        number = _to_int(value)
        if number is None or number <= 0:
            raise InputValidationError(f"{json_name} must be a positive integer ({value})", violated_attr=json_name)
        result[band] = number
    return result


def create_position(prefix: str, fields: dict) -> Position:
    """
    Validate the raw fields of a position and build it.

    Args:
        prefix (str): Coordinate prefix (one of g, i, e, c, n, r, p, y).
        fields (dict): Raw position fields. Keys which are absent are left
            unspecified, keys set to None are explicitly unknown.

    Returns:
        Position: The validated position.

    Raises:
        ParsingError: If the prefix is not recognized.
        InputValidationError: If any field is invalid for the coordinate system.

    Examples:
        >>> create_position("g", {"pos": 3})
        {'kind': 'GenomicPosition', 'prefix': 'g', 'pos': 3}
        >>> create_position("y", {"arm": "p", "major_band": 1, "minor_band": None})["minor_band"] is None
        True
    """
    if prefix == "p":
        return _create_protein_position(fields)
    if prefix == "y":
        return _create_cytoband_position(fields)
    if prefix in CDS_LIKE_PREFIXES:
        return _create_cds_like_position(prefix, fields)
    if prefix in BASIC_PREFIXES:
        return _create_basic_position(prefix, fields.get("pos"))
    raise ParsingError(f"did not recognize position prefix: {prefix}", violated_attr="prefix")


def parse_position(prefix: str, string: str) -> Position:
    """
    Parse a position token for the given coordinate prefix.

    Validation errors from position construction are upgraded to ParsingError
    since they were found while reading the input string.

    Args:
        prefix (str): Coordinate prefix which selects the token syntax.
        string (str): The position token without the prefix, e.g. "100+2".

    Returns:
        Position: The parsed position.

    Raises:
        ParsingError: If the token does not match the prefix syntax or holds
            invalid values.

    Examples:
        >>> parse_position("c", "100+2")
        {'kind': 'CdsPosition', 'prefix': 'c', 'pos': 100, 'offset': 2}
    """
    if prefix not in PATTERNS:
        raise ParsingError(f"did not recognize position prefix: {prefix}", violated_attr="prefix")

    match = re.fullmatch(PATTERNS[prefix], string, flags=re.IGNORECASE)
    if not match:
        raise ParsingError(
            f"input string '{string}' did not match the expected pattern for '{prefix}' prefixed positions",
            input=string,
        )
    groups = match.groupdict()

    try:
        if prefix == "p":
            fields = {"pos": groups["pos"]}
            if groups["ref_aa"] is not None:
                fields["ref_aa"] = groups["ref_aa"]
            return create_position(prefix, fields)
        if prefix == "y":
            fields = {"arm": groups["arm"]}
            for band in ("major_band", "minor_band"):
                if groups[band] is not None:
                    fields[band] = None if groups[band] == "?" else int(groups[band])
            return create_position(prefix, fields)
        if prefix in CDS_LIKE_PREFIXES:
            pos, offset = groups["pos"], groups["offset"]
            if offset is None and pos is not None and pos.startswith("-"):
                # upstream of the first base, e.g. -124 is 1-124
                pos, offset = None, pos
            return create_position(
                prefix,
                {
                    "pos": pos if pos is not None else 1,
                    "offset": offset if offset is not None else 0,
                },
            )
        return create_position(prefix, {"pos": groups["pos"]})
    except InputValidationError as err:
        logging.debug(f"Invalid {prefix} position '{string}': {err.message}")
        raise ParsingError(err) from err


def convert_position_to_string(position: Position) -> str:
    """
    Render a position without its coordinate prefix.

    Explicitly unknown fields render as '?'. Cytoband bands which were never
    specified are omitted.

    Examples:
        >>> convert_position_to_string(create_position("y", {"arm": "p", "major_band": None, "minor_band": 2}))
        'p?.2'
        >>> convert_position_to_string(create_position("c", {"pos": None, "offset": -10}))
        '?-10'
    """
    prefix = position.get("prefix")

    if prefix == "y":
        result = position["arm"]
        if "major_band" in position:
            result = f"{result}{position['major_band'] or '?'}"
            if "minor_band" in position:
                result = f"{result}.{position['minor_band'] or '?'}"
        return result
    if prefix in CDS_LIKE_PREFIXES:
        offset = ""
        if "offset" in position:
            if position["offset"] is None:
                offset = "?"
            elif position["offset"]:
                offset = f"{position['offset']:+d}"
        return f"{position.get('pos') or '?'}{offset}"
    if prefix == "p":
        return f"{position.get('ref_aa') or '?'}{position.get('pos') or '?'}"
    return f"{position.get('pos') or '?'}"


def convert_position_to_json(position: Position, exclude=("prefix", "long_ref_aa")) -> dict:
    """
    Project a position to a JSON-safe dict tagged with '@class'.

    Examples:
        >>> convert_position_to_json(parse_position("p", "G12"))
        {'@class': 'ProteinPosition', 'pos': 12, 'refAA': 'G'}
    """
    json = {CLASS_FIELD: position["kind"]}
    for attr, value in position.items():
        if attr == "kind" or attr in exclude:
            continue
        json[_JSON_FIELDS.get(attr, attr)] = value
    return json


def create_break_repr(start: Position, end: Optional[Position] = None, multi_feature: bool = False) -> str:
    """
    Render a breakpoint or breakpoint range including its prefix.

    Args:
        start (Position): Start of the breakpoint range.
        end (Position, optional): End of the breakpoint range, if it is a range.
        multi_feature (bool): Multi-feature notation never wraps a range in
            parentheses.

    Returns:
        str: The breakpoint representation.

    Raises:
        ParsingError: If start and end use different prefixes.

    Examples:
        >>> create_break_repr(parse_position("g", "1"), parse_position("g", "10"))
        'g.(1_10)'
        >>> create_break_repr(parse_position("g", "1"))
        'g.1'
    """
    prefix = start["prefix"]
    if end:
        if prefix != end["prefix"]:
            raise ParsingError("Mismatch prefix in range", violated_attr="prefix")
        if multi_feature:
            return f"{prefix}.{convert_position_to_string(start)}_{convert_position_to_string(end)}"
        return f"{prefix}.({convert_position_to_string(start)}_{convert_position_to_string(end)})"
    return f"{prefix}.{convert_position_to_string(start)}"
