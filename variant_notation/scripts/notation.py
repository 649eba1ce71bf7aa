#!/usr/bin/env python3
"""
notation.py

Assembly and serialization of the canonical variant record.

Module Purpose:
---------------
Takes the pieces produced by the continuous or multi-feature grammar (or
supplied directly by a caller) plus the reference feature names and builds
the canonical VariantNotation record. Cross-field rules that the grammar
alone cannot enforce are checked here:
    - insertions must be given as a range (except at the exon level)
    - substitutions, frameshifts, extensions and splice-site variants cannot
      have a second breakpoint

The record is rendered back to notation text by stringify_variant (continuous,
legacy multi-feature or '::' fusion form) and to a JSON-safe dict by
jsonify_variant.
"""

import logging
from typing import Optional, TypedDict, Union

import regex as re

from variant_notation.scripts.constants import NON_RANGE_TYPES, NOTATION_TO_TYPES, TYPES_TO_NOTATION
from variant_notation.scripts.error import InputValidationError, ParsingError
from variant_notation.scripts.position import (
    Position,
    convert_position_to_json,
    create_break_repr,
    create_position,
)

POSITION_ATTRS = ("break1_start", "break1_end", "break2_start", "break2_end")

# record keys which are not part of the JSON projection
JSON_IGNORE = ("prefix", "multi_feature", "no_features", "notation_type")

JSON_FIELDS = {
    "break1_start": "break1Start",
    "break1_end": "break1End",
    "break2_start": "break2Start",
    "break2_end": "break2End",
    "break1_repr": "break1Repr",
    "break2_repr": "break2Repr",
    "ref_seq": "refSeq",
    "untemplated_seq": "untemplatedSeq",
    "untemplated_seq_size": "untemplatedSeqSize",
    "truncation": "truncation",
    "reference1": "reference1",
    "reference2": "reference2",
    "type": "type",
}


class OntologyTerm(TypedDict, total=False):
    """A resolved reference feature, e.g. a gene record from a knowledge base."""

    display_name: str
    source_id: str
    source_id_version: str
    name: str


Reference = Union[str, OntologyTerm]


class VariantNotation(TypedDict, total=False):
    """
    Canonical variant record.

    Keys which were never given are absent. A truncation of None was given as
    unknown ('*?').
    """

    type: str
    reference1: str
    reference2: str
    break1_start: Position
    break1_end: Position
    break2_start: Position
    break2_end: Position
    break1_repr: str
    break2_repr: str
    ref_seq: str
    untemplated_seq: str
    untemplated_seq_size: int
    truncation: Optional[int]
    multi_feature: bool
    no_features: bool
    notation_type: str
    prefix: Optional[str]


def _term_field(term, *names):
    for name in names:
        value = term.get(name)
        if value:
            return value
    return None


def ontology_term_repr(term: Reference) -> str:
    """
    Resolve a reference feature to the name used in the notation.

    Args:
        term (str or dict): A plain name, or a term mapping using either
            snake_case (display_name, source_id, source_id_version, name) or
            JSON (displayName, sourceId, sourceIdVersion, name) keys.

    Returns:
        str: displayName, else sourceId (with .sourceIdVersion when given),
            else name, else an empty string.

    Examples:
        >>> ontology_term_repr({"sourceId": "ENSG001", "name": "blargh"})
        'ENSG001'
        >>> ontology_term_repr("KRAS")
        'KRAS'
    """
    if isinstance(term, str):
        return term

    display_name = _term_field(term, "display_name", "displayName")
    if display_name:
        return display_name
    source_id = _term_field(term, "source_id", "sourceId")
    if source_id:
        version = _term_field(term, "source_id_version", "sourceIdVersion")
        return f"{source_id}.{version}" if version else source_id
    return term.get("name") or ""


def strip_parentheses(break_repr: str) -> str:
    """
    Drop the parentheses around an uncertain breakpoint range.

    Examples:
        >>> strip_parentheses("e.(1_2)")
        'e.1_2'
        >>> strip_parentheses("e.1")
        'e.1'
    """
    match = re.match(r"^([a-z])\.\((.+)\)$", break_repr)
    if match:
        return f"{match.group(1)}.{match.group(2)}"
    return break_repr


def _format_position(position, prefix):
    if position is None:
        return None
    # positions keep their own coordinate system, the variant prefix is the fallback
    return create_position(position.get("prefix") or prefix, position)


def create_variant_notation(
    break1_start=None,
    type=None,
    prefix=None,
    reference1=None,
    reference2=None,
    break1_end=None,
    break2_start=None,
    break2_end=None,
    ref_seq=None,
    untemplated_seq=None,
    untemplated_seq_size=None,
    multi_feature=False,
    require_features=False,
    notation_type=None,
    **kwargs,
) -> VariantNotation:
    """
    Build and validate the canonical variant record.

    Args:
        break1_start (Position): Start of the first breakpoint. Required.
        type (str or dict): Event type name (or a term resolving to one).
        prefix (str, optional): Coordinate prefix of the variant. Positions
            without their own prefix are built with it.
        reference1, reference2 (str or dict, optional): Reference features.
        break1_end, break2_start, break2_end (Position, optional): Remaining
            breakpoint positions.
        ref_seq, untemplated_seq (str, optional): Sequences, upper-cased.
        untemplated_seq_size (int, optional): Defaults to the length of
            untemplated_seq.
        multi_feature (bool): Forced to True when reference2 is given.
        require_features (bool): Whether a reference feature must be given.
        notation_type (str, optional): Short notation token the variant was
            parsed from.
        **kwargs: truncation (int or None) when the event specifies one. Other
            keys are ignored.

    Returns:
        VariantNotation: The assembled record.

    Raises:
        InputValidationError: If break1_start is missing, the type is unknown,
            a required feature is missing or an insertion is not a range.
        ParsingError: If a type which cannot span a range has a second breakpoint.

    Examples:
        >>> variant = create_variant_notation(
        ...     reference1="KRAS",
        ...     break1_start=create_position("p", {"pos": 12, "ref_aa": "G"}),
        ...     untemplated_seq="D",
        ...     type="substitution",
        ...     prefix="p",
        ... )
        >>> variant["break1_repr"]
        'p.G12'
    """
    if not break1_start:
        raise InputValidationError("break1Start is a required attribute", violated_attr="break1Start")
    if require_features and not reference1:
        raise InputValidationError(
            "Feature name not specified. Feature name is required",
            violated_attr="reference1",
        )

    no_features = not require_features and not reference1 and not reference2
    multi_feature = bool(multi_feature or reference2)
    variant_type = ontology_term_repr(type) if type is not None else ""

    if variant_type not in TYPES_TO_NOTATION:
        raise InputValidationError(f"invalid type {variant_type}", violated_attr="type")

    variant: VariantNotation = {
        "type": variant_type,
        "prefix": prefix,
        "multi_feature": multi_feature,
        "no_features": no_features,
    }
    if reference1 is not None:
        variant["reference1"] = ontology_term_repr(reference1)
    if reference2 is not None:
        variant["reference2"] = ontology_term_repr(reference2)
    if notation_type is not None:
        variant["notation_type"] = notation_type
    if "truncation" in kwargs:
        variant["truncation"] = kwargs["truncation"]
    if ref_seq is not None:
        variant["ref_seq"] = ref_seq.upper()
    if untemplated_seq is not None:
        variant["untemplated_seq"] = untemplated_seq.upper()
    if untemplated_seq_size is not None:
        variant["untemplated_seq_size"] = untemplated_seq_size
    elif untemplated_seq is not None:
        # default to the length of the given sequence
        variant["untemplated_seq_size"] = len(untemplated_seq)

    positions = dict(zip(POSITION_ATTRS, (break1_start, break1_end, break2_start, break2_end)))
    for attr, position in positions.items():
        position = _format_position(position, prefix)
        if position is not None:
            variant[attr] = position

    variant["break1_repr"] = create_break_repr(variant["break1_start"], variant.get("break1_end"), multi_feature)

    if "break2_start" in variant:
        if variant_type in NON_RANGE_TYPES:
            raise ParsingError(f"{variant_type} variants cannot be a range", violated_attr="break2")
        variant["break2_repr"] = create_break_repr(variant["break2_start"], variant.get("break2_end"), multi_feature)

    if variant_type == NOTATION_TO_TYPES["ins"]:
        if "break2_start" not in variant and variant["break1_start"]["prefix"] != "e":
            raise InputValidationError("Insertion events must be specified with a range", violated_attr="type")

    logging.debug(f"Created variant notation record of type '{variant_type}' at {variant['break1_repr']}")
    return variant


def jsonify_variant(variant: VariantNotation) -> dict:
    """
    Project a variant record to a JSON-safe dict with camelCase keys.

    The prefix, feature flags and notation token are dropped, positions are
    converted with convert_position_to_json.

    Examples:
        >>> jsonify_variant(parse_variant("p.G12D", require_features=False))["break1Start"]
        {'@class': 'ProteinPosition', 'pos': 12, 'refAA': 'G'}
    """
    json = {}
    for attr, value in variant.items():
        if attr in JSON_IGNORE:
            continue
        if attr in POSITION_ATTRS:
            value = convert_position_to_json(value)
        json[JSON_FIELDS.get(attr, attr)] = value
    return json


def _stringify_multi_feature(variant: VariantNotation, notation_type: str, new_fusion_style: bool) -> str:
    break1_repr = variant["break1_repr"]
    break2_repr = variant.get("break2_repr")
    untemplated_seq = variant.get("untemplated_seq")
    reference1 = variant.get("reference1", "")
    reference2 = variant.get("reference2", "")

    if not break2_repr:
        raise InputValidationError("Multi-feature notation requires break2Repr", violated_attr="break2")

    if new_fusion_style:
        inserted_sequence = f"{untemplated_seq}::" if untemplated_seq is not None else ""
        if variant.get("no_features"):
            return f"{break1_repr}::{inserted_sequence}{break2_repr}"
        return f"{reference1}:{break1_repr}::{inserted_sequence}{reference2}:{break2_repr}"

    result = "" if variant.get("no_features") else f"({reference1},{reference2}):"
    result = f"{result}{notation_type}({strip_parentheses(break1_repr)},{strip_parentheses(break2_repr)})"

    if untemplated_seq is not None:
        result = f"{result}{untemplated_seq}"
    elif "untemplated_seq_size" in variant:
        result = f"{result}{variant['untemplated_seq_size']}"
    return result


def stringify_variant(variant: VariantNotation, new_fusion_style: bool = False) -> str:
    """
    Render a variant record as notation text.

    Args:
        variant (VariantNotation): The record to render.
        new_fusion_style (bool): Render multi-feature variants with the '::'
            fusion separator instead of the legacy parenthesised form.

    Returns:
        str: The notation, e.g. "KRAS:p.G12D".

    Raises:
        InputValidationError: If a multi-feature variant has no second breakpoint.

    Examples:
        >>> stringify_variant(parse_variant("KRAS:p.Gly12Asp"))
        'KRAS:p.G12D'
        >>> stringify_variant(parse_variant("A:r.1_17::B:r.20_28"), new_fusion_style=True)
        'A:r.1_17::B:r.20_28'
    """
    notation_type = variant.get("notation_type")
    if notation_type is None:
        variant_type = ontology_term_repr(variant["type"])
        notation_type = TYPES_TO_NOTATION.get(variant_type) or re.sub(r"\s+", "-", variant_type, count=1)

    reference1 = variant.get("reference1")
    reference2 = variant.get("reference2")
    if variant.get("multi_feature") or (reference2 and reference1 != reference2):
        return _stringify_multi_feature(variant, notation_type, new_fusion_style)

    break1_repr = variant["break1_repr"]
    break2_repr = variant.get("break2_repr")
    untemplated_seq = variant.get("untemplated_seq")
    untemplated_seq_size = variant.get("untemplated_seq_size")
    ref_seq = variant.get("ref_seq")
    truncation = variant.get("truncation")
    is_protein = break1_repr.startswith("p.")

    result = []
    if not variant.get("no_features"):
        result.append(f"{reference1}:")
    result.append(break1_repr)

    if break2_repr:
        # the prefix is only written once
        result.append(f"_{break2_repr[2:]}")

    if notation_type in ("ext", "fs") or (notation_type == ">" and is_protein):
        if untemplated_seq:
            result.append(untemplated_seq)

    if notation_type == "mis" and untemplated_seq and is_protein:
        result.append(untemplated_seq)
    elif notation_type != ">":
        if notation_type == "delins":
            result.append(f"del{ref_seq or ''}ins")
        else:
            result.append(notation_type)

        if truncation and truncation != 1:
            result.append(f"{truncation}" if truncation < 0 else f"*{truncation}")
        if ref_seq and notation_type in ("dup", "del", "inv"):
            result.append(ref_seq)
        if (untemplated_seq or untemplated_seq_size) and notation_type in ("ins", "delins"):
            result.append(f"{untemplated_seq or untemplated_seq_size}")
    elif not is_protein:
        result.append(f"{ref_seq or '?'}{notation_type}{untemplated_seq or '?'}")

    return "".join(result)
