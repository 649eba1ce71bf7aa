#!/usr/bin/env python3
"""
multi_feature.py

Grammar for variants spanning two reference features.

Two syntaxes are supported:

    legacy:  (FEATURE1,FEATURE2):fusion(e.1,e.2)ATGC
             only the part after the colon is handled here, by
             parse_multi_feature; the features are split off by parse_variant
    fusion:  FEATURE1:r.1_17::AUG::FEATURE2:r.20_28
             handled in full by parse_fusion, the inserted sequence between
             the two parts is optional and must be given in ribonucleotides

Functions:
    parse_multi_feature: Parse TYPE(break1,break2)[ALT]
    parse_fusion_part: Parse one side of a '::' fusion
    parse_fusion: Parse a '::' fusion into a variant record
"""

import logging

import regex as re
from Bio.Data.IUPACData import unambiguous_rna_letters

from variant_notation.scripts.constants import MULTI_FEATURE_NOTATIONS, NOTATION_TO_TYPES
from variant_notation.scripts.continuous import get_prefix
from variant_notation.scripts.error import ErrorMixin, ParsingError
from variant_notation.scripts.notation import create_variant_notation
from variant_notation.scripts.position import parse_position
from variant_notation.scripts.utils import get_parser_settings

RNA_PATTERN = re.compile(rf"^[{unambiguous_rna_letters}]+$")


def _parse_breakpoint(string: str) -> dict:
    prefix = get_prefix(string)
    string = string[2:]
    if "_" in string:
        split = string.index("_")
        return {
            "prefix": prefix,
            "start": parse_position(prefix, string[:split]),
            "end": parse_position(prefix, string[split + 1 :]),
        }
    return {"prefix": prefix, "start": parse_position(prefix, string)}


def parse_multi_feature(string: str) -> dict:
    """
    Parse the legacy multi-feature notation (without the feature names).

    Args:
        string (str): The notation, e.g. "fusion(e.1,e.10)".

    Returns:
        dict: Keyword arguments for create_variant_notation: type,
            break1_start, break2_start, multi_feature and prefix, plus
            whichever of break1_end, break2_end, untemplated_seq and
            untemplated_seq_size were given. The prefix is None when the two
            breakpoints use different coordinate systems.

    Raises:
        ParsingError: If the notation is malformed. Errors in the breakpoints
            are nested under content["sub_parser_error"].

    Examples:
        >>> parsed = parse_multi_feature("fusion(e.1,e.10)")
        >>> parsed["type"], parsed["prefix"]
        ('fusion', 'e')
    """
    min_length = get_parser_settings()["min_multi_feature_length"]
    if len(string) < min_length:
        raise ParsingError(
            f"Too short. Multi-feature notation must be a minimum of {min_length} characters: {string}",
            input=string,
        )
    if "(" not in string:
        raise ParsingError("Missing opening parentheses", input=string, violated_attr="punctuation")

    notation_type = string[: string.index("(")]
    if not notation_type:
        raise ParsingError(
            "Variant type was not specified. It is expected to immediately follow the coordinate prefix",
            parsed={"type": notation_type},
            input=string,
            violated_attr="type",
        )
    if notation_type not in NOTATION_TO_TYPES:
        raise ParsingError(
            f"Variant type ({notation_type}) not recognized",
            parsed={"type": notation_type},
            input=string,
            violated_attr="type",
        )
    if notation_type not in MULTI_FEATURE_NOTATIONS:
        raise ParsingError(
            f"Continuous notation is preferred over multi-feature notation for {notation_type} variant types",
            parsed={"type": notation_type},
            input=string,
            violated_attr="type",
        )
    parsed = {"type": NOTATION_TO_TYPES[notation_type], "multi_feature": True}

    if ")" not in string:
        raise ParsingError(
            "Missing closing parentheses",
            parsed=dict(parsed),
            input=string,
            violated_attr="punctuation",
        )

    close = string.index(")")
    raw_seq = string[close + 1 :]
    if raw_seq.isdigit() and int(raw_seq):
        parsed["untemplated_seq_size"] = int(raw_seq)
    elif raw_seq:
        parsed["untemplated_seq"] = raw_seq
        parsed["untemplated_seq_size"] = len(raw_seq)

    positions = string[string.index("(") + 1 : close].split(",")
    if len(positions) > 2:
        raise ParsingError(
            "Single comma expected to split breakpoints/ranges",
            parsed=dict(parsed),
            input=string,
            violated_attr="punctuation",
        )
    if len(positions) < 2:
        raise ParsingError(
            "Missing comma separator between breakpoints/ranges",
            parsed=dict(parsed),
            input=string,
            violated_attr="punctuation",
        )

    prefixes = []
    for index, (name, ordinal) in enumerate((("break1", "first"), ("break2", "second"))):
        try:
            parsed_break = _parse_breakpoint(positions[index])
        except ErrorMixin as err:
            raise ParsingError(
                f"Error in parsing the {ordinal} breakpoint position/range",
                input=string,
                parsed=dict(parsed),
                sub_parser_error=err,
                violated_attr=name,
            ) from err
        prefixes.append(parsed_break["prefix"])
        parsed[f"{name}_start"] = parsed_break["start"]
        if "end" in parsed_break:
            parsed[f"{name}_end"] = parsed_break["end"]

    # each side has its own prefix, the variant only gets one when they agree
    parsed["prefix"] = prefixes[0] if prefixes[0] == prefixes[1] else None
    if parsed["prefix"] is None:
        logging.debug(f"Mixed coordinate systems ({prefixes[0]}, {prefixes[1]}) in multi-feature variant {string}")
    return parsed


def parse_fusion_part(string: str, require_features: bool = True) -> dict:
    """
    Parse one side of a '::' fusion, e.g. "EWSR1:r.1_17".

    Returns:
        dict: reference1, prefix, break1_start and break1_end of that side.

    Raises:
        ParsingError: If the part has more than one colon, lacks a required
            feature name or is not a range of two positions.
    """
    split = string.split(":")
    if len(split) > 2:
        raise ParsingError(
            "Variant notation must contain a single colon",
            input=string,
            violated_attr="punctuation",
        )
    if len(split) == 1:
        if require_features:
            raise ParsingError(
                "Feature name not specified. Feature name is required",
                input=string,
                violated_attr="reference1",
            )
        split.insert(0, "")
    feature, variant = split

    prefix = get_prefix(variant)
    positions = variant[len(prefix) + 1 :].split("_")
    if len(positions) != 2:
        raise ParsingError("Fusion notation must be a range of positions", input=string, violated_attr="break1")

    return {
        "reference1": feature,
        "prefix": prefix,
        "break1_start": parse_position(prefix, positions[0]),
        "break1_end": parse_position(prefix, positions[1]),
    }


def parse_fusion(string: str, require_features: bool = True) -> dict:
    """
    Parse a fusion written with the '::' separator.

    Args:
        string (str): The fusion, e.g. "EWSR1:r.1_17::FLI1:r.20_28" or with an
            inserted sequence "EWSR1:r.1_17::AUG::FLI1:r.20_28".
        require_features (bool): If False, the feature names may be omitted.

    Returns:
        VariantNotation: The fusion variant record.

    Raises:
        ParsingError: If there are more than two separators, the inserted
            sequence is not RNA or either part is malformed.
    """
    parts = string.split("::")
    if len(parts) > 3:
        raise ParsingError(
            "Fusion variant using new nomenclature must contain 1 or 2 double-colon",
            input=string,
            violated_attr="punctuation",
        )

    inserted = {}
    if len(parts) == 3:
        insertion = parts[1].upper()
        if not RNA_PATTERN.match(insertion):
            raise ParsingError(
                "Insertion sequence of fusion variant should be given in ribonucleotides",
                input=string,
                violated_attr="alphabet",
            )
        inserted = {"untemplated_seq": insertion, "untemplated_seq_size": len(insertion)}

    # the middle part, if any, is the inserted sequence
    part1 = parse_fusion_part(parts[0], require_features)
    part2 = parse_fusion_part(parts[-1], require_features)
    if part1["prefix"] != part2["prefix"]:
        logging.debug(f"Mixed coordinate systems ({part1['prefix']}, {part2['prefix']}) in fusion {string}")

    try:
        return create_variant_notation(
            type=NOTATION_TO_TYPES["fusion"],
            multi_feature=True,
            require_features=require_features,
            reference1=part1["reference1"],
            reference2=part2["reference1"],
            break1_start=part1["break1_start"],
            break1_end=part1["break1_end"],
            break2_start=part2["break1_start"],
            break2_end=part2["break1_end"],
            prefix=part1["prefix"] if part1["prefix"] == part2["prefix"] else None,
            **inserted,
        )
    except ErrorMixin as err:
        err.content["parsed"] = {
            "string": string,
            "reference1": part1["reference1"],
            "reference2": part2["reference1"],
        }
        raise
