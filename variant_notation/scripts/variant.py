#!/usr/bin/env python3
"""
variant.py

Entry point for parsing variant notation strings.

Module Purpose:
---------------
Splits the reference feature(s) off the variant and hands the rest to the
matching grammar:

    KRAS:p.G12D                            -> continuous.parse_continuous
    (FEATURE1,FEATURE2):fusion(e.1,e.2)    -> multi_feature.parse_multi_feature
    EWSR1:r.1_17::FLI1:r.20_28             -> multi_feature.parse_fusion

The parsed pieces are assembled with notation.create_variant_notation. When
assembly fails, the error content is tagged with what had been parsed so far.
"""

import logging

from variant_notation.scripts.continuous import parse_continuous
from variant_notation.scripts.error import ErrorMixin, ParsingError
from variant_notation.scripts.multi_feature import parse_fusion, parse_multi_feature
from variant_notation.scripts.notation import VariantNotation, create_variant_notation
from variant_notation.scripts.utils import get_parser_settings


def _split_features(feature_string: str, variant_string: str, input_string: str):
    """Split '(FEATURE1,FEATURE2)' into its two reference features."""
    parsed = {"feature_string": feature_string, "variant_string": variant_string}

    if "," not in feature_string:
        raise ParsingError(
            "Multi-feature notation must contain two reference features separated by a comma",
            parsed=parsed,
            input=input_string,
            violated_attr="reference2",
        )
    if not feature_string.startswith("("):
        raise ParsingError(
            "Missing opening parentheses surrounding the reference features",
            parsed=parsed,
            input=input_string,
            violated_attr="punctuation",
        )
    if not feature_string.endswith(")"):
        raise ParsingError(
            "Missing closing parentheses surrounding the reference features",
            parsed=parsed,
            input=input_string,
            violated_attr="punctuation",
        )
    features = feature_string[1:-1].split(",")
    if len(features) > 2:
        raise ParsingError(
            "May only specify two features. Found more than a single comma",
            parsed=parsed,
            input=input_string,
            violated_attr="reference2",
        )
    return features[0], features[1]


def parse_variant(string: str, require_features: bool = True) -> VariantNotation:
    """
    Parse a variant notation string into the canonical variant record.

    Args:
        string (str): The variant, e.g. "KRAS:p.G12D".
        require_features (bool): If False, the reference feature(s) may be
            omitted, e.g. "p.G12D".

    Returns:
        VariantNotation: The parsed and validated variant.

    Raises:
        ParsingError: If the string is not valid notation.
        InputValidationError: If the parsed fields form an impossible variant.

    Examples:
        >>> variant = parse_variant("KRAS:p.G12D")
        >>> variant["reference1"], variant["type"]
        ('KRAS', 'missense mutation')
    """
    min_length = get_parser_settings()["min_variant_length"]
    if not string or len(string) < min_length:
        raise ParsingError(f"Too short. Must be a minimum of {min_length} characters", input=string)

    if "::" in string:
        return parse_fusion(string, require_features)

    split = string.split(":")
    if len(split) > 2:
        raise ParsingError(
            "Apart from new fusion nomenclature, variant notation must contain a single colon",
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
        split.insert(0, None)
    feature_string, variant_string = split

    reference1 = None
    reference2 = None
    is_multi_feature = "," in variant_string or (
        feature_string
        and (feature_string.startswith("(") or feature_string.endswith(")") or "," in feature_string)
    )

    if is_multi_feature and feature_string:
        reference1, reference2 = _split_features(feature_string, variant_string, string)
    elif feature_string:
        reference1 = feature_string

    try:
        if is_multi_feature:
            parsed = parse_multi_feature(variant_string)
        else:
            parsed = parse_continuous(variant_string)

        logging.debug(f"Parsed '{variant_string}' as {'multi-feature' if is_multi_feature else 'continuous'} notation")
        return create_variant_notation(
            **parsed,
            require_features=require_features,
            reference1=reference1,
            reference2=reference2,
        )
    except ErrorMixin as err:
        err.content["parsed"] = {
            "variant_string": variant_string,
            "reference1": reference1,
            "reference2": reference2,
        }
        raise
