#!/usr/bin/env python3
"""
continuous.py

Grammar for single-feature (continuous) variant notation.

Module Purpose:
---------------
Parses everything after the feature name of a continuous notation string,
e.g. ``p.G12D``, ``c.3+1_5-2del`` or ``y.p11.1_p13.3dup``, into breakpoint
positions plus an event with its sequences and truncation.

Typical Flow:
-------------
1. get_prefix(): validate the coordinate prefix and its '.' separator.
2. extract_positions(): consume the first breakpoint (or uncertain range),
   then a second one if the remainder starts with '_'.
3. The remaining tail is matched against an ordered list of event patterns,
   the first match wins. A tail that matches none of them is taken as a bare
   type token (e.g. ``copygain``) and must be a known notation.
4. Coordinate system checks (cytoband, protein) and protein post-processing
   (3-letter to 1-letter conversion, type refinement).
"""

import logging

import regex as re

from variant_notation.scripts.constants import (
    AA_CODES,
    AA_PATTERN,
    CYTOBAND_TYPES,
    NONSENSE,
    NOTATION_TO_TYPES,
    PREFIX_CLASS,
    TRUNCATING_FS,
    TRUNCATION_TYPES,
)
from variant_notation.scripts.error import ErrorMixin, InputValidationError, ParsingError
from variant_notation.scripts.position import PATTERNS, parse_position
from variant_notation.scripts.utils import get_parser_settings


INDEL_PATTERN = re.compile(r"^del(?P<ref>[A-Z?*]+)?ins(?P<alt>[A-Z?*]+|\d+)?$", flags=re.IGNORECASE)
SIMPLE_EVENT_PATTERN = re.compile(r"^(?P<type>del|inv|ins|dup)(?P<seq>[A-Z?*]+|\d+)?$", flags=re.IGNORECASE)
PROTEIN_SUBSTITUTION_PATTERN = re.compile(rf"^(?:{AA_PATTERN}|=)$", flags=re.IGNORECASE)
SUBSTITUTION_PATTERN = re.compile(r"^(?P<ref>[A-Z?])>(?P<alt>[A-Z?](?:\^[A-Z?])*)$", flags=re.IGNORECASE)
FRAMESHIFT_PATTERN = re.compile(
    rf"^(?P<alt>{AA_PATTERN})?(?P<type>fs|ext)(?:(?P<stop>\*|-|Ter)(?P<trunc>\d+|\?|\w)?)?$",
    flags=re.IGNORECASE,
)


def get_prefix(string: str) -> str:
    """
    Check that a string starts with a valid coordinate prefix and separator.

    Args:
        string (str): Notation starting with the prefix, e.g. "p.1234".

    Returns:
        str: The prefix.

    Raises:
        ParsingError: If the prefix is not accepted or the '.' is missing.

    Examples:
        >>> get_prefix("p.1234")
        'p'
    """
    prefix = string[:1]
    expected = list(PREFIX_CLASS)

    if prefix not in expected:
        raise ParsingError(
            f"'{prefix}' is not an accepted prefix",
            expected=expected,
            input=string,
            violated_attr="prefix",
        )
    if len(string) < 2 or string[1] != ".":
        raise ParsingError("Missing '.' separator after prefix", input=string, violated_attr="punctuation")
    return prefix


def convert_3to1(notation: str) -> str:
    """
    Convert a sequence of 3-letter amino acids to the 1-letter version.

    Raises:
        ParsingError: If the input is not a sequence of 3-letter codes.

    Examples:
        >>> convert_3to1("ArgLysLeu")
        'RKL'
    """
    # no 3-letter equivalent
    if notation in ("=", "*"):
        return notation
    if len(notation) % 3 != 0:
        raise ParsingError(
            f"Cannot convert to single letter AA notation. The input ({notation}) is not in 3-letter form",
            violated_attr="untemplatedSeq",
        )
    result = []
    for i in range(0, len(notation), 3):
        code = notation[i : i + 3].lower()
        if code not in AA_CODES:
            raise ParsingError(
                f"Cannot convert to single letter AA notation. Unrecognized amino acid ({notation[i:i + 3]})",
                violated_attr="untemplatedSeq",
            )
        result.append(AA_CODES[code])
    return "".join(result)


def extract_positions(prefix: str, string: str) -> dict:
    """
    Extract the breakpoint (or uncertain breakpoint range) the string starts with.

    Args:
        prefix (str): Coordinate prefix of the notation.
        string (str): Remaining notation, starting with a position.

    Returns:
        dict: 'input' (the consumed substring), 'start' and, for an uncertain
            range, 'end'.

    Examples:
        >>> extract_positions("g", "(3_4)_5dup")["input"]
        '(3_4)'
    """
    if string.startswith("("):
        if ")" not in string:
            raise ParsingError("Expected a range of positions. Missing the closing parenthesis")
        if "_" not in string:
            raise ParsingError("Positions within a range must be separated by an underscore. Missing underscore")
        close = string.index(")")
        split = string.index("_")
        return {
            "input": string[: close + 1],
            "start": parse_position(prefix, string[1:split]),
            "end": parse_position(prefix, string[split + 1 : close]),
        }

    match = re.match(PATTERNS[prefix], string, flags=re.IGNORECASE)
    if not match:
        raise ParsingError("Failed to parse the initial position", input=string)
    return {"input": match.group(0), "start": parse_position(prefix, match.group(0))}


def _parse_tail(prefix: str, tail: str, input_string: str, is_range: bool) -> dict:
    """
    Match the event part of the notation against the event patterns, first match wins.

    Returns:
        dict: notation_type plus whichever of ref_seq, untemplated_seq,
            untemplated_seq_size and truncation the event specifies.
    """
    match = INDEL_PATTERN.match(tail)
    if match:
        event = {"notation_type": "delins"}
        ref, alt = match.group("ref"), match.group("alt")
        if ref:
            event["ref_seq"] = ref
        if alt and alt.isdigit() and int(alt):
            event["untemplated_seq_size"] = int(alt)
        elif alt and alt != "?":
            event["untemplated_seq"] = alt
        return event

    match = SIMPLE_EVENT_PATTERN.match(tail)
    if match:
        notation_type = match.group("type").lower()
        seq = match.group("seq")
        event = {"notation_type": notation_type}
        if seq and seq.isdigit() and int(seq):
            if notation_type in ("ins", "dup"):
                event["untemplated_seq_size"] = int(seq)
        elif seq and seq != "?":
            if notation_type in ("dup", "ins"):
                event["untemplated_seq"] = seq
            if notation_type != "ins":
                event["ref_seq"] = seq
        return event

    if not tail or PROTEIN_SUBSTITUTION_PATTERN.match(tail):
        if prefix != "p":
            raise ParsingError(
                'only protein notation does not use ">" for a substitution',
                input=input_string,
                violated_attr="break1",
            )
        event = {"notation_type": ">"}
        if tail and tail != "?":
            event["untemplated_seq"] = tail
        return event

    match = SUBSTITUTION_PATTERN.match(tail)
    if match:
        if prefix == "p":
            raise ParsingError(
                'protein notation does not use ">" for a substitution',
                input=input_string,
                violated_attr="type",
            )
        if prefix == "e":
            raise ParsingError(
                "Cannot define substitutions at the exon coordinate level",
                input=input_string,
                violated_attr="type",
            )
        return {"notation_type": ">", "ref_seq": match.group("ref"), "untemplated_seq": match.group("alt")}

    match = FRAMESHIFT_PATTERN.match(tail)
    if match:
        if prefix != "p":
            raise ParsingError(
                "only protein notation can notate frameshift variants",
                input=input_string,
                violated_attr="type",
            )
        alt, stop, trunc = match.group("alt"), match.group("stop"), match.group("trunc")
        event = {"notation_type": match.group("type").lower()}

        if alt is not None and alt != "?":
            event["untemplated_seq"] = alt
        if trunc == "?":
            event["truncation"] = None
        elif trunc is not None:
            if not trunc.isdigit():
                raise InputValidationError("truncation must be a number", violated_attr="truncation")
            truncation = -int(trunc) if stop == "-" else int(trunc)
            if alt == "*" and truncation != 1:
                raise ParsingError(
                    "invalid frameshift specifies a non-immediate truncation which conflicts "
                    "with the terminating alt sequence",
                    input=input_string,
                    violated_attr="truncation",
                )
            event["truncation"] = truncation
        elif alt == "*":
            event["truncation"] = 1
        elif stop:
            # truncation at some unknown position
            event["truncation"] = None

        if is_range:
            raise ParsingError("frameshifts cannot span a range", input=input_string, violated_attr="break2")
        return event

    if tail.lower() == "spl":
        return {"notation_type": "spl"}
    # bare type token, e.g. copygain
    return {"notation_type": tail.lower()}


def parse_continuous(input_string: str) -> dict:
    """
    Parse a continuous notation variant (without its feature name).

    Args:
        input_string (str): The variant, e.g. "p.G12D".

    Returns:
        dict: Keyword arguments for create_variant_notation. Always holds
            break1_start, notation_type, type and prefix, plus whichever of
            break1_end, break2_start, break2_end, ref_seq, untemplated_seq,
            untemplated_seq_size and truncation were given. A truncation of
            None means it was given as unknown.

    Raises:
        ParsingError: If the notation is malformed.
        InputValidationError: If the truncation is not a number.

    Examples:
        >>> parsed = parse_continuous("p.G12D")
        >>> parsed["type"], parsed["untemplated_seq"]
        ('missense mutation', 'D')
    """
    string = input_string
    min_length = get_parser_settings()["min_continuous_length"]

    if len(string) < min_length:
        raise ParsingError(f"Too short. Must be a minimum of {min_length} characters: {string}", input=string)

    prefix = get_prefix(string)
    string = string[len(prefix) + 1 :]
    parsed = {"prefix": prefix}

    try:
        positions = extract_positions(prefix, string)
    except ErrorMixin as err:
        err.content["violated_attr"] = "break1"
        raise
    parsed["break1_start"] = positions["start"]
    if "end" in positions:
        parsed["break1_end"] = positions["end"]
    string = string[len(positions["input"]) :]

    if string.startswith("_"):
        # a range, extract the second breakpoint
        string = string[1:]
        try:
            positions = extract_positions(prefix, string)
        except ErrorMixin as err:
            err.content["violated_attr"] = "break2"
            raise
        parsed["break2_start"] = positions["start"]
        if "end" in positions:
            parsed["break2_end"] = positions["end"]
        string = string[len(positions["input"]) :]

    parsed.update(_parse_tail(prefix, string, input_string, "break2_start" in parsed))
    notation_type = parsed["notation_type"]

    if notation_type not in NOTATION_TO_TYPES:
        raise ParsingError(
            f"unsupported notation type: '{notation_type}'",
            input=input_string,
            violated_attr="type",
        )
    variant_type = NOTATION_TO_TYPES[notation_type]
    logging.debug(f"Continuous notation '{input_string}' parsed as {variant_type} ({notation_type})")

    untemplated_seq = parsed.get("untemplated_seq")
    if untemplated_seq and "untemplated_seq_size" not in parsed and "^" in untemplated_seq:
        raise ParsingError(
            f"unsupported alternate sequence notation: {untemplated_seq}",
            input=input_string,
            violated_attr="untemplatedSeq",
        )

    if prefix == "y":
        if parsed.get("ref_seq"):
            raise ParsingError(
                "cannot define sequence elements (refSeq) at the cytoband level",
                input=input_string,
                violated_attr="refSeq",
            )
        if untemplated_seq:
            raise ParsingError(
                "cannot define sequence elements (untemplatedSeq) at the cytoband level",
                input=input_string,
                violated_attr="untemplatedSeq",
            )
        if variant_type not in CYTOBAND_TYPES:
            raise ParsingError(
                f"Invalid type ({variant_type}) for cytoband level event notation",
                input=input_string,
                parsed={**parsed, "type": variant_type},
                violated_attr="type",
            )

    if prefix == "p":
        break1_start = parsed["break1_start"]
        # the reference amino acid doubles as the reference sequence of single residue events
        if not any(key in parsed for key in ("break1_end", "break2_start", "break2_end")) and break1_start.get("ref_aa"):
            parsed["ref_seq"] = break1_start.get("long_ref_aa") or break1_start["ref_aa"]

        positions = [parsed.get(key) for key in ("break1_start", "break1_end", "break2_start", "break2_end")]
        if any(position and position.get("long_ref_aa") for position in positions):
            for key in ("untemplated_seq", "ref_seq"):
                if parsed.get(key):
                    parsed[key] = convert_3to1(parsed[key])

    truncation = parsed.get("truncation")
    if "truncation" in parsed and variant_type not in TRUNCATION_TYPES:
        raise InputValidationError(
            f"truncation cannot be specified with this event type ({variant_type})",
            violated_attr="type",
        )

    # refine the type name
    if prefix == "p":
        if variant_type == NOTATION_TO_TYPES[">"]:
            if truncation or parsed.get("untemplated_seq") == "*":
                variant_type = NONSENSE
            elif parsed.get("untemplated_seq") != "=":
                variant_type = NOTATION_TO_TYPES["mis"]
        elif variant_type == NOTATION_TO_TYPES["fs"] and truncation:
            variant_type = TRUNCATING_FS

    parsed["type"] = variant_type
    return parsed
