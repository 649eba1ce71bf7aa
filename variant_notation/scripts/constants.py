#!/usr/bin/env python3
"""
constants.py

Notation vocabulary shared by every parser module.

This module provides a single source of truth for:
1. Amino acid codes (3-letter to 1-letter) and the amino acid token pattern
2. Short notation tokens and the long-form event type names they stand for
3. Coordinate prefixes and the position kind each one produces

Architecture:
- NOTATION_TO_TYPES: short token -> canonical type name
- TYPES_TO_NOTATION: canonical type name (or deprecated alias) -> short token,
  built once by inverting NOTATION_TO_TYPES and merging the alias entries
- PREFIX_CLASS: coordinate prefix -> position kind
"""

from types import MappingProxyType

from Bio.Data.IUPACData import protein_letters_3to1

# =============================================================================
# Amino Acids
# =============================================================================

# 20 standard residues from Biopython plus the ambiguity codes and stop
AA_CODES = MappingProxyType(
    {
        **{three.lower(): one for three, one in protein_letters_3to1.items()},
        "asx": "B",
        "glx": "Z",
        "ter": "*",
    }
)

AA_PATTERN = "|".join(
    [one.lower() for one in AA_CODES.values() if one != "*"] + [r"\?", "X", "x", r"\*"] + list(AA_CODES.keys())
)

# =============================================================================
# Event Types
# =============================================================================

NOTATION_TO_TYPES = MappingProxyType(
    {
        "ins": "insertion",
        "del": "deletion",
        ">": "substitution",
        "inv": "inversion",
        "delins": "indel",
        "copygain": "copy gain",
        "copyloss": "copy loss",
        "trans": "translocation",
        "itrans": "inverted translocation",
        "ext": "extension",
        "fs": "frameshift",
        "fusion": "fusion",
        "dup": "duplication",
        "me": "methylation",
        "ac": "acetylation",
        "ub": "ubiquitination",
        "spl": "splice-site",
        "mut": "mutation",
        "mis": "missense mutation",
        "phos": "phosphorylation",
    }
)

# refinements of a parent type, not reversible
TRUNCATING_FS = "truncating frameshift mutation"
NONSENSE = "nonsense mutation"

DEPRECATED_TYPE_ALIASES = MappingProxyType(
    {
        "frameshift mutation": "fs",
        "frameshift truncation": "fs",
        "missense variant": "mis",
        "truncating frameshift": "fs",
        "missense": "mis",
        "mutations": "mut",
        "nonsense": ">",
    }
)


def add_type_mappings() -> dict:
    """
    Build the type name -> short notation table.

    Every canonical name maps back to its own token, the refined subtypes and
    deprecated aliases collapse onto the token of their parent type.

    Returns:
        dict: Long-form type name to short notation token.

    Examples:
        >>> add_type_mappings()["deletion"]
        'del'
        >>> add_type_mappings()["nonsense mutation"]
        '>'
    """
    mapping = {NONSENSE: ">", TRUNCATING_FS: "fs", **DEPRECATED_TYPE_ALIASES}
    for notation, variant_type in NOTATION_TO_TYPES.items():
        mapping[variant_type] = notation
    return mapping


TYPES_TO_NOTATION = MappingProxyType(add_type_mappings())

# types which may never carry a second breakpoint
NON_RANGE_TYPES = frozenset(
    [
        NOTATION_TO_TYPES[">"],
        NONSENSE,
        TRUNCATING_FS,
        NOTATION_TO_TYPES["ext"],
        NOTATION_TO_TYPES["fs"],
        NOTATION_TO_TYPES["spl"],
    ]
)

# types which may carry a truncation
TRUNCATION_TYPES = frozenset(
    [NOTATION_TO_TYPES["fs"], NOTATION_TO_TYPES["ext"], NOTATION_TO_TYPES["spl"], TRUNCATING_FS]
)

# the only events expressible at the cytoband level
CYTOBAND_TYPES = frozenset(
    [
        NOTATION_TO_TYPES["dup"],
        NOTATION_TO_TYPES["del"],
        NOTATION_TO_TYPES["copygain"],
        NOTATION_TO_TYPES["copyloss"],
        NOTATION_TO_TYPES["inv"],
    ]
)

# notation tokens allowed in the legacy parenthesised multi-feature form
MULTI_FEATURE_NOTATIONS = ("fusion", "trans", "itrans")

# =============================================================================
# Coordinate Prefixes
# =============================================================================

PREFIX_CLASS = MappingProxyType(
    {
        "g": "GenomicPosition",
        "y": "CytobandPosition",
        "c": "CdsPosition",
        "r": "RnaPosition",
        "i": "IntronicPosition",
        "e": "ExonicPosition",
        "p": "ProteinPosition",
        "n": "NonCdsPosition",
    }
)

BASIC_PREFIXES = ("g", "e", "i")
CDS_LIKE_PREFIXES = ("c", "n", "r")
