#!/usr/bin/env python3
"""
Unit tests for constants.py

Tests the amino acid table and the notation/type lookup tables.
"""

import pytest
import regex as re

from variant_notation.scripts.constants import (
    AA_CODES,
    AA_PATTERN,
    NON_RANGE_TYPES,
    NOTATION_TO_TYPES,
    PREFIX_CLASS,
    TYPES_TO_NOTATION,
    add_type_mappings,
)

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestAminoAcids:
    """Test the amino acid code table."""

    def test_standard_residues(self):
        """Test a few standard 3-letter codes."""
        assert AA_CODES["arg"] == "R"
        assert AA_CODES["gly"] == "G"
        assert AA_CODES["trp"] == "W"

    def test_ambiguity_and_stop(self):
        """Test the ambiguity codes and the stop codon."""
        assert AA_CODES["asx"] == "B"
        assert AA_CODES["glx"] == "Z"
        assert AA_CODES["ter"] == "*"

    def test_table_is_read_only(self):
        """Test that the table cannot be modified."""
        with pytest.raises(TypeError):
            AA_CODES["xyz"] = "X"

    @pytest.mark.parametrize("token", ["G", "g", "Gly", "GLY", "?", "X", "*", "Ter"])
    def test_pattern_matches(self, token):
        """Test tokens accepted by the amino acid pattern."""
        assert re.fullmatch(AA_PATTERN, token, flags=re.IGNORECASE)

    @pytest.mark.parametrize("token", ["1", "Gl", "=", "J"])
    def test_pattern_rejects(self, token):
        """Test tokens rejected by the amino acid pattern."""
        assert not re.fullmatch(AA_PATTERN, token, flags=re.IGNORECASE)


class TestTypeTables:
    """Test the notation token and type name tables."""

    @pytest.mark.parametrize(
        "notation, variant_type",
        [
            ("ins", "insertion"),
            ("del", "deletion"),
            (">", "substitution"),
            ("delins", "indel"),
            ("copygain", "copy gain"),
            ("itrans", "inverted translocation"),
            ("spl", "splice-site"),
            ("phos", "phosphorylation"),
        ],
    )
    def test_round_trip(self, notation, variant_type):
        """Test that every token maps to its type and back."""
        assert NOTATION_TO_TYPES[notation] == variant_type
        assert TYPES_TO_NOTATION[variant_type] == notation

    @pytest.mark.parametrize(
        "variant_type, notation",
        [
            ("nonsense mutation", ">"),
            ("truncating frameshift mutation", "fs"),
            ("frameshift truncation", "fs"),
            ("missense variant", "mis"),
            ("mutations", "mut"),
            ("nonsense", ">"),
        ],
    )
    def test_refinements_and_aliases(self, variant_type, notation):
        """Test refinements and deprecated aliases map onto their parent token."""
        assert TYPES_TO_NOTATION[variant_type] == notation

    def test_add_type_mappings_matches_table(self):
        """Test that the table is built once from add_type_mappings."""
        assert dict(TYPES_TO_NOTATION) == add_type_mappings()

    def test_non_range_types(self):
        """Test the types which cannot have a second breakpoint."""
        assert "substitution" in NON_RANGE_TYPES
        assert "splice-site" in NON_RANGE_TYPES
        assert "insertion" not in NON_RANGE_TYPES


def test_prefix_classes():
    """Test that all eight coordinate prefixes are known."""
    assert set(PREFIX_CLASS) == {"g", "i", "e", "c", "n", "r", "p", "y"}
    assert PREFIX_CLASS["c"] == "CdsPosition"
    assert PREFIX_CLASS["y"] == "CytobandPosition"
