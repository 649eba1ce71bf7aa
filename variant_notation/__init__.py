"""
variant_notation

Parser and serializer for HGVS-like variant notation (continuous, legacy
multi-feature and '::' fusion forms).
"""

from variant_notation.scripts.constants import (
    AA_CODES,
    AA_PATTERN,
    NONSENSE,
    NOTATION_TO_TYPES,
    PREFIX_CLASS,
    TRUNCATING_FS,
    TYPES_TO_NOTATION,
)
from variant_notation.scripts.continuous import convert_3to1, get_prefix, parse_continuous
from variant_notation.scripts.error import ErrorMixin, InputValidationError, ParsingError
from variant_notation.scripts.multi_feature import parse_fusion, parse_multi_feature
from variant_notation.scripts.notation import (
    create_variant_notation,
    jsonify_variant,
    ontology_term_repr,
    stringify_variant,
    strip_parentheses,
)
from variant_notation.scripts.position import (
    convert_position_to_json,
    convert_position_to_string,
    create_break_repr,
    create_position,
    parse_position,
)
from variant_notation.scripts.variant import parse_variant
from variant_notation.version import __version__

__all__ = [
    "AA_CODES",
    "AA_PATTERN",
    "NONSENSE",
    "NOTATION_TO_TYPES",
    "PREFIX_CLASS",
    "TRUNCATING_FS",
    "TYPES_TO_NOTATION",
    "ErrorMixin",
    "InputValidationError",
    "ParsingError",
    "__version__",
    "convert_3to1",
    "convert_position_to_json",
    "convert_position_to_string",
    "create_break_repr",
    "create_position",
    "create_variant_notation",
    "get_prefix",
    "jsonify_variant",
    "ontology_term_repr",
    "parse_continuous",
    "parse_fusion",
    "parse_multi_feature",
    "parse_position",
    "parse_variant",
    "stringify_variant",
    "strip_parentheses",
]
