#!/usr/bin/env python3
"""
error.py

Structured errors raised by the notation parsers.

Two error kinds are used throughout the package:
    ParsingError: the input string is lexically or grammatically invalid
    InputValidationError: the parsed fields are well formed but their
        combination is structurally impossible

Both carry a ``content`` dict in addition to the message so callers can find
out which logical field caused the failure (``violated_attr``), what was
decoded before the failure (``parsed``) and, for composed parsers, the error
of the sub-parser (``sub_parser_error``).
"""

import traceback


class ErrorMixin(Exception):
    """
    Base class for the parser errors.

    Args:
        content (str or ErrorMixin): The error message, or an existing error
            whose message and content are copied.
        **kwargs: Additional content to aid in debugging
            (violated_attr, input, parsed, expected, sub_parser_error).

    Examples:
        >>> err = ParsingError("Missing '.' separator after prefix", violated_attr="punctuation")
        >>> err.violated_attr
        'punctuation'
    """

    def __init__(self, content="", **kwargs):
        if isinstance(content, ErrorMixin):
            message = content.message
            kwargs = {**content.content, **kwargs}
        else:
            message = str(content)
        super().__init__(message)
        self.message = message
        self.name = type(self).__name__
        self.content = kwargs

    @property
    def violated_attr(self):
        """The name of the field which caused the error, if known."""
        return self.content.get("violated_attr")

    def to_json(self) -> dict:
        """
        Returns:
            dict: The JSON representation of this error.
        """
        stack = "".join(traceback.format_exception(type(self), self, self.__traceback__))
        result = {key: _decycle(value) for key, value in self.content.items()}
        result.update(
            {
                "message": self.message,
                "name": self.name,
                "stacktrace": [line.strip() for line in stack.split("\n")],
            }
        )
        return result


def _decycle(value):
    if isinstance(value, ErrorMixin):
        return value.to_json()
    if isinstance(value, BaseException):
        return {"message": str(value), "name": type(value).__name__}
    if isinstance(value, dict):
        return {key: _decycle(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_decycle(item) for item in value]
    return value


class ParsingError(ErrorMixin):
    """The notation is lexically or grammatically invalid."""

    pass


class InputValidationError(ErrorMixin):
    """The notation is well formed but describes an impossible combination."""

    pass
