"""
Generator Errors
================
Fatal conditions raised by the generator. Malformed markup is never an
error; it is skipped by the extractor.
"""

from __future__ import annotations

from typing import Optional


class GeneratorError(Exception):
    """Base class for every fatal generator condition."""


class ConfigurationError(GeneratorError):
    """An option or variable attribute holds an unusable value."""

    def __init__(
        self,
        message: str,
        source: str = "",
        value: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.source = source
        self.value = value
        self.line_number = line_number
        where = f"{source}: " if source else ""
        if line_number is not None:
            where = f"{source}:{line_number}: " if source else f"line {line_number}: "
        super().__init__(f"{where}{message}")


class InvalidIdentifierError(ConfigurationError):
    """A requested variable name is not a legal C identifier."""


class AsciiViolationError(GeneratorError):
    """A variable's content holds a byte outside 7-bit ASCII."""

    def __init__(self, source: str, line_number: int, offset: int, byte: int):
        self.source = source
        self.line_number = line_number
        self.offset = offset
        self.byte = byte
        super().__init__(
            f"ASCII error in {source} in line {line_number}: "
            f"byte 0x{byte:02x} is the {offset} character"
        )
