"""
Encoding Strategies
===================
Turns a variable's content into escaped literal text.

Pipeline per variable:
    content → strip_trailing_newline → check_ascii → strategy(bytes) → text

SEQUENCE_SPECS is the single table describing, per SequenceKind, how the
layout engine splits and decorates the encoded text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .block_extractor import encode_source
from .errors import AsciiViolationError
from .models import NewlineConvention, SequenceKind

logger = logging.getLogger(__name__)

ASCII_LIMIT = 0x80
LINE_FEED = 0x0A
CARRIAGE_RETURN = 0x0D


@dataclass(frozen=True)
class SequenceSpec:
    """How encoded text of one kind is tokenized and decorated."""
    separator: str
    line_feed: str
    carriage_return: str
    # True: separator goes before every token but the first (HEX/OCT).
    # False: separator goes after every token but the last (ESC/RAWHEX).
    prefix_separator: bool
    # ESC mnemonics are glued to neighbouring text and need a rescan.
    sticky_mnemonics: bool = False

    @property
    def mnemonics(self) -> tuple[str, str]:
        return (self.line_feed, self.carriage_return)


SEQUENCE_SPECS: dict[SequenceKind, SequenceSpec] = {
    SequenceKind.ESC: SequenceSpec(
        separator=" ",
        line_feed="\\n",
        carriage_return="\\r",
        prefix_separator=False,
        sticky_mnemonics=True,
    ),
    SequenceKind.HEX: SequenceSpec(
        separator="\\",
        line_feed="x0a",
        carriage_return="x0d",
        prefix_separator=True,
    ),
    SequenceKind.OCT: SequenceSpec(
        separator="\\",
        line_feed="012",
        carriage_return="015",
        prefix_separator=True,
    ),
    SequenceKind.RAWHEX: SequenceSpec(
        separator=",",
        line_feed="0x0a",
        carriage_return="0x0d",
        prefix_separator=False,
    ),
}


# ─── Newline Normalizer ───────────────────────────────────────────────────────


def strip_trailing_newline(content: str, nl: NewlineConvention) -> str:
    """Remove exactly one trailing terminator of the given convention."""
    terminator = nl.terminator
    if len(content) >= len(terminator) and content.endswith(terminator):
        return content[:-len(terminator)]
    return content


# ─── ASCII Guard ──────────────────────────────────────────────────────────────


def check_ascii(data: bytes, line_number: int, source: str):
    """
    Raise AsciiViolationError on the first byte outside 7-bit ASCII.

    Args:
        data: Content bytes of one variable.
        line_number: 1-based line of the variable's @variable header.
        source: Name of the input file, for the diagnostic.
    """
    for offset, value in enumerate(data):
        if value >= ASCII_LIMIT:
            logger.error(
                f"ASCII error in {source} in line {line_number}: "
                f"offset {offset}"
            )
            raise AsciiViolationError(source, line_number, offset, value)


# ─── Strategies ───────────────────────────────────────────────────────────────


def encode_esc(data: bytes) -> str:
    """Literal bytes, with LF and CR as their two-character mnemonics."""
    parts = []
    for value in data:
        if value == LINE_FEED:
            parts.append("\\n")
        elif value == CARRIAGE_RETURN:
            parts.append("\\r")
        else:
            parts.append(chr(value))
    return "".join(parts)


def encode_hex(data: bytes) -> str:
    return "".join(f"\\x{value:02x}" for value in data)


def encode_oct(data: bytes) -> str:
    return "".join(f"\\{value:03o}" for value in data)


def encode_rawhex(data: bytes) -> str:
    return ",".join(f"0x{value:02x}" for value in data)


ENCODERS: dict[SequenceKind, Callable[[bytes], str]] = {
    SequenceKind.ESC: encode_esc,
    SequenceKind.HEX: encode_hex,
    SequenceKind.OCT: encode_oct,
    SequenceKind.RAWHEX: encode_rawhex,
}


def encode_content(
    content: str,
    seq: SequenceKind,
    nl: NewlineConvention,
    line_number: int,
    source: str,
) -> str:
    """Normalize, guard and encode one variable's content."""
    normalized = strip_trailing_newline(content, nl)
    data = encode_source(normalized)
    check_ascii(data, line_number, source)
    return ENCODERS[seq](data)
