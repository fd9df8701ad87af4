"""
Line Layout Engine
==================
Wraps encoded literal text into physical output lines.

Breaks are forced on two independent triggers:
    - Width: the next token would push the line past the maximum width
    - Newline: the token is the newline mnemonic of the variable's convention
      (CR followed by LF for DOS, LF for UNIX, CR for MAC)

The last token always flushes the final partial line.
"""

from __future__ import annotations

import logging

from .encoders import SEQUENCE_SPECS, SequenceSpec
from .models import NewlineConvention, SequenceKind

logger = logging.getLogger(__name__)


def split_mnemonics(chunk: str, mnemonics: tuple[str, ...]) -> list[str]:
    """
    Split two-character mnemonics out of a chunk wherever they occur.

    "ab\\ncd" -> ["ab", "\\n", "cd"]. Empty text between two mnemonics
    is not emitted as a token.
    """
    if not chunk:
        return [chunk]

    pieces: list[str] = []
    start = 0
    i = 0
    while i < len(chunk) - 1:
        if chunk[i:i + 2] in mnemonics:
            if i > start:
                pieces.append(chunk[start:i])
            pieces.append(chunk[i:i + 2])
            i += 2
            start = i
        else:
            i += 1

    if start < len(chunk):
        pieces.append(chunk[start:])
    return pieces


def tokenize(text: str, spec: SequenceSpec) -> list[str]:
    """Split encoded text into the atomic units the layout reasons about."""
    if not text:
        return []

    chunks = text.split(spec.separator)
    if not spec.sticky_mnemonics:
        return chunks

    tokens: list[str] = []
    for chunk in chunks:
        tokens.extend(split_mnemonics(chunk, spec.mnemonics))
    return tokens


def decorate(token: str, index: int, total: int, spec: SequenceSpec) -> str:
    """Return the visible form of a token inside an output line."""
    if spec.prefix_separator:
        return spec.separator + token if index > 0 else token
    if spec.sticky_mnemonics and token in spec.mnemonics:
        return token
    return token + spec.separator if index < total - 1 else token


class LineLayoutEngine:
    """
    Lays out the encoded text of one variable.

    Usage:
        engine = LineLayoutEngine(60, SequenceKind.HEX, NewlineConvention.DOS)
        lines = engine.layout(encoded_text)
    """

    def __init__(
        self,
        max_width: int,
        seq: SequenceKind,
        nl: NewlineConvention,
    ):
        self.max_width = max_width
        self.seq = seq
        self.nl = nl
        self.spec = SEQUENCE_SPECS[seq]

    def layout(self, text: str) -> list[str]:
        """Produce the ordered output lines for an encoded text."""
        tokens = tokenize(text, self.spec)
        result: list[str] = []
        line = ""
        count = 0
        pending_dos_break = False

        for index, token in enumerate(tokens):
            piece = decorate(token, index, len(tokens), self.spec)
            length = len(piece)

            if line and count + length > self.max_width:
                result.append(line)
                line = ""
                count = 0

            line += piece
            count += length

            newline_break, pending_dos_break = self._newline_break(
                token, pending_dos_break
            )
            if newline_break or index == len(tokens) - 1:
                result.append(line)
                line = ""
                count = 0

        logger.debug(
            f"Laid out {len(tokens)} {self.seq.value} tokens "
            f"into {len(result)} lines"
        )
        return result

    def _newline_break(self, token: str, pending_dos_break: bool) -> tuple[bool, bool]:
        """Return (break after this token, pending flag for the next one)."""
        is_line_feed = token == self.spec.line_feed
        is_carriage_return = token == self.spec.carriage_return

        if self.nl == NewlineConvention.DOS:
            return is_line_feed and pending_dos_break, is_carriage_return
        if self.nl == NewlineConvention.UNIX:
            return is_line_feed, False
        return is_carriage_return, False


def insert_line_breaks(
    text: str,
    max_width: int,
    seq: SequenceKind,
    nl: NewlineConvention,
) -> list[str]:
    """Convenience wrapper around LineLayoutEngine.layout."""
    return LineLayoutEngine(max_width, seq, nl).layout(text)
