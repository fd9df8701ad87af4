"""
Markup State Machine
====================
Deterministic state machine that turns annotated text into global options
and ordered variable blocks, driven by line directives
(@start, @global, @variable, @endvariable, @end).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .models import ExtractionResult, RawVariable

logger = logging.getLogger(__name__)

# ─── Directives ───────────────────────────────────────────────────────────────

START_DIRECTIVE = "@start"
END_DIRECTIVE = "@end"
GLOBAL_DIRECTIVE = "@global"
VARIABLE_DIRECTIVE = "@variable"
END_VARIABLE_DIRECTIVE = "@endvariable"

CONTENT_KEY = "content"


class MarkupState(Enum):
    """Internal states of the extractor."""
    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"
    CAPTURING = "CAPTURING"
    STOPPED = "STOPPED"


# ─── Brace Body Parsing ───────────────────────────────────────────────────────


def directive_of(line: str) -> str:
    """Return the first whitespace-delimited token of a line."""
    parts = line.split(maxsplit=1)
    return parts[0] if parts else ""


def strip_quotes(text: str) -> str:
    """Trim whitespace and one layer of leading/trailing double quotes."""
    result = text.strip()
    if result.startswith('"'):
        result = result[1:]
    if result.endswith('"'):
        result = result[:-1]
    return result.strip()


def parse_brace_body(line: str) -> Optional[dict[str, str]]:
    """
    Parse the `{key: value, ...}` body of a directive line.

    Pairs without a colon are skipped. Returns None when the line has no
    complete brace body, so the caller applies nothing from it.
    """
    start = line.find("{")
    if start == -1:
        return None
    end = line.find("}", start + 1)
    if end == -1:
        logger.warning(f"Missing closing brace, ignoring body: {line.strip()}")
        return None

    pairs: dict[str, str] = {}
    for item in line[start + 1:end].split(","):
        if not item.strip():
            continue
        key, colon, value = item.partition(":")
        if not colon:
            logger.debug(f"Skipping pair without colon: {item.strip()!r}")
            continue
        pairs[strip_quotes(key)] = strip_quotes(value)
    return pairs


# ─── State Machine ────────────────────────────────────────────────────────────


class MarkupStateMachine:
    """
    Finite State Machine that transforms annotated text into an
    ExtractionResult. One handler per state; each handler consumes one line.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset the state machine for a fresh parsing run."""
        self.state = MarkupState.INACTIVE
        self.options: dict[str, str] = {}
        self.variables: list[RawVariable] = []
        self.current_fields: Optional[dict[str, str]] = None
        self.current_line = 0
        self.content_lines: list[str] = []

    def parse(self, text: str, source_name: str = "") -> ExtractionResult:
        """Parse a whole buffer of annotated text."""
        self.reset()

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        handlers = {
            MarkupState.INACTIVE: self._on_inactive,
            MarkupState.ACTIVE: self._on_active,
            MarkupState.CAPTURING: self._on_capturing,
        }

        for line_number, line in enumerate(lines, start=1):
            directive = directive_of(line)
            if directive == END_DIRECTIVE:
                self._stop(line_number)
                break
            handlers[self.state](line, directive, line_number)

        if self.state == MarkupState.CAPTURING:
            self._discard_open_block("end of input")

        logger.info(
            f"Extracted {len(self.options)} options and "
            f"{len(self.variables)} variables from {source_name or '<text>'}"
        )

        return ExtractionResult(
            source_name=source_name,
            options=dict(self.options),
            variables=list(self.variables),
            text=text,
        )

    def _on_inactive(self, line: str, directive: str, line_number: int):
        if directive == START_DIRECTIVE:
            logger.debug(f"@start on line {line_number}")
            self.state = MarkupState.ACTIVE

    def _on_active(self, line: str, directive: str, line_number: int):
        if directive == GLOBAL_DIRECTIVE:
            body = parse_brace_body(line)
            if body:
                self.options.update(body)

        elif directive == VARIABLE_DIRECTIVE:
            self._open_block(line, line_number)

        elif directive == END_VARIABLE_DIRECTIVE:
            logger.warning(f"@endvariable without open block on line {line_number}")

    def _on_capturing(self, line: str, directive: str, line_number: int):
        if directive == END_VARIABLE_DIRECTIVE:
            self._close_block()
            return
        self.content_lines.append(line + "\n")

    def _open_block(self, line: str, line_number: int):
        self.current_fields = parse_brace_body(line) or {}
        self.current_line = line_number
        self.content_lines = []
        self.state = MarkupState.CAPTURING
        logger.debug(f"Opened variable block on line {line_number}")

    def _close_block(self):
        fields = self.current_fields
        fields[CONTENT_KEY] = "".join(self.content_lines)
        self.variables.append(
            RawVariable(line_number=self.current_line, fields=fields)
        )
        self.current_fields = None
        self.content_lines = []
        self.state = MarkupState.ACTIVE

    def _discard_open_block(self, reason: str):
        logger.warning(
            f"Variable block from line {self.current_line} never closed "
            f"({reason}), discarding it"
        )
        self.current_fields = None
        self.content_lines = []

    def _stop(self, line_number: int):
        if self.state == MarkupState.CAPTURING:
            self._discard_open_block(f"@end on line {line_number}")
        logger.debug(f"@end on line {line_number}")
        self.state = MarkupState.STOPPED
