"""
Block Extractor
===============
Reads an annotated input file and hands its text to the markup state machine.
Bytes that are not valid UTF-8 are kept via surrogateescape so the ASCII
guard can report them at their exact offset.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .models import ExtractionResult
from .state_machine import MarkupStateMachine

logger = logging.getLogger(__name__)

SOURCE_ENCODING = "utf-8"
SOURCE_ERRORS = "surrogateescape"


def decode_source(data: bytes) -> str:
    return data.decode(SOURCE_ENCODING, errors=SOURCE_ERRORS)


def encode_source(text: str) -> bytes:
    return text.encode(SOURCE_ENCODING, errors=SOURCE_ERRORS)


class BlockExtractor:
    """
    Handles input ingestion for one annotated text file.

    Extracts:
        - Global options from @global lines
        - Variable blocks with their header line numbers and content
    """

    def __init__(self, input_path: str):
        self.input_path = Path(input_path)

    @property
    def source_name(self) -> str:
        return self.input_path.stem

    def read_text(self) -> str:
        """Read the whole file without newline translation."""
        return decode_source(self.input_path.read_bytes())

    def extract(self) -> ExtractionResult:
        """
        Extract options and variable blocks from the file.

        Returns:
            ExtractionResult with blocks ordered by appearance.

        Raises:
            FileNotFoundError: If the input file doesn't exist.
        """
        if not self.input_path.exists():
            raise FileNotFoundError(f"Input file not found: {self.input_path}")

        logger.info(f"Extracting blocks from {self.input_path}")
        text = self.read_text()
        return MarkupStateMachine().parse(text, source_name=self.source_name)
