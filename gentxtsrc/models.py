"""
Data Models
===========
Pydantic models for extracted markup, validated variables and generated code.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


# ─── Enums ────────────────────────────────────────────────────────────────────


class SequenceKind(str, Enum):
    """Textual encoding family used for a variable's bytes."""
    ESC = "ESC"
    HEX = "HEX"
    OCT = "OCT"
    RAWHEX = "RAWHEX"


class NewlineConvention(str, Enum):
    """Line terminator convention of a variable's content."""
    UNIX = "UNIX"
    DOS = "DOS"
    MAC = "MAC"

    @property
    def terminator(self) -> str:
        return _TERMINATORS[self]


_TERMINATORS = {
    NewlineConvention.UNIX: "\n",
    NewlineConvention.DOS: "\r\n",
    NewlineConvention.MAC: "\r",
}


class OutputType(str, Enum):
    """Target language family of the generated source file."""
    C = "c"
    CPP = "cpp"


# ─── Extraction Models ────────────────────────────────────────────────────────


class RawVariable(BaseModel):
    """
    One `@variable ... @endvariable` block as found in the markup.
    `fields` holds the header's key/value pairs plus the captured
    text under the `content` key.
    """
    line_number: int = Field(ge=1)
    fields: dict[str, str] = Field(default_factory=dict)

    @property
    def content(self) -> str:
        return self.fields.get("content", "")


class ExtractionResult(BaseModel):
    """Everything the block extractor found in one input file."""
    source_name: str = ""
    options: dict[str, str] = Field(default_factory=dict)
    variables: list[RawVariable] = Field(default_factory=list)
    text: str = Field(
        default="",
        description="Full input text, embedded as-is when no blocks exist",
    )

    @computed_field
    @property
    def variable_count(self) -> int:
        return len(self.variables)


# ─── Validated Models ─────────────────────────────────────────────────────────


class VariableRecord(BaseModel):
    """A validated variable, ready for encoding and emission."""
    name: str
    requested_name: str = ""
    line_number: int = Field(ge=1)
    content: str = ""
    nl: NewlineConvention = NewlineConvention.UNIX
    seq: SequenceKind
    doxygen: str = ""
    add_text_pos: bool = False
    add_text_segment: bool = False

    @computed_field
    @property
    def is_byte_array(self) -> bool:
        return self.seq == SequenceKind.RAWHEX


class ResolvedOptions(BaseModel):
    """Per-file options after merging CLI overrides, @global and defaults."""
    header_dir: str
    source_dir: str
    output_type: OutputType = OutputType.CPP
    output_filename: str
    namespace: str = ""
    sign_per_line: int = Field(default=60, ge=1)
    sort_by_varname: bool = False

    @computed_field
    @property
    def uses_namespace(self) -> bool:
        return self.output_type == OutputType.CPP and bool(self.namespace)


class GeneratedCode(BaseModel):
    """Header and source documents produced for one input file."""
    source_file: str
    header_path: str
    source_path: str
    header_text: str
    source_text: str
    variables: list[VariableRecord] = Field(default_factory=list)
    options: Optional[ResolvedOptions] = None

    @computed_field
    @property
    def variable_count(self) -> int:
        return len(self.variables)
