"""
Code Emission
=============
Pure string assembly of C/C++ declarations and definitions.

Per variable (CodeEmitter):
    header → [/** doxygen (source line N) */] extern const char *const name;
    source → const char *const name = { "line" \\ ... };  [/* original text */]

Per file (assemble_header / assemble_source):
    include guard, optional namespace, the fragments above.
"""

from __future__ import annotations

import logging
from typing import Optional

from .encoders import encode_content
from .layout import LineLayoutEngine
from .models import ResolvedOptions, VariableRecord

logger = logging.getLogger(__name__)

LINE_CONTINUATION = " \\\n"


class CodeEmitter:
    """
    Emits the declaration and definition text of one variable.

    The encoded, wrapped lines are computed once on first use.
    """

    def __init__(self, record: VariableRecord, max_width: int, source: str = ""):
        self.record = record
        self.max_width = max_width
        self.source = source
        self._lines: Optional[list[str]] = None

    @property
    def lines(self) -> list[str]:
        """Encoded output lines of the variable."""
        if self._lines is None:
            encoded = encode_content(
                self.record.content,
                self.record.seq,
                self.record.nl,
                self.record.line_number,
                self.source,
            )
            engine = LineLayoutEngine(self.max_width, self.record.seq, self.record.nl)
            self._lines = engine.layout(encoded)
        return self._lines

    def _storage(self) -> str:
        if self.record.is_byte_array:
            return f"const char {self.record.name}[]"
        return f"const char *const {self.record.name}"

    def write_declaration(self) -> str:
        """Header text: optional doc comment and the extern declaration."""
        text = ""
        if self.record.doxygen:
            text += f"/** {self.record.doxygen}"
            if self.record.add_text_pos:
                text += f" (source line {self.record.line_number})"
            text += " */\n"
        text += f"extern {self._storage()};\n"
        return text

    def write_definition(self) -> str:
        """Source text: the initialized definition and optional original text."""
        quote = "" if self.record.is_byte_array else '"'
        lines = self.lines
        if not lines:
            lines = ["0x00"] if self.record.is_byte_array else [""]

        text = f"{self._storage()} = {{\n"
        for line in lines:
            text += f"{quote}{line}{quote}{LINE_CONTINUATION}"
        text += "};\n"

        if self.record.add_text_segment:
            text += (
                f"/*\nOriginal text from variable section '{self.record.name}'\n\n"
                f"{self.record.content}*/\n"
            )
        return text


# ─── File Assembly ────────────────────────────────────────────────────────────


def include_guard(stem: str) -> str:
    clean = "".join(c if c.isalnum() else "_" for c in stem)
    return f"_{clean.upper()}_"


def _namespace_open(options: ResolvedOptions) -> str:
    return f"namespace {options.namespace} {{\n" if options.uses_namespace else ""


def _namespace_close(options: ResolvedOptions) -> str:
    return "}\n" if options.uses_namespace else ""


def assemble_header(declarations: list[str], options: ResolvedOptions) -> str:
    guard = include_guard(options.output_filename)
    return (
        f"#ifndef {guard}\n"
        f"#define {guard}\n"
        + _namespace_open(options)
        + "".join(declarations)
        + _namespace_close(options)
        + "#endif\n"
    )


def assemble_source(definitions: list[str], options: ResolvedOptions) -> str:
    return (
        f'#include "{options.output_filename}.h"\n\n'
        + _namespace_open(options)
        + "".join(definitions)
        + _namespace_close(options)
    )


def raw_text_fragments(name: str, text: str) -> tuple[str, str]:
    """Declaration and definition embedding a whole file as a raw string."""
    declaration = f"extern const char *const {name};\n"
    definition = f'const char *const {name} = {{R"({text})"\n}};\n'
    return declaration, definition


def generate_fragments(
    records: list[VariableRecord],
    options: ResolvedOptions,
    source: str = "",
) -> tuple[list[str], list[str]]:
    """Emit declarations and definitions for all records, in order."""
    if options.sort_by_varname:
        records = sorted(records, key=lambda r: r.name)

    declarations = []
    definitions = []
    for record in records:
        emitter = CodeEmitter(record, options.sign_per_line, source=source)
        declarations.append(emitter.write_declaration())
        definitions.append(emitter.write_definition())
        logger.debug(
            f"Emitted {record.name} ({record.seq.value}, {record.nl.value}, "
            f"{len(emitter.lines)} lines)"
        )
    return declarations, definitions
