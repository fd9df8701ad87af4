"""
Validation Engine
=================
Turns extracted markup into validated records.

    - Variable attributes (nl, seq, flags) → VariableRecord
    - Requested names → legal, collision-free C identifiers
    - Global options (output type, file name, namespace, width)

Never silently defaults an invalid value: every bad value raises.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from .errors import ConfigurationError, InvalidIdentifierError
from .models import (
    NewlineConvention,
    OutputType,
    RawVariable,
    SequenceKind,
    VariableRecord,
)

logger = logging.getLogger(__name__)

RESERVED_KEYWORDS = frozenset({
    "auto", "break", "case", "char", "const", "continue", "default",
    "do", "double", "else", "enum", "extern", "float", "for", "goto",
    "if", "int", "long", "register", "return", "short", "signed",
    "sizeof", "static", "struct", "switch", "typedef", "union",
    "unsigned", "void", "volatile", "while",
})

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
NAMESPACE_PATTERN = re.compile(
    r"^(::)?[a-zA-Z_][a-zA-Z0-9_]*(::[a-zA-Z_][a-zA-Z0-9_]*)*$"
)
FILE_NAME_PATTERN = re.compile(r'^[^\x00-\x1F\x7F\\/:*?"<>|]+$')

LANGUAGE_ALIASES = {
    "c": OutputType.C,
    "cpp": OutputType.CPP,
    "c++": OutputType.CPP,
    "g++": OutputType.CPP,
}


# ─── Option Checks ────────────────────────────────────────────────────────────


def check_language_type(value: str, source: str = "") -> OutputType:
    """Map c / cpp / c++ / g++ (any case) to an OutputType."""
    output_type = LANGUAGE_ALIASES.get(value.strip().lower())
    if output_type is None:
        raise ConfigurationError(
            f"cannot determine '{value}' as a language, expected c or cpp",
            source=source,
            value=value,
        )
    return output_type


def check_file_name(name: str, source: str = "") -> str:
    if not FILE_NAME_PATTERN.match(name):
        raise ConfigurationError(
            f"'{name}' is not a valid file name", source=source, value=name
        )
    return name


def check_namespace(namespace: str, source: str = "") -> str:
    if namespace and not NAMESPACE_PATTERN.match(namespace):
        raise ConfigurationError(
            f"'{namespace}' is not a valid namespace",
            source=source,
            value=namespace,
        )
    return namespace


def parse_sign_per_line(value, source: str = "") -> int:
    """Parse the maximum characters per output line."""
    try:
        width = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(
            f"signperline must be a number, got '{value}'",
            source=source,
            value=str(value),
        ) from None
    if width < 1:
        raise ConfigurationError(
            f"signperline must be at least 1, got {width}",
            source=source,
            value=str(value),
        )
    return width


def parse_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


# ─── Identifier Registry ──────────────────────────────────────────────────────


class IdentifierRegistry:
    """
    Caller-owned set of identifiers already taken in one run.

    Seeded with the C reserved words; every accepted name is added, so a
    second request for the same name gets the next free numeric suffix.
    """

    def __init__(self, reserved: Iterable[str] = RESERVED_KEYWORDS):
        self.taken: set[str] = set(reserved)

    def __contains__(self, name: str) -> bool:
        return name in self.taken

    def register(self, name: str, fallback: str = "", source: str = "") -> str:
        """
        Validate a requested identifier and return the name to use.

        Args:
            name: Requested identifier, may be empty.
            fallback: Name used when the request is empty (the file stem).
            source: Input file name, for diagnostics.

        Raises:
            InvalidIdentifierError: If the name is not a legal identifier.
        """
        base = name or fallback
        if not base or not (base[0].isalpha() or base[0] == "_"):
            raise InvalidIdentifierError(
                f"'{base}' is not a valid variable name, "
                f"it has to start with a letter or underscore",
                source=source,
                value=base,
            )
        if not IDENTIFIER_PATTERN.match(base):
            raise InvalidIdentifierError(
                f"'{base}' is not a valid variable name, "
                f"only letters, digits and underscores are allowed",
                source=source,
                value=base,
            )

        candidate = base
        index = 0
        while candidate in self.taken:
            candidate = f"{base}{index:02d}"
            index += 1

        if candidate != base:
            logger.info(f"Identifier '{base}' is taken, using '{candidate}'")

        self.taken.add(candidate)
        return candidate


# ─── Variable Validation ──────────────────────────────────────────────────────


class VariableValidator:
    """
    Validates raw variable blocks of one input file into VariableRecords.
    """

    def __init__(self, source_name: str, registry: IdentifierRegistry):
        self.source_name = source_name
        self.registry = registry

    def validate(self, raw: RawVariable) -> VariableRecord:
        fields = raw.fields

        nl_value = fields.get("nl", "").strip().upper() or NewlineConvention.UNIX.value
        try:
            nl = NewlineConvention(nl_value)
        except ValueError:
            raise ConfigurationError(
                f"nl is not correct, has to be (DOS, MAC, UNIX), given nl: {nl_value}",
                source=self.source_name,
                value=nl_value,
                line_number=raw.line_number,
            ) from None

        seq_value = fields.get("seq", "").strip().upper()
        try:
            seq = SequenceKind(seq_value)
        except ValueError:
            raise ConfigurationError(
                f"seq is not correct, has to be (ESC, HEX, OCT, RAWHEX), "
                f"given seq: {seq_value}",
                source=self.source_name,
                value=seq_value,
                line_number=raw.line_number,
            ) from None

        requested = fields.get("varname", "")
        name = self.registry.register(
            requested, fallback=self.source_name, source=self.source_name
        )

        return VariableRecord(
            name=name,
            requested_name=requested,
            line_number=raw.line_number,
            content=raw.content,
            nl=nl,
            seq=seq,
            doxygen=fields.get("doxygen", ""),
            add_text_pos=parse_flag(fields.get("addtextpos")),
            add_text_segment=parse_flag(fields.get("addtextsegment")),
        )

    def validate_all(self, variables: list[RawVariable]) -> list[VariableRecord]:
        records = [self.validate(raw) for raw in variables]
        logger.info(f"Validated {len(records)} variables from {self.source_name}")
        return records
