"""
Generator Engine
================
Main orchestrator that combines block extraction, validation, encoding,
layout and code emission into the complete text-to-source pipeline.

Usage:
    engine = GeneratorEngine(config)
    results = engine.run(["strings.txt"])

Architecture:
    Text file → BlockExtractor → (options, RawVariables) → option resolution →
    VariableValidator → CodeEmitter (encode + layout) → header/source → disk
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from . import storage
from .block_extractor import BlockExtractor
from .codegen import (
    assemble_header,
    assemble_source,
    generate_fragments,
    raw_text_fragments,
)
from .models import ExtractionResult, GeneratedCode, ResolvedOptions
from .validator import (
    IdentifierRegistry,
    VariableValidator,
    check_file_name,
    check_language_type,
    check_namespace,
    parse_flag,
    parse_sign_per_line,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_OUTPUT_TYPE = "cpp"
DEFAULT_SIGN_PER_LINE = 60


@dataclass
class GeneratorConfig:
    """
    Configuration for the generator engine.

    Every output setting left as None falls back to the file's @global
    option of the same name, then to the built-in default.
    """

    # Output settings
    header_dir: Optional[str] = None
    source_dir: Optional[str] = None
    output_type: Optional[str] = None
    output_filename: Optional[str] = None
    namespace: Optional[str] = None

    # Layout
    sign_per_line: Optional[int] = None
    sort_by_varname: Optional[bool] = None

    # Processing
    check: bool = True
    write_files: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


class GeneratorEngine:
    """
    Main text-to-source generation engine.

    Orchestrates the full pipeline per input file:
        1. Block extraction (options + variables)
        2. Option resolution
        3. Variable validation (names, nl, seq)
        4. Encoding and layout
        5. Header/source assembly and writing

    All text of a file is assembled before anything is written, so a fatal
    error never leaves a half-written header/source pair behind.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("gentxtsrc")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            package_logger.addHandler(console)
        else:
            for handler in package_logger.handlers:
                handler.setLevel(log_level)

        # File handler
        if self.config.log_file:
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.log_file, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            package_logger.addHandler(file_handler)

    # ─── Option Resolution ────────────────────────────────────────────────

    def resolve_options(
        self, options: dict[str, str], source_name: str
    ) -> ResolvedOptions:
        """
        Merge CLI overrides, @global options and defaults for one file.

        Raises:
            ConfigurationError: If any resolved value is invalid.
        """
        cfg = self.config

        def pick(override, key: str, default: str = "") -> str:
            if override is not None:
                return str(override)
            return options.get(key) or default

        output_type = check_language_type(
            pick(cfg.output_type, "outputtype", DEFAULT_OUTPUT_TYPE), source_name
        )
        output_filename = check_file_name(
            pick(cfg.output_filename, "outputfilename", source_name), source_name
        )
        namespace = check_namespace(pick(cfg.namespace, "namespace"), source_name)
        sign_per_line = parse_sign_per_line(
            pick(cfg.sign_per_line, "signperline", str(DEFAULT_SIGN_PER_LINE)),
            source_name,
        )
        if cfg.sort_by_varname is not None:
            sort_by_varname = cfg.sort_by_varname
        else:
            sort_by_varname = parse_flag(options.get("sortbyvarname"))

        return ResolvedOptions(
            header_dir=str(storage.resolve_dir(pick(cfg.header_dir, "headerdir"))),
            source_dir=str(storage.resolve_dir(pick(cfg.source_dir, "sourcedir"))),
            output_type=output_type,
            output_filename=output_filename,
            namespace=namespace,
            sign_per_line=sign_per_line,
            sort_by_varname=sort_by_varname,
        )

    # ─── Generation ───────────────────────────────────────────────────────

    def extract(self, input_path: str) -> ExtractionResult:
        return BlockExtractor(input_path).extract()

    def generate(
        self,
        input_path: str,
        registry: Optional[IdentifierRegistry] = None,
    ) -> GeneratedCode:
        """
        Generate header and source text for one input file, in memory.

        Args:
            input_path: Path to the annotated text file.
            registry: Identifiers taken so far in this run.

        Raises:
            FileNotFoundError: If the input file doesn't exist.
            ConfigurationError: On invalid options or variable attributes.
            AsciiViolationError: On non-ASCII content.
        """
        registry = registry if registry is not None else IdentifierRegistry()
        source_file = Path(input_path).name

        extraction = self.extract(input_path)
        options = self.resolve_options(extraction.options, extraction.source_name)

        validator = VariableValidator(extraction.source_name, registry)
        records = validator.validate_all(extraction.variables)

        if records:
            declarations, definitions = generate_fragments(
                records, options, source=source_file
            )
        else:
            logger.warning(
                f"No variable blocks in {source_file}, embedding the whole file"
            )
            name = registry.register(extraction.source_name, source=source_file)
            declaration, definition = raw_text_fragments(name, extraction.text)
            declarations, definitions = [declaration], [definition]

        return GeneratedCode(
            source_file=source_file,
            header_path=str(storage.header_path(options.header_dir, options.output_filename)),
            source_path=str(storage.source_path(
                options.source_dir, options.output_filename, options.output_type.value
            )),
            header_text=assemble_header(declarations, options),
            source_text=assemble_source(definitions, options),
            variables=records,
            options=options,
        )

    def write(self, generated: GeneratedCode):
        """Write a generated header/source pair to disk, both or neither."""
        storage.write_files({
            Path(generated.header_path): generated.header_text,
            Path(generated.source_path): generated.source_text,
        })

    def run(
        self,
        input_paths: list[str],
        confirm: Optional[Callable[[GeneratedCode], bool]] = None,
    ) -> list[GeneratedCode]:
        """
        Generate code for every input file with one shared identifier registry.

        Args:
            input_paths: Annotated text files, processed in order.
            confirm: Called before writing when config.check is set;
                returning False skips writing that file.
        """
        registry = IdentifierRegistry()
        results: list[GeneratedCode] = []

        for input_path in input_paths:
            start_time = time.time()
            logger.info(f"Starting generation for: {input_path}")

            generated = self.generate(input_path, registry=registry)

            if self.config.write_files:
                if self.config.check and confirm is not None and not confirm(generated):
                    logger.info(f"Skipped writing output for {input_path}")
                else:
                    self.write(generated)

            elapsed = time.time() - start_time
            logger.info(
                f"Code generation successful for {generated.source_file} in "
                f"{elapsed:.2f}s ({generated.variable_count} variables)"
            )
            results.append(generated)

        return results
