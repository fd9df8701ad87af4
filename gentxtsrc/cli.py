"""
CLI Interface
=============
Command-line interface for the text-to-source generator.

Usage:
    python -m gentxtsrc generate <file> [<file> ...] [options]
    python -m gentxtsrc extract <file>
    python -m gentxtsrc encode <file>
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .codegen import CodeEmitter
from .engine import GeneratorConfig, GeneratorEngine
from .errors import AsciiViolationError, ConfigurationError, GeneratorError
from .models import GeneratedCode
from .validator import IdentifierRegistry, VariableValidator

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="gentxtsrc")
def cli():
    """Text-to-source generator. Embeds annotated text files as C/C++ literals."""
    pass


@cli.command()
@click.argument("input_files", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--headerdir", "-H", default=None, help="Header file directory")
@click.option("--sourcedir", "-S", default=None, help="Source file directory")
@click.option(
    "--outputtype", "-t",
    default=None,
    help="Output file type (c or cpp)",
)
@click.option(
    "--outputfilename", "-f",
    default=None,
    help="Output filename (without extension)",
)
@click.option("--namespace", "-n", default=None, help="Namespace for CPP output")
@click.option(
    "--signperline", "-l",
    default=None,
    type=int,
    help="Number of characters per output line",
)
@click.option(
    "--sortbyvarname/--no-sortbyvarname",
    default=None,
    help="Emit variables sorted by name instead of document order",
)
@click.option(
    "--check", "-C", "skip_check",
    is_flag=True,
    default=False,
    help="Just create the files without showing the parameters and asking",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option("--log-file", default=None, help="Path to log file")
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only a JSON summary to stdout (for programmatic use)",
)
def generate(
    input_files: tuple[str, ...],
    headerdir: str,
    sourcedir: str,
    outputtype: str,
    outputfilename: str,
    namespace: str,
    signperline: int,
    sortbyvarname: bool,
    skip_check: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Generate header and source files from annotated text files."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"
        skip_check = True

    config = GeneratorConfig(
        header_dir=headerdir,
        source_dir=sourcedir,
        output_type=outputtype,
        output_filename=outputfilename,
        namespace=namespace,
        sign_per_line=signperline,
        sort_by_varname=sortbyvarname,
        check=not skip_check,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Text-to-Source Generator v{__version__}[/]\n"
                f"[dim]Files: {escape(', '.join(input_files))}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = GeneratorEngine(config)
        results = engine.run(list(input_files), confirm=_confirm_parameters)
    except AsciiViolationError as e:
        _fail(
            f"[red]ASCII error in:[/] [blue]{escape(e.source)}[/] [red]in line:[/] "
            f"{e.line_number} [yellow]it is the: {e.offset} character[/]"
        )
    except ConfigurationError as e:
        _fail(f"[red]Configuration error:[/] {escape(str(e))}")
    except (GeneratorError, OSError) as e:
        _fail(f"[red]Error:[/] {escape(str(e))}")

    if json_output:
        print(json.dumps(
            [_summary(r) for r in results],
            indent=2,
            ensure_ascii=False,
        ))
    else:
        _display_results(results)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output the extraction as JSON",
)
def extract(input_file: str, json_output: bool):
    """Show the options and variable blocks found in a file."""

    engine = GeneratorEngine(GeneratorConfig(log_level="ERROR"))
    result = engine.extract(input_file)

    if json_output:
        print(json.dumps(
            result.model_dump(exclude={"text"}),
            indent=2,
            ensure_ascii=False,
        ))
        return

    _display_extraction(result)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option(
    "--signperline", "-l",
    default=None,
    type=int,
    help="Number of characters per output line",
)
def encode(input_file: str, signperline: int):
    """Print the encoded, wrapped lines of every variable in a file."""

    engine = GeneratorEngine(GeneratorConfig(log_level="ERROR", sign_per_line=signperline))
    try:
        extraction = engine.extract(input_file)
        options = engine.resolve_options(extraction.options, extraction.source_name)
        validator = VariableValidator(extraction.source_name, IdentifierRegistry())
        records = validator.validate_all(extraction.variables)

        for record in records:
            emitter = CodeEmitter(record, options.sign_per_line, source=Path(input_file).name)
            table = Table(
                title=f"{record.name} ({record.seq.value}, {record.nl.value})",
                border_style="cyan",
            )
            table.add_column("#", justify="right", style="dim")
            table.add_column("Line")
            for number, line in enumerate(emitter.lines, start=1):
                table.add_row(str(number), Text(line))
            console.print(table)
    except AsciiViolationError as e:
        _fail(
            f"[red]ASCII error in:[/] [blue]{escape(e.source)}[/] [red]in line:[/] "
            f"{e.line_number} [yellow]it is the: {e.offset} character[/]"
        )
    except GeneratorError as e:
        _fail(f"[red]Error:[/] {escape(str(e))}")


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _fail(message: str):
    console.print(message, markup=True)
    sys.exit(1)


def _summary(result: GeneratedCode) -> dict:
    return {
        "source_file": result.source_file,
        "header_path": result.header_path,
        "source_path": result.source_path,
        "variables": [v.name for v in result.variables],
    }


def _confirm_parameters(generated: GeneratedCode) -> bool:
    """Show the resolved parameters of one file and ask before writing."""
    options = generated.options
    table = Table(title=f"Parameters for {generated.source_file}", border_style="cyan")
    table.add_column("Parameter", style="bold")
    table.add_column("Value")
    table.add_row("Header file", generated.header_path)
    table.add_row("Source file", generated.source_path)
    table.add_row("Output type", options.output_type.value)
    table.add_row("Namespace", options.namespace or "(none)")
    table.add_row("Signs per line", str(options.sign_per_line))
    table.add_row("Sort by name", str(options.sort_by_varname))
    table.add_row("Variables", str(generated.variable_count))
    console.print(table)
    return click.confirm("Write these files?", default=True)


def _display_results(results: list[GeneratedCode]):
    """Display generated files in a formatted table."""
    table = Table(title="Generated Files", border_style="green")
    table.add_column("Input", style="bold")
    table.add_column("Header")
    table.add_column("Source")
    table.add_column("Variables", justify="right")

    for result in results:
        table.add_row(
            result.source_file,
            result.header_path,
            result.source_path,
            str(result.variable_count),
        )

    console.print(table)
    console.print()


def _display_extraction(result):
    """Display extracted options and variables as rich tables."""
    options_table = Table(title="Options", border_style="cyan")
    options_table.add_column("Key", style="bold")
    options_table.add_column("Value")
    for key, value in result.options.items():
        options_table.add_row(key, value)
    console.print(options_table)
    console.print()

    variables_table = Table(title="Variables", border_style="green")
    variables_table.add_column("Line", justify="right")
    variables_table.add_column("Attributes")
    variables_table.add_column("Content length", justify="right")
    for variable in result.variables:
        attributes = ", ".join(
            f"{k}: {v}" for k, v in variable.fields.items() if k != "content"
        )
        variables_table.add_row(
            str(variable.line_number),
            attributes,
            str(len(variable.content)),
        )
    console.print(variables_table)
    console.print()


# ─── Entry point (for python -m gentxtsrc.cli) ────────────────────────────────


if __name__ == "__main__":
    cli()
