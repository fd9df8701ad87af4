"""
Module entry point for: python -m gentxtsrc

Allows running the generator directly as a module:
    python -m gentxtsrc generate <file> [options]
    python -m gentxtsrc extract <file>
    python -m gentxtsrc encode <file>
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
