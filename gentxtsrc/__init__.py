"""
Text-to-Source Generator
========================
Embeds annotated text files into C/C++ sources as escaped string literals.

Architecture:
    - Block Extractor: Reads @start/@global/@variable/@endvariable/@end markup
    - Validator: Checks options, newline conventions, sequence kinds and names
    - Encoders: Re-encode content as ESC, HEX, OCT or RAWHEX literal text
    - Layout Engine: Wraps encoded text by width and original newlines
    - Code Emission: Produces header declarations and source definitions

Version: 1.0.0
"""

__version__ = "1.0.0"
