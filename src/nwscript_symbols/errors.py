"""Error classes for NWScript symbol extraction.

This module provides:
- SymbolsError: Base exception class for all extraction errors
- ScriptReadError: The script bytes could not be obtained
- GrammarError: The embedded grammar failed to compile
- ExtractorConfigError: Extractor configuration is invalid
"""


class SymbolsError(Exception):
    """Base exception for all symbol extraction errors."""

    pass


class ScriptReadError(SymbolsError):
    """Raised when a script file cannot be resolved or read."""

    pass


class GrammarError(SymbolsError):
    """Raised when the built-in declaration grammar cannot be compiled.

    This is a defect in the package itself, never a property of the input.
    """

    pass


class ExtractorConfigError(SymbolsError):
    """Raised when extractor configuration is invalid."""

    pass
