"""Structural symbol extraction for NWScript sources.

This package reads raw script bytes in narrow or wide encodings and returns a
sorted outline of engine structures, function prototypes and constants,
without compiling the script.
"""

from .config import ExtractorConfig
from .encoding import TextEncoding, decode_buffer, detect_encoding
from .errors import (
    ExtractorConfigError,
    GrammarError,
    ScriptReadError,
    SymbolsError,
)
from .extractor import SymbolExtractor, extract
from .loader import load_script_bytes
from .models import ExtractionResult, ParameterRecord, SymbolKind, SymbolRecord

__all__ = [
    "ExtractionResult",
    "ExtractorConfig",
    "ExtractorConfigError",
    "GrammarError",
    "ParameterRecord",
    "ScriptReadError",
    "SymbolExtractor",
    "SymbolKind",
    "SymbolRecord",
    "SymbolsError",
    "TextEncoding",
    "decode_buffer",
    "detect_encoding",
    "extract",
    "load_script_bytes",
]
