"""Symbol extraction pipeline for NWScript sources."""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from nwscript_symbols.assembler import assemble_result
from nwscript_symbols.config import ExtractorConfig
from nwscript_symbols.encoding import (
    TextEncoding,
    charset_for,
    decode_buffer,
    decode_with_charset_detection,
    detect_encoding,
)
from nwscript_symbols.extractors import (
    extract_constants,
    extract_engine_structures,
    extract_functions,
)
from nwscript_symbols.grammar import get_grammar
from nwscript_symbols.loader import load_script_bytes
from nwscript_symbols.models import ExtractionResult

logger = logging.getLogger(__name__)


class SymbolExtractor:
    """Extracts engine structures, function prototypes and constants from scripts.

    Instances hold only their configuration. The compiled grammar is shared
    process-wide, so one extractor may serve several threads.
    """

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        """Initialise the extractor.

        Args:
            config: Validated extractor configuration (defaults if omitted)

        """
        self._config = config or ExtractorConfig()

    @property
    def config(self) -> ExtractorConfig:
        """Configuration used by this extractor."""
        return self._config

    def extract(self, buffer: bytes) -> ExtractionResult:
        """Extract the outline of a script from its raw bytes.

        Args:
            buffer: Raw script bytes in any supported encoding

        Returns:
            Extraction result with members sorted by name

        """
        encoding = detect_encoding(buffer, self._config.sample_size)
        text, charset = self._decode(buffer, encoding)

        result = assemble_result(
            extract_engine_structures(text),
            extract_functions(text),
            extract_constants(text),
            encoding=encoding,
            charset=charset,
        )

        logger.debug(
            f"Extracted {result.engine_structure_count} engine structures, "
            f"{result.function_count} functions and {result.constant_count} "
            f"constants ({encoding.value}, {charset})"
        )
        return result

    def extract_file(self, path: Path | str) -> ExtractionResult:
        """Load a script file and extract its outline.

        Raises:
            ScriptReadError: If the file cannot be resolved or read

        """
        buffer = load_script_bytes(path, self._config.max_file_size)
        return self.extract(buffer)

    def extract_files(self, paths: Sequence[Path | str]) -> list[ExtractionResult]:
        """Extract several script files concurrently.

        Each file runs through its own independent pipeline on a worker
        thread.

        Args:
            paths: Script paths

        Returns:
            Extraction results in the order of ``paths``

        Raises:
            ScriptReadError: If any file cannot be resolved or read

        """
        # Compile before fanning out so workers only ever read the grammar
        get_grammar()

        with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
            results = list(pool.map(self.extract_file, paths))

        logger.info(f"Extracted outlines from {len(results)} script files")
        return results

    def _decode(self, buffer: bytes, encoding: TextEncoding) -> tuple[str, str]:
        """Normalise the buffer to text and name the codec used for it."""
        if encoding is not TextEncoding.UNKNOWN:
            return decode_buffer(buffer, encoding), charset_for(encoding)

        if self._config.advanced_encoding_detection:
            detected = decode_with_charset_detection(buffer, self._config.sample_size)
            if detected is not None:
                return detected

        logger.warning("Could not determine script encoding, reading as narrow text")
        narrow = TextEncoding.NARROW
        return decode_buffer(buffer, narrow), charset_for(narrow)


def extract(buffer: bytes, config: ExtractorConfig | None = None) -> ExtractionResult:
    """Extract the outline of a script from its raw bytes.

    Args:
        buffer: Raw script bytes in any supported encoding
        config: Optional extractor configuration

    Returns:
        Extraction result with members sorted by name

    """
    return SymbolExtractor(config).extract(buffer)
