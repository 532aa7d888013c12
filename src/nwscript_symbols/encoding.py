"""Encoding detection and normalisation of raw script bytes.

Scripts arrive as raw bytes in either a narrow (single byte or UTF-8) or a
wide (UTF-16) representation. Detection looks at a bounded prefix only, and
every verdict is normalised into a single ``str`` so that one extraction
pipeline serves all encodings.
"""

import codecs
import logging
from enum import Enum

import chardet

from nwscript_symbols.config import DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)

# Null density thresholds for unmarked UTF-16 detection
_WIDE_NULL_RATIO = 0.4
_NARROW_NULL_RATIO = 0.1


class TextEncoding(Enum):
    """Encoding verdict for a script buffer."""

    NARROW = "narrow"
    NARROW_WITH_COOKIE = "narrow_with_cookie"
    WIDE_LE = "wide_le"
    WIDE_BE = "wide_be"
    WIDE_LE_NO_MARK = "wide_le_no_mark"
    WIDE_BE_NO_MARK = "wide_be_no_mark"
    UNKNOWN = "unknown"

    @property
    def is_wide(self) -> bool:
        """Whether the verdict denotes two-byte characters."""
        return self in _WIDE_ENCODINGS

    @property
    def is_big_endian(self) -> bool:
        """Whether the verdict denotes big-endian two-byte characters."""
        return self in (TextEncoding.WIDE_BE, TextEncoding.WIDE_BE_NO_MARK)


_WIDE_ENCODINGS = frozenset(
    {
        TextEncoding.WIDE_LE,
        TextEncoding.WIDE_BE,
        TextEncoding.WIDE_LE_NO_MARK,
        TextEncoding.WIDE_BE_NO_MARK,
    }
)


def detect_encoding(
    buffer: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE
) -> TextEncoding:
    """Classify the encoding of a script buffer.

    Only ``buffer[:sample_size]`` is inspected. Detection is heuristic: byte
    order marks first, then null byte density for unmarked UTF-16, then UTF-8
    validity for narrow text.

    Args:
        buffer: Raw script bytes
        sample_size: Maximum number of leading bytes to inspect

    Returns:
        The encoding verdict. ``UNKNOWN`` when the sample holds null bytes
        that fit neither wide byte order.

    """
    sample = buffer[:sample_size]
    if not sample:
        return TextEncoding.NARROW

    if sample.startswith(codecs.BOM_UTF16_BE):
        return TextEncoding.WIDE_BE
    if sample.startswith(codecs.BOM_UTF16_LE):
        return TextEncoding.WIDE_LE
    if sample.startswith(codecs.BOM_UTF8):
        return TextEncoding.NARROW_WITH_COOKIE

    wide = _detect_unmarked_wide(sample)
    if wide is not None:
        return wide

    if b"\x00" in sample:
        return TextEncoding.UNKNOWN

    return _classify_narrow(sample)


def _detect_unmarked_wide(sample: bytes) -> TextEncoding | None:
    """Detect UTF-16 without a byte order mark from null byte parity."""
    if len(sample) < 2:
        return None

    even = sample[0::2]
    odd = sample[1::2]
    even_ratio = even.count(0) / len(even)
    odd_ratio = odd.count(0) / len(odd)

    if odd_ratio >= _WIDE_NULL_RATIO and even_ratio < _NARROW_NULL_RATIO:
        return TextEncoding.WIDE_LE_NO_MARK
    if even_ratio >= _WIDE_NULL_RATIO and odd_ratio < _NARROW_NULL_RATIO:
        return TextEncoding.WIDE_BE_NO_MARK
    return None


def _classify_narrow(sample: bytes) -> TextEncoding:
    """Tell 7-bit, UTF-8 and other 8-bit text apart."""
    if sample.isascii():
        return TextEncoding.NARROW

    # The sample may end in the middle of a multi-byte sequence
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=False)
    except UnicodeDecodeError:
        return TextEncoding.NARROW
    return TextEncoding.NARROW_WITH_COOKIE


def charset_for(encoding: TextEncoding) -> str:
    """Name of the Python codec ``decode_buffer`` uses for a verdict."""
    if encoding.is_wide:
        return "utf-16-be" if encoding.is_big_endian else "utf-16-le"
    if encoding is TextEncoding.NARROW_WITH_COOKIE:
        return "utf-8-sig"
    return "latin-1"


def normalise_line_endings(text: str) -> str:
    """Turn CRLF and bare CR line endings into LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_buffer(buffer: bytes, encoding: TextEncoding) -> str:
    """Normalise a script buffer into text according to its encoding verdict.

    Wide buffers are decoded in the detected byte order. UTF-8 buffers are
    decoded with their mark stripped. Everything else maps bytes one to one
    onto code points, so identifiers survive without any code page
    transcoding. Line endings always come out as ``\\n``.

    Args:
        buffer: Raw script bytes
        encoding: Verdict returned by ``detect_encoding``

    Returns:
        The script text

    """
    charset = charset_for(encoding)

    if encoding.is_wide:
        mark = codecs.BOM_UTF16_BE if encoding.is_big_endian else codecs.BOM_UTF16_LE
        if buffer.startswith(mark):
            buffer = buffer[len(mark) :]
        if len(buffer) % 2:
            buffer = buffer[:-1]

    return normalise_line_endings(buffer.decode(charset, errors="replace"))


def decode_with_charset_detection(
    buffer: bytes, sample_size: int
) -> tuple[str, str] | None:
    """Decode a buffer using the charset chardet guesses from its prefix.

    Args:
        buffer: Raw script bytes
        sample_size: Maximum number of leading bytes handed to chardet

    Returns:
        The decoded text and the charset used, or None if chardet cannot
        name a usable codec

    """
    detected = chardet.detect(buffer[:sample_size])
    charset = detected.get("encoding")
    if not charset:
        return None

    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning(f"chardet proposed an unknown codec: {charset}")
        return None

    logger.debug(
        f"chardet detected {charset} (confidence {detected.get('confidence')})"
    )
    return normalise_line_endings(buffer.decode(charset, errors="replace")), charset
