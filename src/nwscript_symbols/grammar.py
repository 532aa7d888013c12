"""Declaration grammar for NWScript sources.

The grammar has two layers:

- Declaration boundaries (engine structures, function heads, constant heads)
  are line-anchored regular expressions compiled once per process.
- Values (token, token-vector, object) and parameter lists nest without
  bound, so they are read by a small recursive scanner that starts where a
  boundary pattern stopped.

Every whitespace-equivalent run may contain ``//`` and ``/* */`` comments and
is matched possessively, so a failing match never backtracks through it.
"""

import re
import threading
from dataclasses import dataclass
from typing import ClassVar, TypedDict

from nwscript_symbols.errors import GrammarError

BLOCK_COMMENT = r"/\*[^*]*+\*++(?:[^/*][^*]*+\*++)*+/"
LINE_COMMENT = r"//[^\n]*+"
TRIVIA = rf"(?:\s++|{BLOCK_COMMENT}|{LINE_COMMENT})*+"

# Statement heads that look like "type name(...)"
_CONTROL_KEYWORDS = r"(?:return|if|else|switch)\b"

# Block comments allowed in front of a declaration on its first line
_LEADING_COMMENTS = rf"^(?:{BLOCK_COMMENT}[ \t]*+)*+"

ENGINE_STRUCTURE_PATTERN = (
    r"^\s*+#define\s++ENGINE_STRUCTURE_\d++\s++(?P<name>\w++)"
)
FUNCTION_HEAD_PATTERN = (
    rf"{_LEADING_COMMENTS}"
    rf"(?P<type>(?!{_CONTROL_KEYWORDS})\w++){TRIVIA}"
    rf"(?P<name>\w++){TRIVIA}\("
)
CONSTANT_HEAD_PATTERN = (
    rf"{_LEADING_COMMENTS}"
    rf"(?:const\b{TRIVIA})?"
    rf"(?P<type>\w++){TRIVIA}"
    rf"(?P<name>\w++){TRIVIA}="
)
PARAMETER_HEAD_PATTERN = (
    rf"{TRIVIA}(?:const\b{TRIVIA})?(?P<type>\w++){TRIVIA}(?P<name>\w++){TRIVIA}"
)
TOKEN_PATTERN = r'"(?:\\.|[^"\\])*+"|[\w.\-]++'

# Deeper values are treated as malformed rather than exhausting the stack
MAX_NESTING_DEPTH = 200

_AGGREGATE_CLOSERS = {"[": "]", "{": "}"}


@dataclass(frozen=True)
class Grammar:
    """Compiled declaration grammar, shared read-only by all extractions."""

    engine_structure: re.Pattern[str]
    function_head: re.Pattern[str]
    constant_head: re.Pattern[str]
    parameter_head: re.Pattern[str]
    token: re.Pattern[str]
    trivia: re.Pattern[str]

    _lock: ClassVar[threading.Lock] = threading.Lock()
    _instance: ClassVar["Grammar | None"] = None

    @classmethod
    def get(cls) -> "Grammar":
        """Return the process-wide grammar, compiling it on first use.

        Uses double-checked locking so the patterns are compiled at most
        once, even under concurrent first access.

        Raises:
            GrammarError: If a built-in pattern fails to compile

        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls._compile()
        return cls._instance

    @classmethod
    def _compile(cls) -> "Grammar":
        try:
            return cls(
                engine_structure=re.compile(ENGINE_STRUCTURE_PATTERN, re.MULTILINE),
                function_head=re.compile(FUNCTION_HEAD_PATTERN, re.MULTILINE),
                constant_head=re.compile(CONSTANT_HEAD_PATTERN, re.MULTILINE),
                parameter_head=re.compile(PARAMETER_HEAD_PATTERN),
                token=re.compile(TOKEN_PATTERN),
                trivia=re.compile(TRIVIA),
            )
        except re.error as e:
            raise GrammarError(f"Built-in declaration grammar is invalid: {e}") from e


def get_grammar() -> Grammar:
    """Return the process-wide compiled grammar."""
    return Grammar.get()


def mask_unclosed_comments(text: str) -> str:
    """Blank the ``*`` of every ``/*`` that no later ``*/`` can close.

    Such an opener can never start a block comment, and outside block
    comments the grammar treats ``*`` and NUL alike. The masked text
    therefore yields the same declarations at the same offsets, without
    every attempt that reaches the opener scanning to the end of the text.
    """
    tail_start = text.rfind("*/") + 1
    tail = text[tail_start:]
    if "/*" not in tail:
        return text
    return text[:tail_start] + tail.replace("/*", "/\x00")


class ParameterCaptures(TypedDict):
    """Captured pieces of one formal parameter."""

    type: str
    name: str
    default_value: str


def skip_trivia(text: str, pos: int) -> int:
    """Return the first position at or after ``pos`` that is not whitespace or comment."""
    match = get_grammar().trivia.match(text, pos)
    return match.end() if match else pos


def scan_value(text: str, pos: int, depth: int = 0) -> int | None:
    """Scan a token, token-vector or object starting exactly at ``pos``.

    Args:
        text: Source text
        pos: Position of the first character of the value
        depth: Current nesting depth

    Returns:
        The position just past the value, or None if no value starts here

    """
    if pos >= len(text) or depth > MAX_NESTING_DEPTH:
        return None

    closer = _AGGREGATE_CLOSERS.get(text[pos])
    if closer is not None:
        return _scan_aggregate(text, pos, closer, depth)

    match = get_grammar().token.match(text, pos)
    return match.end() if match else None


def _scan_aggregate(text: str, pos: int, closer: str, depth: int) -> int | None:
    """Scan the elements of a bracket or brace aggregate up to its closer."""
    pos = skip_trivia(text, pos + 1)
    while pos < len(text):
        if text[pos] == closer:
            return pos + 1

        end = scan_value(text, pos, depth + 1)
        if end is None:
            return None

        pos = skip_trivia(text, end)
        if pos < len(text) and text[pos] == ",":
            pos = skip_trivia(text, pos + 1)
    return None


def scan_parameter(text: str, pos: int) -> tuple[int, ParameterCaptures] | None:
    """Scan one formal parameter, including surrounding whitespace and comments.

    Returns:
        Position just past the parameter and its captures, or None if the
        text at ``pos`` is not a parameter

    """
    match = get_grammar().parameter_head.match(text, pos)
    if match is None:
        return None

    default_value = ""
    end = match.end()
    if end < len(text) and text[end] == "=":
        value_start = skip_trivia(text, end + 1)
        value_end = scan_value(text, value_start)
        if value_end is None:
            return None
        default_value = text[value_start:value_end]
        end = skip_trivia(text, value_end)

    return end, ParameterCaptures(
        type=match.group("type"),
        name=match.group("name"),
        default_value=default_value,
    )


def scan_parameter_list(
    text: str, pos: int
) -> tuple[int, list[ParameterCaptures]] | None:
    """Scan a comma separated parameter list up to its closing parenthesis.

    Args:
        text: Source text
        pos: Position just after the opening parenthesis

    Returns:
        Index of the closing parenthesis and the parameters in declaration
        order, or None if the list is malformed or unterminated

    """
    parameters: list[ParameterCaptures] = []

    pos = skip_trivia(text, pos)
    if pos < len(text) and text[pos] == ")":
        return pos, parameters

    while True:
        scanned = scan_parameter(text, pos)
        if scanned is None:
            return None
        pos, parameter = scanned
        parameters.append(parameter)

        if pos >= len(text):
            return None
        if text[pos] == ")":
            return pos, parameters
        if text[pos] != ",":
            return None
        pos += 1
