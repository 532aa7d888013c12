"""Member extractors for engine structures, functions and constants.

Each extractor scans the whole script text top to bottom and returns the
captures of every declaration it recognises. A declaration the grammar does
not recognise is skipped without error, and a recognised declaration
consumes its text so that no later match starts inside it.
"""

from typing import TypedDict

from nwscript_symbols.grammar import (
    ParameterCaptures,
    get_grammar,
    mask_unclosed_comments,
    scan_parameter,
    scan_parameter_list,
    scan_value,
    skip_trivia,
)

_STATEMENT_DELIMITER = ";"


class EngineStructureCaptures(TypedDict):
    """Captures of a ``#define ENGINE_STRUCTURE_n name`` line."""

    name: str


class FunctionCaptures(TypedDict):
    """Captures of a function prototype."""

    type: str
    name: str
    parameters_string: str
    parameters: list[ParameterCaptures]


class ConstantCaptures(TypedDict):
    """Captures of an initialised top-level declaration."""

    type: str
    name: str
    value: str


def extract_engine_structures(text: str) -> list[EngineStructureCaptures]:
    """Extract engine structure names declared with ``#define ENGINE_STRUCTURE_n``."""
    return [
        EngineStructureCaptures(name=match.group("name"))
        for match in get_grammar().engine_structure.finditer(text)
    ]


def extract_functions(text: str) -> list[FunctionCaptures]:
    """Extract function prototypes.

    Only declarations terminated by ``;`` are recognised. A function followed
    by a ``{ ... }`` body is a definition and produces nothing.

    Args:
        text: Script text

    Returns:
        Function captures in source order, each with its parameters re-scanned
        from the isolated parameter string

    """
    scan_text = mask_unclosed_comments(text)
    functions: list[FunctionCaptures] = []
    consumed_until = 0

    for match in get_grammar().function_head.finditer(scan_text):
        if match.start() < consumed_until:
            continue

        opening = match.end()
        scanned = scan_parameter_list(scan_text, opening)
        if scanned is None:
            continue
        closing, _ = scanned

        end = skip_trivia(scan_text, closing + 1)
        if not scan_text.startswith(_STATEMENT_DELIMITER, end):
            continue

        parameters_string = text[opening:closing]
        functions.append(
            FunctionCaptures(
                type=match.group("type"),
                name=match.group("name"),
                parameters_string=parameters_string,
                parameters=extract_parameters(parameters_string),
            )
        )
        consumed_until = end + 1

    return functions


def extract_parameters(parameters_string: str) -> list[ParameterCaptures]:
    """Extract the formal parameters from the text between a prototype's parentheses.

    Scanning stops at the first piece of text that is not a parameter, so a
    malformed tail simply yields fewer parameters.

    Args:
        parameters_string: Raw parameter list without the parentheses

    Returns:
        Parameters in declaration order. A parameter without a default value
        has an empty ``default_value``.

    """
    parameters: list[ParameterCaptures] = []
    pos = 0
    while pos < len(parameters_string):
        scanned = scan_parameter(parameters_string, pos)
        if scanned is None:
            break
        pos, parameter = scanned
        parameters.append(parameter)

        if not parameters_string.startswith(",", pos):
            break
        pos += 1

    return parameters


def extract_constants(text: str) -> list[ConstantCaptures]:
    """Extract initialised top-level declarations such as ``int TRUE = 1;``.

    A declaration without an initialiser, or whose initialiser is not a
    single token, token-vector or object, is not a constant.
    """
    scan_text = mask_unclosed_comments(text)
    constants: list[ConstantCaptures] = []
    consumed_until = 0

    for match in get_grammar().constant_head.finditer(scan_text):
        if match.start() < consumed_until:
            continue

        value_start = skip_trivia(scan_text, match.end())
        value_end = scan_value(scan_text, value_start)
        if value_end is None:
            continue

        end = skip_trivia(scan_text, value_end)
        if not scan_text.startswith(_STATEMENT_DELIMITER, end):
            continue

        constants.append(
            ConstantCaptures(
                type=match.group("type"),
                name=match.group("name"),
                value=text[value_start:value_end],
            )
        )
        consumed_until = end + 1

    return constants
