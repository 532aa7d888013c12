"""Assembly of extractor captures into a sorted ExtractionResult."""

from collections.abc import Sequence

from nwscript_symbols.encoding import TextEncoding
from nwscript_symbols.extractors import (
    ConstantCaptures,
    EngineStructureCaptures,
    FunctionCaptures,
)
from nwscript_symbols.models import (
    ExtractionResult,
    ParameterRecord,
    SymbolKind,
    SymbolRecord,
)


def assemble_result(
    engine_structures: Sequence[EngineStructureCaptures],
    functions: Sequence[FunctionCaptures],
    constants: Sequence[ConstantCaptures],
    encoding: TextEncoding = TextEncoding.NARROW,
    charset: str = "latin-1",
) -> ExtractionResult:
    """Merge the three extractor outputs into one outline.

    Members are concatenated as engine structures, functions, constants, then
    stably sorted by name using ordinal comparison. Members sharing a name
    therefore keep that discovery order.

    Args:
        engine_structures: Engine structure captures
        functions: Function captures
        constants: Constant captures
        encoding: Encoding verdict the text was decoded with
        charset: Codec the text was decoded with

    Returns:
        The finished extraction result

    """
    members: list[SymbolRecord] = []

    for structure in engine_structures:
        members.append(
            SymbolRecord(kind=SymbolKind.ENGINE_STRUCTURE, name=structure["name"])
        )

    for function in functions:
        members.append(
            SymbolRecord(
                kind=SymbolKind.FUNCTION,
                name=function["name"],
                type=function["type"],
                parameters=tuple(
                    ParameterRecord(
                        type=parameter["type"],
                        name=parameter["name"],
                        default_value=parameter["default_value"],
                    )
                    for parameter in function["parameters"]
                ),
            )
        )

    for constant in constants:
        members.append(
            SymbolRecord(
                kind=SymbolKind.CONSTANT,
                name=constant["name"],
                type=constant["type"],
                value=constant["value"],
            )
        )

    # list.sort is stable and compares str by code point
    members.sort(key=lambda member: member.name)

    return ExtractionResult(
        members=tuple(members),
        engine_structure_count=len(engine_structures),
        function_count=len(functions),
        constant_count=len(constants),
        encoding=encoding,
        charset=charset,
    )
