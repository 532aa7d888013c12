"""Data models for symbol extraction results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from nwscript_symbols.encoding import TextEncoding


class SymbolKind(str, Enum):
    """Category of an extracted declaration."""

    ENGINE_STRUCTURE = "engine_structure"
    FUNCTION = "function"
    CONSTANT = "constant"


class ParameterRecord(BaseModel):
    """A formal parameter of a declared function."""

    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    default_value: str = ""  # token, token-vector or object literal text


class SymbolRecord(BaseModel):
    """A single extracted declaration.

    ``kind`` decides which of ``type``, ``value`` and ``parameters`` carry
    data. The others stay empty rather than absent.
    """

    model_config = ConfigDict(frozen=True)

    kind: SymbolKind
    name: str
    type: str = ""
    value: str = ""
    parameters: tuple[ParameterRecord, ...] = ()


class ExtractionResult(BaseModel):
    """Outline of one script, members sorted by name.

    ``encoding`` is the detector verdict. ``charset`` names the codec the text
    was actually decoded with, which differs from the verdict when an
    unknown encoding was resolved by charset detection.
    """

    model_config = ConfigDict(frozen=True)

    members: tuple[SymbolRecord, ...] = ()
    engine_structure_count: int = 0
    function_count: int = 0
    constant_count: int = 0
    encoding: TextEncoding = TextEncoding.NARROW
    charset: str = "latin-1"

    @property
    def engine_structures(self) -> list[SymbolRecord]:
        """Engine structure members in sorted order."""
        return self._of_kind(SymbolKind.ENGINE_STRUCTURE)

    @property
    def functions(self) -> list[SymbolRecord]:
        """Function members in sorted order."""
        return self._of_kind(SymbolKind.FUNCTION)

    @property
    def constants(self) -> list[SymbolRecord]:
        """Constant members in sorted order."""
        return self._of_kind(SymbolKind.CONSTANT)

    def _of_kind(self, kind: SymbolKind) -> list[SymbolRecord]:
        return [member for member in self.members if member.kind is kind]
