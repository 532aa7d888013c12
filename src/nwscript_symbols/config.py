"""Configuration for SymbolExtractor."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nwscript_symbols.errors import ExtractorConfigError

# Bytes inspected by the encoding detector
DEFAULT_SAMPLE_SIZE = 128 * 1024 + 4


class ExtractorConfig(BaseModel):
    """Configuration for SymbolExtractor with Pydantic validation.

    Only the encoding sample and the file/batch limits are configurable.
    The declaration grammar itself is fixed and shared by every extractor.
    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
    )

    sample_size: int = Field(
        default=DEFAULT_SAMPLE_SIZE,
        description="Number of leading bytes inspected to detect the encoding",
        gt=0,
    )
    advanced_encoding_detection: bool = Field(
        default=False,
        description="Resolve unrecognised encodings with chardet before "
        "falling back to narrow text",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Refuse to load script files larger than this size in bytes",
        gt=0,
    )
    max_workers: int = Field(
        default=4,
        description="Worker threads used when extracting several files",
        gt=0,
    )

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw properties containing any of:
                - sample_size (int, optional): Encoding sample length.
                - advanced_encoding_detection (bool, optional): Use chardet.
                - max_file_size (int, optional): Maximum file size to load.
                - max_workers (int, optional): Batch thread pool size.

        Returns:
            Validated configuration object

        Raises:
            ExtractorConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ExtractorConfigError(
                f"Invalid symbol extractor configuration: {e}"
            ) from e
