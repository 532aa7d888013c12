"""Loading of raw script bytes from disk."""

import logging
from pathlib import Path

from nwscript_symbols.errors import ScriptReadError

logger = logging.getLogger(__name__)


def resolve_script_path(path: Path | str) -> Path:
    """Resolve a script path to the absolute path of its target file.

    Symbolic links are followed. Shell shortcut files are not interpreted.

    Raises:
        ScriptReadError: If the path does not exist or is not a file

    """
    try:
        resolved = Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ScriptReadError(f"Cannot resolve script path {path}: {e}") from e

    if not resolved.is_file():
        raise ScriptReadError(f"Script path is not a file: {resolved}")

    if resolved != Path(path):
        logger.debug(f"Resolved script path {path} to {resolved}")
    return resolved


def load_script_bytes(path: Path | str, max_file_size: int) -> bytes:
    """Read the raw bytes of a script file without decoding them.

    Args:
        path: Script path, possibly a symbolic link
        max_file_size: Largest accepted file size in bytes

    Returns:
        The file contents

    Raises:
        ScriptReadError: If the file cannot be resolved, is too large or
            cannot be read

    """
    resolved = resolve_script_path(path)

    try:
        size = resolved.stat().st_size
        if size > max_file_size:
            raise ScriptReadError(
                f"Script {resolved} is too large ({size} bytes, "
                f"limit {max_file_size})"
            )
        return resolved.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read script {resolved}: {e}")
        raise ScriptReadError(f"Cannot read script {resolved}: {e}") from e
