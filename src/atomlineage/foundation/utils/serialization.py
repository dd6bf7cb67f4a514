"""JSON file I/O with crash tolerance.

Writes go through a temp file in the destination directory followed by
``os.replace`` so readers never observe a half-written document.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_json(obj: dict[str, Any], path: Path, *, indent: int = 2) -> None:
    """Write JSON file atomically.

    Unlike a best-effort dump, failures propagate: the caller owns retry
    policy for storage errors.

    Args:
        obj: Object to serialize
        path: Destination path (parent directory must exist)
        indent: JSON indentation (default: 2)

    Raises:
        OSError: If the file cannot be written
        TypeError: If ``obj`` is not JSON-serializable
    """
    content = json.dumps(obj, indent=indent)
    fd, tmp_path = tempfile.mkstemp(
        suffix=".tmp",
        prefix=path.stem + "_",
        dir=path.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)  # Atomic on POSIX
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def read_json(path: Path) -> dict[str, Any] | None:
    """Read a JSON document, returning None when the file is absent.

    Raises:
        json.JSONDecodeError: If the file exists but is not valid JSON
        OSError: For any other read failure
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return json.loads(text)
