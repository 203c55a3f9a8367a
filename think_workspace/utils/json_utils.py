"""
JSON utilities for durable session records.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_record(path: Path) -> Any:
    """Read and decode a JSON record.

    Raises:
        FileNotFoundError: If the record does not exist
        OSError: On any other read failure
        ValueError: If the content is not valid JSON
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_record(path: Path, data: Any) -> None:
    """Write a JSON record atomically.

    The payload goes to a temporary file next to ``path`` which then replaces it,
    so a reader sees either the previous record or the new one.
    """
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode='w',
                                         encoding='utf-8',
                                         delete=False,
                                         dir=str(path.parent),
                                         prefix=path.name + '.tmp.') as f:
            tmp_path = Path(f.name)
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
