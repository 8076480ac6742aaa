"""File helpers shared by the workspace and manifest writers."""

from __future__ import annotations

import json
import os
import re
import stat
from pathlib import Path
from typing import Any

_INDENT_RE = re.compile(r"^([ \t]+)\S", re.MULTILINE)
_SPACED_COLON_RE = re.compile(r'"\s*:\s')


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers never see a partial file.

    The content goes to a sibling temp file which is then renamed over the
    target. A symlinked ``path`` is followed so the link survives, and the
    target's permission bits carry over to the new file. On failure the temp
    file is removed and the error re-raised, leaving the original untouched.
    """
    path = Path(path).resolve()
    temp_file = path.with_name(f".{path.name}.tmp")
    try:
        with open(temp_file, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(temp_file, stat.S_IMODE(path.stat().st_mode))
        temp_file.replace(path)
    except OSError:
        if temp_file.exists():
            temp_file.unlink()
        raise


def detect_indent(text: str) -> str | int | None:
    """Guess the indentation of a JSON document.

    Returns the first indentation found, 2 for an indented-but-empty
    document, or None for single-line JSON.
    """
    if "\n" not in text.strip():
        return None
    match = _INDENT_RE.search(text)
    if not match:
        return 2
    indent = match.group(1)
    return len(indent) if set(indent) == {" "} else indent


def dump_json_like(data: Any, original_text: str) -> str:
    """Serialize ``data`` with the formatting conventions of ``original_text``.

    Key order comes from the dicts themselves. Indentation, trailing newline
    and line endings follow the original file. Single-line JSON keeps its
    compact or spaced separators.
    """
    indent = detect_indent(original_text)
    separators = None
    # Minified input stays minified
    if indent is None and not _SPACED_COLON_RE.search(original_text):
        separators = (",", ":")
    text = json.dumps(data, indent=indent, separators=separators, ensure_ascii=False)
    newline = "\r\n" if "\r\n" in original_text else "\n"
    if newline != "\n":
        text = text.replace("\n", newline)
    if original_text.endswith(("\n", "\r\n")):
        text += newline
    return text
