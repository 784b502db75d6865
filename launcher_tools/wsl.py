"""Windows → WSL path translation for MCP command and args values."""

from __future__ import annotations

import re

_DRIVE_PATH_RE = re.compile(r"^([A-Za-z]):[\\/](.*)$", re.DOTALL)


def _translate_one(path: str) -> str | None:
    match = _DRIVE_PATH_RE.match(path)
    if match is None:
        return None
    drive, rest = match.groups()
    rest = rest.replace("\\", "/")
    return f"/mnt/{drive.lower()}/{rest}"


def to_wsl_path(value: str) -> str:
    """Rewrite a Windows drive path (or ``;``-separated list of them) for WSL.

    ``C:\\Program Files\\x`` becomes ``/mnt/c/Program Files/x`` and
    ``C:\\A;D:\\B`` becomes ``/mnt/c/A:/mnt/d/B``.  A list is converted only
    when every segment is a drive path.  Surrounding whitespace is kept and
    anything else is returned unchanged.
    """
    core = value.strip()
    if not core:
        return value
    start = value.index(core)
    leading, trailing = value[:start], value[start + len(core):]

    if ";" in core:
        segments = [_translate_one(s) for s in core.split(";")]
        if any(s is None for s in segments):
            return value
        translated = ":".join(segments)
    else:
        translated = _translate_one(core)
        if translated is None:
            return value
    return f"{leading}{translated}{trailing}"
