"""File reference text typed into a running assistant session.

A reference is the file path relative to the project root, optionally
followed by the selected line range: ``src/app.py:3-7 ``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from .core import LauncherTool, ToolContext, logger


@dataclass(frozen=True)
class LineRange:
    start: int
    end: int | None = None


@dataclass(frozen=True)
class InsertPayload:
    relative_path: str
    line_range: LineRange | None = None


def format_insert_text(payload: InsertPayload) -> str:
    text = payload.relative_path
    if payload.line_range is not None:
        text += f":{payload.line_range.start}"
        end = payload.line_range.end
        if end is not None and end != payload.line_range.start:
            text += f"-{end}"
    return text + " "


def relative_to_root(file_path: str, project_root: str | None) -> str:
    """Return *file_path* relative to *project_root* when it lies inside it."""
    if not project_root:
        return file_path
    try:
        base = Path(os.path.normpath(project_root))
        target = Path(os.path.normpath(file_path))
        if target.is_relative_to(base):
            return str(target.relative_to(base))
    except ValueError as exc:
        logger.warning(f"Failed to compute relative path for {file_path}: {exc}")
    return file_path


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset)


def line_range_from_offsets(text: str, start: int, end: int) -> LineRange | None:
    """Convert a character selection into 1-based line numbers.

    A selection that ends right after a newline does not include the next
    line.  Single-line selections have ``end = None``.
    """
    if start < 0 or end < start or start > len(text):
        return None
    end = min(end, len(text))

    if end <= start:
        adjusted_end = start
    elif end == len(text):
        adjusted_end = end
    else:
        adjusted_end = end - 1

    start_line = _line_of(text, start) + 1
    end_line = _line_of(text, max(adjusted_end, start)) + 1
    return LineRange(start_line, end_line if end_line > start_line else None)


def _selection_lines(path: Path, start: int, end: int) -> LineRange | None:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"Cannot read {path} to resolve the selection: {exc}")
        raise SystemExit(1) from exc
    line_range = line_range_from_offsets(text, start, end)
    if line_range is None:
        logger.warning(f"Ignoring selection {start}-{end}: outside {path.name}")
    return line_range


def resolve_insert_payload(
    file_path: str,
    project_root: str | None = None,
    start_line: int | None = None,
    end_line: int | None = None,
) -> InsertPayload | None:
    if not file_path or not file_path.strip():
        return None
    line_range = None
    if start_line is not None and start_line > 0:
        end = end_line if end_line is not None and end_line > start_line else None
        line_range = LineRange(start_line, end)
    return InsertPayload(relative_to_root(file_path, project_root), line_range)


class InsertTool(LauncherTool):
    name = "insert"
    help = "Print the file reference text for a running assistant session"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("file")(cmd)
        cmd = click.option("--start-line", type=int, default=None, help="First selected line (1-based)")(cmd)
        cmd = click.option("--end-line", type=int, default=None, help="Last selected line (1-based)")(cmd)
        cmd = click.option("--start-offset", type=int, default=None, help="Selection start as a character offset")(cmd)
        cmd = click.option("--end-offset", type=int, default=None, help="Selection end as a character offset")(cmd)
        cmd = click.option("--project-root", default=None, help="Root the path is made relative to")(cmd)
        return cmd

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        root = args.get("project_root") or str(ctx.workspace_root)
        file_path = str(args.get("file") or "")
        start_line, end_line = args.get("start_line"), args.get("end_line")

        start_offset = args.get("start_offset")
        if file_path and start_offset is not None:
            end_offset = args.get("end_offset")
            selection = _selection_lines(
                Path(file_path), start_offset, start_offset if end_offset is None else end_offset,
            )
            if selection is not None:
                start_line, end_line = selection.start, selection.end

        payload = resolve_insert_payload(
            file_path,
            project_root=root,
            start_line=start_line,
            end_line=end_line,
        )
        if payload is None:
            logger.error("No file to reference.")
            raise SystemExit(1)
        print(format_insert_text(payload))
