"""Rich terminal renderer — unified and split hunk views with selection marks."""

from __future__ import annotations

from typing import AbstractSet, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from hunkpick.align.engine import align
from hunkpick.diff.models import DiffHunk, DiffLine, FileDiff, LineKey, LineOrigin

_ORIGIN_STYLE = {
    LineOrigin.CONTEXT: "dim",
    LineOrigin.ADDITION: "green",
    LineOrigin.DELETION: "red",
}

_SELECTED_STYLE = {
    LineOrigin.ADDITION: "bold green on grey15",
    LineOrigin.DELETION: "bold red on grey15",
}

_CHECK = "✓"


def _line_style(line: DiffLine, selected: bool) -> str:
    if selected and line.is_change:
        return _SELECTED_STYLE[line.origin]
    return _ORIGIN_STYLE[line.origin]


def _number(value: Optional[int]) -> Text:
    return Text("" if value is None else str(value), style="dim")


def _check_cell(line: Optional[DiffLine], selected: bool) -> Text:
    if line is None or not line.is_change:
        return Text("")
    return Text(_CHECK if selected else "·", style="bold cyan" if selected else "dim")


def _hunk_table(hunk: DiffHunk, hunk_index: int) -> Table:
    return Table(
        title=Text(f"[{hunk_index}] {hunk.header}", style="bold magenta"),
        title_justify="left",
        show_header=False,
        show_edge=False,
        box=None,
        pad_edge=False,
        expand=True,
    )


def _file_title(console: Console, diff: FileDiff) -> None:
    label = diff.path
    if diff.old_path:
        label = f"{diff.old_path} → {diff.path}"
    console.print(Text(f"{label}  ({diff.status.value})", style="bold"))
    if diff.binary:
        console.print("[dim]Binary file — no line selection available.[/dim]")
    elif not diff.hunks:
        console.print("[dim]No changes.[/dim]")


def render_unified(
    diff: FileDiff,
    selection: AbstractSet[LineKey],
    *,
    console: Optional[Console] = None,
    show_line_numbers: bool = True,
) -> None:
    """Print *diff* one line per row, marking selected change lines."""
    console = console or Console()
    _file_title(console, diff)

    for hunk_index, hunk in enumerate(diff.hunks):
        table = _hunk_table(hunk, hunk_index)
        table.add_column("idx", justify="right", width=4, style="dim")
        table.add_column("sel", width=1)
        if show_line_numbers:
            table.add_column("old", justify="right", width=5)
            table.add_column("new", justify="right", width=5)
        table.add_column("text", ratio=1, overflow="fold")

        for line_index, line in enumerate(hunk.lines):
            selected = LineKey(hunk_index, line_index) in selection
            cells = [Text(str(line_index)), _check_cell(line, selected)]
            if show_line_numbers:
                cells += [_number(line.old_line_no), _number(line.new_line_no)]
            cells.append(Text(line.render(), style=_line_style(line, selected)))
            table.add_row(*cells)

        console.print()
        console.print(table)


def render_split(
    diff: FileDiff,
    selection: AbstractSet[LineKey],
    *,
    console: Optional[Console] = None,
    show_line_numbers: bool = True,
) -> None:
    """Print *diff* in two columns, old on the left and new on the right."""
    console = console or Console()
    _file_title(console, diff)

    for hunk_index, hunk in enumerate(diff.hunks):
        table = _hunk_table(hunk, hunk_index)
        for side in ("old", "new"):
            table.add_column(f"{side}-idx", justify="right", width=4, style="dim")
            table.add_column(f"{side}-sel", width=1)
            if show_line_numbers:
                table.add_column(f"{side}-no", justify="right", width=5)
            table.add_column(f"{side}-text", ratio=1, overflow="fold")

        for row in align(hunk):
            cells = []
            for line, index, number in (
                (row.left, row.left_index, row.left.old_line_no if row.left else None),
                (row.right, row.right_index, row.right.new_line_no if row.right else None),
            ):
                selected = index is not None and LineKey(hunk_index, index) in selection
                cells.append(Text("" if index is None else str(index)))
                cells.append(_check_cell(line, selected))
                if show_line_numbers:
                    cells.append(_number(number))
                if line is None:
                    cells.append(Text(""))
                else:
                    cells.append(Text(line.render(), style=_line_style(line, selected)))
            table.add_row(*cells)

        console.print()
        console.print(table)

