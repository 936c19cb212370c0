"""hunkpick CLI — Typer application with show, patch, stage, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from hunkpick import __version__

app = typer.Typer(
    name="hunkpick",
    help="Stage individual lines of a diff.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
logger = logging.getLogger("hunkpick.cli")

_SELECT_HELP = "Lines to select: H (whole hunk), H:L or H:L-M. Repeatable, comma-separated."


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from hunkpick.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _config_root() -> Path:
    """Repo root when inside a repository, else the working directory."""
    from hunkpick.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError:
        return Path.cwd()


def _load_cfg(config: Optional[str], root: Path):
    from hunkpick.config.loader import ConfigError, load_config

    try:
        return load_config(root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _repo_relative(repo_root: Path, path: str) -> str:
    """Express *path* (relative to the cwd) relative to the repo root."""
    absolute = (Path.cwd() / path).resolve()
    try:
        return absolute.relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] {path} is outside the repository")
        raise typer.Exit(code=2)


def _read_diff_text(diff_file: str) -> str:
    if diff_file == "-":
        return sys.stdin.read()
    try:
        return Path(diff_file).read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {diff_file}: {exc}")
        raise typer.Exit(code=2) from exc


def _load_diff(path: str, diff_file: Optional[str], cfg, repo_root: Optional[Path]):
    """Return the FileDiff for *path*, from *diff_file* or from git.

    Returns None when the file has no unstaged changes.
    """
    from hunkpick.diff.diff_parser import DiffParseError, parse_file_diff
    from hunkpick.git.adapter import GitError, get_worktree_diff

    if diff_file is not None:
        diff_text = _read_diff_text(diff_file)
    else:
        assert repo_root is not None
        try:
            diff_text = get_worktree_diff(
                repo_root, path, context_lines=cfg.diff.context_lines
            )
        except GitError as exc:
            console.print(f"[bold red]Git error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

    if not diff_text.strip():
        return None

    try:
        return parse_file_diff(diff_text, path)
    except DiffParseError as exc:
        console.print(f"[bold red]Diff error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _build_selection(diff, select: Optional[List[str]], selection_file: Optional[str], select_all: bool):
    """Build the shell-side LineSelection from CLI flags, exit 2 on bad input."""
    from hunkpick.selection import LineSelection, SelectionError, load_selection_file, parse_selection_tokens

    selection = LineSelection(diff)
    try:
        keys = parse_selection_tokens(select or [], diff)
        if selection_file:
            keys |= load_selection_file(Path(selection_file), diff)
    except SelectionError as exc:
        console.print(f"[bold red]Selection error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if select_all:
        selection.select_all()
    selection.update(keys)

    ignored = len(keys) - len([k for k in keys if k in selection])
    if ignored:
        logger.info("Ignored %d selection entries that are not change lines", ignored)
    return selection


def _synthesize_or_exit(diff, selection, cfg) -> str:
    from hunkpick.patch.synthesizer import PatchError, synthesize

    try:
        return synthesize(diff, selection.snapshot(), on_bad_header=cfg.patch.on_bad_header)
    except PatchError as exc:
        console.print(f"[bold red]Patch error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    path: str = typer.Argument(..., help="File to show, relative to the current directory"),
    split: Optional[bool] = typer.Option(None, "--split/--unified", help="Two-column or one-column view"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help=_SELECT_HELP),
    selection_file: Optional[str] = typer.Option(None, "--selection-file", help="YAML selection file"),
    diff_file: Optional[str] = typer.Option(None, "--diff-file", help="Read the diff from a file ('-' for stdin)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .hunkpick.toml"),
) -> None:
    """Show a file's unstaged diff with line indices and selection marks."""
    from hunkpick.output import json_report, terminal

    repo_root = _resolve_repo_root() if diff_file is None else None
    cfg = _load_cfg(config, repo_root or _config_root())
    if repo_root is not None:
        path = _repo_relative(repo_root, path)

    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    split_view = split if split is not None else cfg.view.mode == "split"

    diff = _load_diff(path, diff_file, cfg, repo_root)
    if diff is None:
        console.print(f"[dim]No unstaged changes in {path}.[/dim]")
        raise typer.Exit(code=0)

    selection = _build_selection(diff, select, selection_file, False)

    if cfg.output.format == "json":
        patch_text = _synthesize_or_exit(diff, selection, cfg) if len(selection) else None
        print(json_report.render(diff, selection.snapshot(), split=split_view, patch=patch_text))
    elif split_view:
        terminal.render_split(
            diff, selection.snapshot(), show_line_numbers=cfg.view.show_line_numbers
        )
    else:
        terminal.render_unified(
            diff, selection.snapshot(), show_line_numbers=cfg.view.show_line_numbers
        )


# ── patch ─────────────────────────────────────────────────────────────────────


@app.command()
def patch(
    path: str = typer.Argument(..., help="File to build the patch for"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help=_SELECT_HELP),
    selection_file: Optional[str] = typer.Option(None, "--selection-file", help="YAML selection file"),
    select_all: bool = typer.Option(False, "--all", help="Select every change line"),
    diff_file: Optional[str] = typer.Option(None, "--diff-file", help="Read the diff from a file ('-' for stdin)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the patch to a file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .hunkpick.toml"),
) -> None:
    """Print the staging patch for the selected lines without applying it."""
    from hunkpick.patch.synthesizer import count_hunks, is_empty_patch

    repo_root = _resolve_repo_root() if diff_file is None else None
    cfg = _load_cfg(config, repo_root or _config_root())
    if repo_root is not None:
        path = _repo_relative(repo_root, path)

    diff = _load_diff(path, diff_file, cfg, repo_root)
    if diff is None:
        console.print(f"[dim]No unstaged changes in {path}.[/dim]")
        raise typer.Exit(code=0)

    selection = _build_selection(diff, select, selection_file, select_all)
    patch_text = _synthesize_or_exit(diff, selection, cfg)

    if is_empty_patch(patch_text):
        console.print("[dim]Nothing selected — no patch produced.[/dim]")
        raise typer.Exit(code=0)

    if output:
        Path(output).write_text(patch_text, encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {count_hunks(patch_text)} hunk(s) to {output}")
    else:
        print(patch_text, end="")


# ── stage ─────────────────────────────────────────────────────────────────────


@app.command()
def stage(
    path: str = typer.Argument(..., help="File whose selected lines are staged"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help=_SELECT_HELP),
    selection_file: Optional[str] = typer.Option(None, "--selection-file", help="YAML selection file"),
    select_all: bool = typer.Option(False, "--all", help="Select every change line"),
    check: bool = typer.Option(False, "--check", help="Only check that the patch applies"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .hunkpick.toml"),
) -> None:
    """Stage the selected lines of PATH into the index."""
    from hunkpick.git.adapter import GitError, apply_patch_to_index
    from hunkpick.patch.synthesizer import count_hunks, is_empty_patch

    repo_root = _resolve_repo_root()
    cfg = _load_cfg(config, repo_root)
    path = _repo_relative(repo_root, path)

    diff = _load_diff(path, None, cfg, repo_root)
    if diff is None:
        console.print(f"[dim]No unstaged changes in {path}.[/dim]")
        raise typer.Exit(code=0)

    selection = _build_selection(diff, select, selection_file, select_all)
    patch_text = _synthesize_or_exit(diff, selection, cfg)

    if is_empty_patch(patch_text):
        console.print("[dim]Nothing selected — index left unchanged.[/dim]")
        raise typer.Exit(code=0)

    logger.debug("Applying patch:\n%s", patch_text)
    try:
        apply_patch_to_index(
            repo_root,
            patch_text,
            check_only=check,
            unidiff_zero=cfg.diff.context_lines == 0,
        )
    except GitError as exc:
        console.print(f"[bold red]Patch rejected:[/bold red] {exc}")
        console.print("[dim]The file may have changed; run 'hunkpick show' again.[/dim]")
        raise typer.Exit(code=1) from exc

    hunks = count_hunks(patch_text)
    if check:
        console.print(f"[green]✓[/green] Patch applies cleanly ({hunks} hunk(s), {len(selection)} line(s))")
        raise typer.Exit(code=0)

    # The old selection no longer matches the file; read the diff again
    remaining = _load_diff(path, None, cfg, repo_root)
    left = len(remaining.hunks) if remaining is not None else 0
    console.print(
        f"[green]✓[/green] Staged {hunks} hunk(s) of {path}; {left} unstaged hunk(s) left"
    )


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .hunkpick.toml in the repo root."""
    from hunkpick.config.defaults import DEFAULT_TOML
    from hunkpick.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"hunkpick {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """hunkpick — stage selected lines of a diff."""
    from hunkpick.logs import setup_logging

    setup_logging(verbose=verbose, debug=debug)
