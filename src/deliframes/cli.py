"""deliframes CLI - blank every AVI key frame but the first."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from deliframes import __version__
from deliframes.config.loader import build_config
from deliframes.config.schema import PatchConfig
from deliframes.core.patcher import PatchTarget

USAGE = """usage: deliframes [OPTIONS] FILE
       deliframes [OPTIONS] SOURCE TARGET

deliframes removes AVI key frames from FILE in place, or from a copy of
SOURCE written to TARGET."""

app = typer.Typer(
    name="deliframes",
    help="Blank every key frame but the first in an AVI file.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"deliframes version {__version__}")
        raise typer.Exit()


def fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    return typer.Exit(1)


def print_targets(targets: list[PatchTarget]) -> None:
    for target in targets:
        state = " (already patched)" if target.already_patched else ""
        console.print(
            f"  {target.entry.id.decode('latin-1')} index offset {target.entry.offset} "
            f"-> {target.position} [{target.convention}]{state}",
            markup=False,
        )


def show_info(path: Path, config: PatchConfig) -> None:
    from deliframes.core.iframe import get_keyframe_info

    info = get_keyframe_info(path, config)
    console.print(f"[bold]Key frame info for {escape(path.name)}[/bold]")
    console.print(f"  movi offset: {info['movi_offset']}")
    console.print(f"  Index entries: {info['index_entries']}")
    console.print(f"  Key frames: {info['keyframe_count']}")
    console.print(f"  Targets: {info['target_count']} ({info['already_patched']} already patched)")

    if not info["targets"]:
        return

    table = Table(title="Targets")
    table.add_column("Chunk", style="cyan")
    table.add_column("Index offset", justify="right")
    table.add_column("Position", justify="right")
    table.add_column("Convention")
    table.add_column("Patched")

    for target in info["targets"]:
        table.add_row(
            escape(target.entry.id.decode("latin-1")),
            str(target.entry.offset),
            str(target.position),
            target.convention,
            "yes" if target.already_patched else "no",
        )

    console.print(table)


@app.command()
def main(
    paths: Annotated[
        Optional[list[Path]],
        typer.Argument(help="FILE to patch in place, or SOURCE and TARGET", show_default=False),
    ] = None,
    config_path: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="YAML patch settings")
    ] = None,
    keep_first: Annotated[
        Optional[bool],
        typer.Option(
            "--keep-first/--no-keep-first",
            help="Keep first key frame (without it the output may not decode at all)",
            show_default=False,
        ),
    ] = None,
    offsets: Annotated[
        Optional[str],
        typer.Option("--offsets", help="Index offset convention: auto, absolute or relative"),
    ] = None,
    atomic: Annotated[
        bool, typer.Option("--atomic", help="Patch a temporary copy and rename it over FILE")
    ] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would happen")] = False,
    info: Annotated[bool, typer.Option("--info", help="Show key frame info only")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
):
    """Blank every key frame but the first in an AVI file.

    Each targeted chunk has its FOURCC replaced with JUNK, so decoders skip
    it and keep predicting from the previous picture.
    """
    paths = paths or []
    if len(paths) not in (1, 2):
        err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(1)

    source = paths[0]
    target = paths[1] if len(paths) == 2 else None

    if atomic and target is not None:
        raise fail("--atomic only applies when patching a single file in place")

    try:
        config = build_config(
            config_path,
            {"keep_first": keep_first, "offset_mode": offsets},
        )
    except (ValueError, OSError) as e:
        raise fail(str(e))

    try:
        if info:
            show_info(source, config)
            return

        if dry_run:
            from deliframes.core.iframe import get_keyframe_info

            info_data = get_keyframe_info(source, config)
            console.print(f"Would patch {info_data['target_count']} key frames in {escape(str(target or source))}")
            console.print(f"  Key frames: {info_data['keyframe_count']}")
            console.print(f"  Keep first: {config.keep_first}")
            console.print(f"  Replacement: {escape(config.replacement)}")
            if target is not None:
                console.print(f"  Copy from: {escape(str(source))}")
            if verbose:
                print_targets(info_data["targets"])
            return

        from deliframes.core.iframe import (
            copy_and_remove_keyframes,
            remove_keyframes,
            remove_keyframes_atomic,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Removing key frames...", total=None)
            if target is not None:
                patched = copy_and_remove_keyframes(source, target, config)
            elif atomic:
                patched = remove_keyframes_atomic(source, config)
            else:
                patched = remove_keyframes(source, config)
    except (ValueError, OSError) as e:
        raise fail(str(e))

    if verbose:
        print_targets(patched)

    already = sum(1 for t in patched if t.already_patched)
    summary = f"Patched {len(patched) - already} key frames"
    if already:
        summary += f" ({already} already patched)"
    console.print(f"[green]{summary}:[/green] {escape(str(target or source))}")


if __name__ == "__main__":
    app()
