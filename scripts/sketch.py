#!/usr/bin/env python3
"""
Sketch Sync CLI

Keeps .sketch files reviewable in git by syncing them with an unpacked,
diff-friendly directory, rendered exports and a README image index.

Commands:
    import   - Copy a sketch file into a new git-ready sketch directory and stage it
    stage    - Re-sync an existing sketch directory after the sketch file changed
    generate - Rebuild the sketch file from the unpacked tree

Examples:\n

    sketch.py import --src=~/Desktop/button.sketch --target=designs   # New sketch dir

    sketch.py stage --src=designs/button/button.sketch                 # After editing

    sketch.py generate --src=designs/button                            # After a merge
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from gitsketch.config import GitSketchConfig, load_config
from gitsketch.contexts.syncing import generate_sketch, import_sketch, stage_sketch
from gitsketch.contexts.syncing.logger import setup_sync_logger
from gitsketch.exceptions import GitSketchError
from gitsketch.utils.timestamp import now

load_dotenv()
PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", ".")).resolve()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="gitsketch YAML config (default: $GITSKETCH_CONFIG or config/gitsketch.yaml)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug output on the console"),
]
ForceOption = Annotated[
    bool,
    typer.Option("--force", "-f", help="Continue past layout warnings"),
]


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(path.relative_to(PROJECT_ROOT))
    except ValueError:
        return str(path)


def _fail(message: str, error: Exception) -> None:
    typer.secho(f"\n✗ {message}", fg=typer.colors.RED, bold=True, err=True)
    typer.secho(f"  {error}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _start(config_path: Optional[Path], verbose: bool) -> GitSketchConfig:
    """Load configuration and open this run's log file."""
    try:
        config = load_config(config_path)
    except GitSketchError as e:
        _fail("Could not load configuration", e)

    log_file = setup_sync_logger(LOGS_PATH / f"sketch_{now()}", config, verbose=verbose)
    typer.echo(f"  Log: {display_path(log_file.resolve())}")
    return config


app = typer.Typer(
    help="Sync Sketch files with a git-friendly unpacked directory",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("import")
def import_command(
    src: Annotated[Path, typer.Option("--src", help="Sketch file to import")],
    target: Annotated[
        Path, typer.Option("--target", help="Directory that will contain the sketch directory")
    ],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
    force: ForceOption = False,
):
    """
    Import a sketch file into a git-ready sketch directory.

    Creates <target>/<name>/<name>.sketch and stages its unpacked tree,
    exports and README.

    Examples:\n

        $ sketch.py import --src=~/Desktop/button.sketch --target=designs
    """
    typer.secho(f"\nImporting: {src}", fg=typer.colors.BLUE, bold=True)
    config = _start(config_path, verbose)

    try:
        result = import_sketch(src, target, config, force=force)
    except (GitSketchError, OSError) as e:
        _fail("Failed importing sketch file", e)

    typer.secho("\n✓ Sketch file imported successfully", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Sketch: {display_path(result.sketch_path)}")
    typer.echo(f"  Exported: {len(result.exported)} artifacts\n")


@app.command("stage")
def stage_command(
    src: Annotated[Path, typer.Option("--src", help="Sketch file inside its sketch directory")],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
    force: ForceOption = False,
):
    """
    Stage changes made to a sketch file inside a git-ready sketch directory.

    Examples:\n

        $ sketch.py stage --src=designs/button/button.sketch

        $ sketch.py stage --src=designs/button/button.sketch --verbose
    """
    typer.secho(f"\nStaging: {src}", fg=typer.colors.BLUE, bold=True)
    config = _start(config_path, verbose)

    try:
        result = stage_sketch(src, config, force=force)
    except (GitSketchError, OSError) as e:
        _fail("Failed staging sketch file", e)

    typer.secho("\n✓ Sketch file staged successfully", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Exported: {len(result.exported)} artifacts")
    if result.readme_path:
        typer.echo(f"  README: {display_path(result.readme_path)}")
    typer.echo("")


@app.command("generate")
def generate_command(
    src: Annotated[Path, typer.Option("--src", help="Git-ready sketch directory")],
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Generate a sketch file from a git-ready sketch directory.

    Examples:\n

        $ sketch.py generate --src=designs/button
    """
    typer.secho(f"\nGenerating: {src}", fg=typer.colors.BLUE, bold=True)
    config = _start(config_path, verbose)

    try:
        sketch_path = generate_sketch(src, config)
    except (GitSketchError, OSError) as e:
        _fail("Failed generating sketch file", e)

    typer.secho("\n✓ Sketch file generated successfully", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Sketch: {display_path(sketch_path)}\n")


if __name__ == "__main__":
    app()
