"""CLI interface for bs1770."""

import logging
from pathlib import Path
from typing import NoReturn

import typer
from mutagen import MutagenError

from .channels import parse_layout
from .interfaces.cli_handlers import analyze_paths, render_waveform, summary_lines
from .utils.config import load_settings

app = typer.Typer(help="ITU-R BS.1770-4 loudness meter")


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log measurement events to stderr."),
) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command("analyze")
def analyze_command(
    paths: list[Path] = typer.Argument(..., help="Audio files that make up one album."),
    write_tags: bool = typer.Option(
        False, "--write-tags", help="Store track and album loudness as FLAC tags."
    ),
    skip_when_tags_present: bool = typer.Option(
        False,
        "--skip-when-tags-present",
        help="Skip files that already carry both loudness tags, whatever their value.",
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Tracks measured concurrently."),
    layout: str | None = typer.Option(
        None, "--layout", help="Comma separated channel roles, e.g. 'L,R,C,LFE,Ls,Rs'."
    ),
    config: Path | None = typer.Option(None, "--config", help="JSON or YAML settings file."),
) -> None:
    """Measure integrated loudness of each file and of all files together."""

    try:
        settings = load_settings(config)
        overrides = {}
        if jobs is not None:
            overrides["jobs"] = jobs
        if layout is not None:
            labels = [label for label in layout.split(",") if label.strip()]
            parse_layout(labels)
            overrides["layout"] = labels
        if overrides:
            settings = settings.model_copy(update=overrides)

        report, updated = analyze_paths(
            paths,
            settings,
            skip_when_tags_present=skip_when_tags_present,
            write_tags=write_tags,
        )
    except (ValueError, OSError, MutagenError) as error:
        _fail(f"Failed to analyze album: {error}")

    for line in summary_lines(report):
        typer.echo(line)
    if write_tags:
        typer.echo(f"Updated {updated} files.", err=True)


@app.command("waveform")
def waveform_command(
    path: Path = typer.Argument(..., help="Audio file to render."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the SVG here instead of stdout."),
    config: Path | None = typer.Option(None, "--config", help="JSON or YAML settings file."),
) -> None:
    """Render a loudness waveform of a file as SVG."""

    try:
        svg = render_waveform(path, load_settings(config))
    except (ValueError, OSError) as error:
        _fail(f"Failed to render {path}: {error}")

    if output is None:
        typer.echo(svg, nl=False)
    else:
        output.write_text(svg, encoding="utf-8")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
