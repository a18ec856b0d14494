"""CLI entry point using Click."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from oar import __version__
from oar.models.config import Config, ConversionRequest, SearchOptions
from oar.models.search import ConversionOutcome
from oar.utils.errors import OarError
from oar.utils.logging import setup_logging

console = Console()
logger = logging.getLogger("oar.cli")


def print_probe(event) -> None:
    """Print one search probe as it completes."""
    from oar.search.engine import ProbeEvent

    if not isinstance(event, ProbeEvent) or event.point is None:
        return

    label = f"#{event.iteration}" if event.phase == "estimate" else event.phase
    line = (
        f"[dim]{label:>8}[/dim]  quality {event.point.quality:.6f}  "
        f"{event.point.bitrate / 1000:.1f} kbps"
    )
    if event.bracket_width is not None:
        line += f"  [dim](bracket {event.bracket_width:.2e})[/dim]"
    console.print(line)


def print_summary(outcome: ConversionOutcome) -> None:
    """Render the conversion result as a table."""
    search = outcome.search

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Input", escape(str(outcome.input.path)))
    table.add_row("Input bitrate", f"{outcome.input.bitrate_bps / 1000:.1f} kbps")
    table.add_row("Target bitrate", f"{outcome.target_bitrate / 1000:.1f} kbps")
    table.add_row("Quality", f"{search.quality:.6f}")
    table.add_row("Output bitrate", f"{search.bitrate / 1000:.1f} kbps")
    table.add_row("Bracket width", f"{search.bracket_width:.2e}")
    table.add_row("Iterations", str(search.iterations))
    if search.settled:
        table.add_row("Settled", "re-encoded at the under-target endpoint")
    table.add_row("Output", escape(str(outcome.output_path)))

    console.print(table)


@click.command()
@click.argument(
    "input_path",
    type=click.Path(path_type=Path),
)
@click.option(
    "--max-bitrate",
    "-b",
    type=click.IntRange(min=1),
    default=208000,
    show_default=True,
    help="Maximum allowed bitrate in bps.",
)
@click.option(
    "--max-quality-difference",
    "-q",
    type=click.FloatRange(min=0, min_open=True),
    default=0.000001,
    show_default=True,
    help="Maximum allowed width of the quality bracket.",
)
@click.option(
    "--output-path",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("output.ogg"),
    show_default=True,
    help="Output audio file path.",
)
@click.option(
    "--max-iterations",
    type=click.IntRange(min=1),
    default=None,
    help="Fail if the search has not converged after this many estimates.",
)
@click.option(
    "--clamp",
    is_flag=True,
    help="Keep quality estimates inside the scan bounds.",
)
@click.option(
    "--plain-secant",
    is_flag=True,
    help="Use unmodified false position (no stall correction or settling).",
)
@click.option(
    "--codec",
    default=None,
    help="Audio encoder for FFmpeg (default: chosen from the output suffix).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a detailed log to this file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show progress logging on stderr.",
)
@click.version_option(version=__version__)
def main(
    input_path: Path,
    max_bitrate: int,
    max_quality_difference: float,
    output_path: Path,
    max_iterations: int | None,
    clamp: bool,
    plain_secant: bool,
    codec: str | None,
    log_file: Path | None,
    verbose: bool,
):
    """
    Convert INPUT_PATH at the highest encoder quality whose bitrate stays
    within the maximum.

    The quality is found by repeatedly encoding and measuring, narrowing a
    bracket on the encoder's quality scale until it is narrower than the
    allowed difference.
    """
    try:
        config = Config()
        if codec:
            config = config.model_copy(update={"audio_codec": codec})
    except ValidationError as e:
        console.print(f"[red]Error: invalid environment configuration[/red]\n{escape(str(e))}")
        sys.exit(1)

    try:
        setup_logging(config.log_level, log_file, verbose=verbose)
    except OarError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    from oar.converter.encoder import check_ffmpeg
    from oar.converter.pipeline import convert

    if not check_ffmpeg(config):
        console.print("[red]Error: FFmpeg not found. Please install FFmpeg.[/red]")
        sys.exit(1)

    request = ConversionRequest(
        input_path=input_path,
        max_bitrate=max_bitrate,
        max_quality_delta=max_quality_difference,
        output_path=output_path,
    )
    options = SearchOptions(
        max_iterations=max_iterations,
        clamp=clamp,
        stall_correction=not plain_secant,
        settle_under_target=not plain_secant,
    )

    console.print(f"[blue]Input:[/blue] {escape(str(input_path))}")
    console.print(f"[blue]Target:[/blue] {max_bitrate / 1000:.1f} kbps")

    try:
        outcome = convert(request, config, options, event_callback=print_probe)
    except OarError as e:
        logger.debug("Conversion failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    print_summary(outcome)
    console.print("[green]Done![/green]")


if __name__ == "__main__":
    main()
