"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from draft_assist.clients.anthropic_channel import build_service
from draft_assist.config import AppConfig, load_config
from draft_assist.errors import ChannelUnavailable, UserGestureMissing
from draft_assist.models.suggestion import Suggestion, Tone
from draft_assist.pipeline.engine import SuggestionEngine
from draft_assist.pipeline.segmenter import segment as split_sentences

app = typer.Typer(
    name="draft-assist",
    help="Grammar corrections, tone variants and draft polishing for your writing",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_draft(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Draft file not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _make_engine(config: AppConfig) -> SuggestionEngine:
    return SuggestionEngine(build_service(config), config.engine)


async def _with_engine(config: AppConfig, action):
    # Running a command is the user's explicit request for generation.
    async with _make_engine(config) as engine:
        await engine.initialize(user_activated=True)
        return await action(engine)


def _run(config: AppConfig, action, description: str, failure: str):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        try:
            return asyncio.run(_with_engine(config, action))
        except (ChannelUnavailable, UserGestureMissing) as exc:
            progress.stop()
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1)
        except Exception as exc:
            progress.stop()
            logger.debug("%s", failure, exc_info=True)
            console.print(f"[red]{failure}: {exc}[/red]")
            raise typer.Exit(1)


def _render_suggestions(suggestions: list[Suggestion]) -> None:
    if not suggestions:
        console.print("[green]No suggestions. The draft looks good.[/green]")
        return
    table = Table(show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Sentence")
    table.add_column("Correction", style="green")
    table.add_column("Variants", style="cyan")
    for i, s in enumerate(suggestions, 1):
        table.add_row(str(i), s.sentence, s.corrected or "-", "\n".join(s.variants) or "-")
    console.print(table)


@app.command()
def segment(
    draft: Path = typer.Argument(help="Draft text file"),
) -> None:
    """Print the sentences the engine would work on."""
    for i, sentence in enumerate(split_sentences(_read_draft(draft)), 1):
        console.print(f"[dim]{i:>3}[/dim] {sentence}")


@app.command()
def suggest(
    draft: Path = typer.Argument(help="Draft text file"),
    tone: Tone = typer.Option(Tone.NEUTRAL, "--tone", "-t", help="Tone for rewrite variants"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show corrections and tone variants for each sentence of a draft."""
    _setup_logging(verbose)
    config = load_config(config_path)
    sentences = split_sentences(_read_draft(draft))
    if verbose:
        console.print(f"[dim]{len(sentences)} sentences, tone: {tone.value}[/dim]")

    async def action(engine: SuggestionEngine):
        return await engine.get_suggestions(sentences, tone.value)

    suggestions = _run(config, action, "Generating suggestions...", "Suggestion generation failed")
    _render_suggestions(suggestions)


@app.command()
def polish(
    draft: Path = typer.Argument(help="Draft text file"),
    tone: Tone = typer.Option(Tone.NEUTRAL, "--tone", "-t", help="Target tone"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the polished draft here"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Rewrite the whole draft in the chosen tone."""
    _setup_logging(verbose)
    config = load_config(config_path)
    text = _read_draft(draft)

    async def action(engine: SuggestionEngine):
        return await engine.polish_draft(text, tone.value)

    polished = _run(config, action, "Polishing draft...", "Polishing failed")
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(polished, encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")
    else:
        console.print(Panel(polished, title=f"Polished ({tone.value})"))


@app.command()
def status(
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
) -> None:
    """Probe the generation channels and report which are usable."""
    config = load_config(config_path)

    async def action(engine: SuggestionEngine):
        return engine.availability

    availability = _run(config, action, "Probing channels...", "Channel probe failed")
    for name, ok in availability.model_dump().items():
        mark = "[green]available[/green]" if ok else "[red]unavailable[/red]"
        console.print(f"{name:<18} {mark}")


if __name__ == "__main__":
    app()
