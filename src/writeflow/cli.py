"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from writeflow.cache.suggestion_cache import SuggestionCache
from writeflow.clients.llm_client import LLMClient
from writeflow.config import AppConfig, load_config
from writeflow.logging_utils import setup_logging
from writeflow.models.notice import Notice
from writeflow.models.request import AnalysisRequest
from writeflow.models.stats import compute_writing_stats
from writeflow.models.suggestion import Suggestion
from writeflow.pipeline.editor_session import EditorSession
from writeflow.pipeline.text_checker import TextChecker
from writeflow.reconcile.validator import validate
from writeflow.store.suggestion_store import SuggestionStore

app = typer.Typer(
    name="writeflow",
    help="AI writing assistant: grammar, spelling, punctuation and style suggestions",
    no_args_is_help=True,
)
console = Console()

CATEGORY_COLORS = {
    "grammar": "red",
    "spelling": "magenta",
    "punctuation": "yellow",
    "style": "cyan",
}


def _read_text(file: Path) -> str:
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    return file.read_text(encoding="utf-8")


def _print_notice(notice: Notice) -> None:
    color = "red" if notice.is_error else "green"
    console.print(f"[{color}]{notice.title}[/{color}]: {notice.description}")


def _analyze(
    text: str,
    document_id: str,
    config: AppConfig,
    use_cache: bool,
) -> list[Suggestion]:
    """Fetch suggestions for ``text``, from the cache when the snapshot is known."""
    cache = None
    if use_cache and config.cache.enabled:
        cache = SuggestionCache(db_path=config.cache.resolved_db_path)
        cached = cache.get(document_id, text)
        if cached is not None:
            console.print(f"[dim]Using cached suggestions ({len(cached)})[/dim]")
            return cached

    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    checker = TextChecker(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    with console.status("Checking text..."):
        outcome = asyncio.run(checker.check(AnalysisRequest(text=text, document_id=document_id)))

    if outcome.notice is not None:
        _print_notice(outcome.notice)
        raise typer.Exit(1)

    usage = llm.get_token_summary()
    if usage["calls"]:
        console.print(f"[dim]Tokens: {usage['input']} in / {usage['output']} out[/dim]")

    suggestions = validate(outcome.raw, len(text))
    if cache is not None:
        cache.put(document_id, text, suggestions)
    return suggestions


def _suggestion_table(suggestions: list[Suggestion]) -> Table:
    table = Table(title=f"Suggestions ({len(suggestions)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Type")
    table.add_column("Span", justify="right")
    table.add_column("Original")
    table.add_column("Correction", style="bold")
    table.add_column("Explanation")
    for i, s in enumerate(suggestions, 1):
        color = CATEGORY_COLORS.get(s.category.value, "white")
        table.add_row(
            str(i),
            f"[{color}]{s.category.value}[/{color}]",
            f"{s.span.start}-{s.span.end}",
            s.original,
            s.correction,
            s.explanation,
        )
    return table


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def check(
    file: Path = typer.Argument(help="Text file to check"),
    document_id: str = typer.Option(None, "--document-id", help="Document id (defaults to the file path)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Always ask the model"),
) -> None:
    """Check a text file and list suggestions."""
    text = _read_text(file)
    config = load_config()
    doc_id = document_id or str(file.resolve())

    suggestions = _analyze(text, doc_id, config, use_cache=not no_cache)
    if not suggestions:
        console.print("[green]No suggestions.[/green]")
        return
    console.print(_suggestion_table(suggestions))


@app.command()
def fix(
    file: Path = typer.Argument(help="Text file to correct"),
    output: Path = typer.Option(None, "--output", "-o", help="Write corrected text here (default: stdout)"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Confirm each suggestion"),
    document_id: str = typer.Option(None, "--document-id", help="Document id (defaults to the file path)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Always ask the model"),
) -> None:
    """Check a text file and apply the suggestions."""
    text = _read_text(file)
    config = load_config()
    doc_id = document_id or str(file.resolve())

    suggestions = _analyze(text, doc_id, config, use_cache=not no_cache)
    if not suggestions:
        console.print("[green]No suggestions.[/green]")
        return

    store = SuggestionStore.from_config(config.analysis)
    store.add_batch(suggestions, text)
    session = EditorSession(store, text)

    if interactive:
        for s in store.suggestions:
            console.print(Panel(
                f"[bold]{s.original}[/bold] -> [bold green]{s.correction}[/bold green]\n"
                f"[dim]{s.explanation}[/dim]",
                title=s.category.value,
            ))
            if typer.confirm("Apply?", default=True):
                _print_notice(session.accept(s.id))
            else:
                session.reject(s.id)
    else:
        notice = session.accept_all()
        if notice is not None:
            _print_notice(notice)
            if notice.is_error:
                raise typer.Exit(1)

    if output is None:
        console.print(Panel(session.text, title="Corrected text"))
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(session.text, encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")


@app.command()
def stats(
    file: Path = typer.Argument(help="Text file"),
) -> None:
    """Show word count and readability."""
    text = _read_text(file)
    result = compute_writing_stats(text)
    console.print(Panel(
        f"Words: {result.word_count} | Sentences: {result.sentence_count}\n"
        f"Readability: {result.readability_score} ({result.readability_label})",
        title=file.name,
    ))


@app.command("cache-clear")
def cache_clear(
    document_id: str = typer.Option(None, "--document-id", help="Only clear this document"),
) -> None:
    """Delete cached suggestions."""
    config = load_config()
    cache = SuggestionCache(db_path=config.cache.resolved_db_path)
    count = cache.clear(document_id)
    console.print(f"[green]Deleted {count} cached suggestions.[/green]")


if __name__ == "__main__":
    app()
