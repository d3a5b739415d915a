"""smartcrawl CLI — entry-point for crawl operations.

Usage:
    python cli/main.py --help

Commands:
    crawl   → one URL through the full fetch + content pipeline
    batch   → several URLs, sequentially, with a pause between them
    filter  → the content pipeline alone, over a JSON fragment list
    compare → blocks shared by two stored extractions
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from smartcrawl.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Any, List, Optional

import typer

from cli.rendering import render_batch, render_blocks, render_comparison, render_result
from smartcrawl.compare import compare_files
from smartcrawl.content.pipeline import build_extraction
from smartcrawl.coordinator import crawl_url, crawl_urls
from smartcrawl.errors import ParseError
from smartcrawl.scraper.models import fragments_from_dicts

app = typer.Typer(
    name="smartcrawl",
    help="Fetch web pages and keep only their main content.",
    no_args_is_help=True,
)


def _emit(payload: dict[str, Any], output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(f"[output] Written to {output}")


# ---------------------------------------------------------------------------
# crawl
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl(
    url: str = typer.Option(..., help="URL to crawl."),
    force: bool = typer.Option(False, "--force", help="Ignore cached results and refetch."),
    no_fallback: bool = typer.Option(
        False, "--no-fallback", help="Never escalate to a rendered (browser) fetch."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
    output: Optional[Path] = typer.Option(None, help="Write the JSON result to this file."),
) -> None:
    """Crawl a single URL and print its main content."""
    result = crawl_url(
        url,
        force_refresh=force,
        fallback=False if no_fallback else None,
    )

    if as_json or output is not None:
        _emit(result.to_dict(), output)
    else:
        typer.echo(render_result(result))

    if not result.success:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# batch
# ---------------------------------------------------------------------------
@app.command("batch")
def batch(
    url: List[str] = typer.Option(..., "--url", help="URL to crawl (repeatable)."),
    delay: Optional[float] = typer.Option(
        None, min=1.0, help="Seconds to wait between URLs (default: BATCH_DELAY)."
    ),
    force: bool = typer.Option(False, "--force", help="Ignore cached results and refetch."),
    output: Optional[Path] = typer.Option(None, help="Write the JSON batch result to this file."),
) -> None:
    """Crawl several URLs one after another."""
    result = crawl_urls(url, delay=delay, force_refresh=force)

    if output is not None:
        _emit(result.to_dict(), output)
    typer.echo(render_batch(result))

    if result.successful == 0:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# filter
# ---------------------------------------------------------------------------
@app.command("filter")
def filter_fragments(
    input: Path = typer.Option(..., "--input", help="JSON file holding a fragment list."),
    title: str = typer.Option("", help="Page title to report."),
    as_json: bool = typer.Option(False, "--json", help="Print the extraction as JSON."),
) -> None:
    """Run main-content detection over fragments stored in a JSON file."""
    try:
        raw = json.loads(input.read_text(encoding="utf-8"))
        fragments = fragments_from_dicts(raw)
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"[filter] Cannot read {input}: {exc}")
        raise typer.Exit(1)
    except ParseError as exc:
        typer.echo(f"[filter] Invalid fragment list: {exc.message}")
        raise typer.Exit(1)

    extracted = build_extraction(
        fragments, url=str(input), title=title, method="lightweight"
    )
    if as_json:
        typer.echo(json.dumps(extracted.to_dict(), indent=2, ensure_ascii=False))
        return

    typer.echo(f"[filter] Kept {extracted.main_content_blocks}/{extracted.total_items} fragment(s)")
    if extracted.blocks:
        typer.echo(render_blocks(extracted))


# ---------------------------------------------------------------------------
# compare
# ---------------------------------------------------------------------------
@app.command("compare")
def compare(
    first: Path = typer.Option(..., "--first", help="First stored extraction (cache JSON file)."),
    second: Path = typer.Option(..., "--second", help="Second stored extraction (cache JSON file)."),
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON."),
    output: Optional[Path] = typer.Option(None, help="Write the JSON comparison to this file."),
) -> None:
    """Report blocks shared by two stored extractions."""
    try:
        comparison = compare_files(first, second)
    except OSError as exc:
        typer.echo(f"[compare] Cannot read input: {exc}")
        raise typer.Exit(1)
    except ParseError as exc:
        typer.echo(f"[compare] {exc.message}")
        raise typer.Exit(1)

    if as_json or output is not None:
        _emit(comparison.to_dict(), output)
        return

    typer.echo(render_comparison(comparison))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
