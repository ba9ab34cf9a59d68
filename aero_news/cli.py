"""
Command-line interface for AeroNews.

Uses Typer to provide the public run, analyst mode and usage-counter
inspection commands. Supports loading .env files for API keys and
webhook URLs.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from .config import AppConfig, ConfigError, get_daily_cap, load_config
from .runner import build_limiter, run_analyst_mode, run_pipeline

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False)
usage_app = typer.Typer(add_completion=False, help="Inspect or adjust the daily usage counter.")
app.add_typer(usage_app, name="usage")
console = Console()

CONFIG_OPTION = typer.Option(Path("config.yaml"), "--config", "-c", help="YAML config file.")


def _load(config: Path | None, log_level: str | None = None) -> AppConfig:
    if load_dotenv is not None:
        load_dotenv()
    try:
        cfg = load_config(str(config) if config and config.exists() else None)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if log_level:
        cfg.logging.level = log_level
    return cfg


def _caps(cfg: AppConfig) -> tuple[int, int]:
    try:
        return get_daily_cap(cfg.usage, "public"), get_daily_cap(cfg.usage, "analyst")
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    config: Path | None = CONFIG_OPTION,
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    max_articles: int | None = typer.Option(None, "--max-articles", help="Cap on ticker articles."),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        help="Override the summarization API key (or set GOOGLE_AI_API_KEY / .env).",
    ),
):
    """Fetch feeds, generate takeaways and write the ticker page and data file."""
    cfg = _load(config, log_level)
    if api_key:
        cfg.provider.api_key = api_key
    if max_articles is not None:
        cfg.merge.max_articles = max_articles

    try:
        result = run_pipeline(cfg, output, show_progress=progress, console=console)
    except ConfigError as exc:
        console.print(f"[red]Update failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        console.print(f"[red]Update failed, could not write output:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if result is None:
        console.print("No articles found, nothing written.")
        return
    console.print(
        f"Ticker generated: {result.html_path} "
        f"({len(result.articles)} articles, {result.takeaways.ai} AI takeaways)"
    )


@app.command()
def analyst(
    config: Path | None = CONFIG_OPTION,
    output: Path | None = typer.Option(None, "--output", "-o", help="Directory holding the data file."),
    force: bool = typer.Option(False, "--force", help="Run regardless of the scheduled hour."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Post the SMS analyst digest built from the latest data file."""
    cfg = _load(config, log_level)
    try:
        outcome = run_analyst_mode(cfg, output, force=force)
    except ConfigError as exc:
        console.print(f"[red]Analyst mode failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"Analyst mode: {outcome.status} ({len(outcome.articles)} articles)")


@usage_app.command("status")
def usage_status(config: Path | None = CONFIG_OPTION):
    """Show today's call count and calls left under each cap."""
    cfg = _load(config)
    public_cap, analyst_cap = _caps(cfg)
    limiter = build_limiter(cfg)
    counter = limiter.load()
    console.print(f"Date:            {counter.date}")
    console.print(f"Calls today:     {counter.calls_today}")
    console.print(f"Public cap:      {public_cap}  (remaining: {limiter.remaining(public_cap)})")
    console.print(f"Analyst cap:     {analyst_cap}  (remaining: {limiter.remaining(analyst_cap)})")


@usage_app.command("simulate")
def usage_simulate(
    calls: int = typer.Argument(..., help="Set today's call count to this value."),
    config: Path | None = CONFIG_OPTION,
):
    """Set today's counter to a given value (for testing the caps)."""
    cfg = _load(config)
    public_cap, analyst_cap = _caps(cfg)
    try:
        counter = build_limiter(cfg).simulate(calls)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    console.print(f"Simulated {counter.calls_today} calls for {counter.date}")
    console.print(f"Public cap ({public_cap}):  {'REACHED' if calls >= public_cap else 'OK'}")
    console.print(f"Analyst cap ({analyst_cap}): {'REACHED' if calls >= analyst_cap else 'OK'}")


@usage_app.command("reset")
def usage_reset(config: Path | None = CONFIG_OPTION):
    """Reset today's counter to zero."""
    cfg = _load(config)
    build_limiter(cfg).reset()
    console.print("Counters reset to 0.")


if __name__ == "__main__":
    app()
