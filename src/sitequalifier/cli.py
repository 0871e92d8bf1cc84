"""Command-line interface for SiteQualifier."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sitequalifier import __version__
from sitequalifier.classifier.prompts import DEFAULT_SYSTEM_PROMPT
from sitequalifier.config import Config, RunInput, load_config, read_input_file
from sitequalifier.container import run_qualification
from sitequalifier.errors import BrowserLaunchError, InputValidationError
from sitequalifier.observability import configure_logging, start_metrics_server
from sitequalifier.protocols import RunSummary, Verdict

console = Console()


def _load_config(ctx: click.Context) -> Config:
    try:
        config = load_config(ctx.obj["config_path"])
    except Exception as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    if ctx.obj["log_level"]:
        config.monitoring.log_level = ctx.obj["log_level"]
    return config


def _collect_input(
    config: Config,
    urls_file: Optional[TextIO],
    url: tuple[str, ...],
    input_path: Optional[Path],
    api_key: Optional[str],
    prompt_file: Optional[TextIO],
    delay_ms: Optional[int],
    max_retries: Optional[int],
) -> RunInput:
    """Merge the input file with command-line values; the command line wins."""
    data: Dict[str, Any] = read_input_file(input_path) if input_path else {}

    url_list: List[str] = []
    if urls_file:
        url_list.extend(line.strip() for line in urls_file if line.strip())
    url_list.extend(url)
    if url_list:
        data["urls"] = url_list

    if api_key:
        data["openrouterApiKey"] = api_key
    if prompt_file:
        data["icpSystemPrompt"] = prompt_file.read()
    if delay_ms is not None:
        data["delayBetweenRequests"] = delay_ms
    if max_retries is not None:
        data["maxRetries"] = max_retries

    return RunInput.from_mapping(data, config)


def _results_table(summary: RunSummary) -> Table:
    table = Table(title="Qualification Results")
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("Verdict")
    table.add_column("Score", justify="right")
    table.add_column("Reason", overflow="fold")

    for result in summary.results:
        style = "green" if result.verdict is Verdict.QUALIFY else "red"
        table.add_row(
            escape(result.url), f"[{style}]{result.verdict.value}[/{style}]", str(result.score), escape(result.reason)
        )

    return table


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], log_level: Optional[str]) -> None:
    """SiteQualifier - qualify websites against your Ideal Customer Profile."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("urls_file", type=click.File("r"), required=False)
@click.option("--url", multiple=True, help="Website to qualify (can be used multiple times)")
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Run input JSON (urls, openrouterApiKey, icpSystemPrompt, ...)",
)
@click.option("--api-key", envvar="OPENROUTER_API_KEY", help="OpenRouter API key")
@click.option("--prompt-file", type=click.File("r"), help="File holding a custom ICP system prompt")
@click.option("--delay-ms", type=click.IntRange(min=0), default=None, help="Pause between websites in milliseconds")
@click.option("--max-retries", type=click.IntRange(min=1), default=None, help="Attempts per classification request")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Directory for results")
@click.pass_context
def run(
    ctx: click.Context,
    urls_file: Optional[TextIO],
    url: tuple[str, ...],
    input_path: Optional[Path],
    api_key: Optional[str],
    prompt_file: Optional[TextIO],
    delay_ms: Optional[int],
    max_retries: Optional[int],
    output_dir: Optional[Path],
) -> None:
    """Scrape and qualify websites, writing one result per website."""
    config = _load_config(ctx)
    if output_dir:
        config.storage.output_dir = output_dir

    try:
        run_input = _collect_input(config, urls_file, url, input_path, api_key, prompt_file, delay_ms, max_retries)
    except InputValidationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        for problem in e.problems:
            console.print(f"  [red]- {escape(problem)}[/red]")
        sys.exit(2)

    configure_logging(config.monitoring)
    start_metrics_server(config.monitoring.prometheus_port)

    console.print(
        Panel.fit(
            f"[bold blue]SiteQualifier[/bold blue]\n"
            f"Websites: {len(run_input.urls)}\n"
            f"Delay between requests: {run_input.delay_between_requests} ms\n"
            f"Max retries: {run_input.max_retries}",
            title="Starting Run",
        )
    )

    try:
        summary = asyncio.run(run_qualification(run_input, config))
    except BrowserLaunchError as e:
        console.print(f"[red]Browser could not be started: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(_results_table(summary))
    console.print(
        Panel(
            f"Total: {summary.total}\n"
            f"Qualified: {summary.qualified}\n"
            f"Disqualified: {summary.disqualified}\n"
            f"Results: {config.storage.output_dir}",
            title="Run Complete",
            border_style="green",
        )
    )


@cli.command("validate-config")
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Load and print the effective configuration."""
    config = _load_config(ctx)
    console.print(
        Panel(
            escape(json.dumps(config.model_dump(mode="json"), indent=2)),
            title="Configuration",
            border_style="green",
        )
    )


@cli.command("default-prompt")
def default_prompt() -> None:
    """Print the built-in ICP system prompt."""
    click.echo(DEFAULT_SYSTEM_PROMPT)


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
