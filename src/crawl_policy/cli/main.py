"""
Command line interface for inspecting traversal policies.

Commands:
- presets: List every catalog policy
- show: Explain one policy and what it propagates
- config: Show or initialize configuration
"""

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from crawl_policy import __version__
from crawl_policy.config import Settings, get_default_config_path, load_config
from crawl_policy.core.exceptions import ConfigurationError, PolicyNotFoundError
from crawl_policy.policy import (
    PolicyCatalog,
    TraversalPolicy,
    create_policy_for_child,
    create_policy_for_root,
    get_short_form,
    initial_fetch,
    missing_fetch,
    should_fetch_existing,
    should_traverse,
)
from crawl_policy.utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="crawl-policy",
    help="Inspect crawler traversal policies",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

_state: dict[str, Any] = {"config_file": None, "verbose": False, "settings": None}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]crawl-policy[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Crawler traversal policy toolkit.

    Use 'crawl-policy --help' for command list.
    """
    _state["config_file"] = config_file or get_default_config_path()
    _state["verbose"] = verbose
    _state["settings"] = None


def _load_settings() -> Settings:
    """Load settings once per invocation and apply their logging section."""
    if _state["settings"] is not None:
        return _state["settings"]

    try:
        settings = load_config(_state["config_file"])
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    log_settings = settings.logging
    if _state["verbose"]:
        log_settings = log_settings.model_copy(update={"level": "DEBUG"})
    setup_logging(log_settings)
    logger.debug(f"Loaded configuration from {_state['config_file'] or 'defaults'}")

    _state["settings"] = settings
    return settings


def _format_policy(policy: TraversalPolicy | None) -> str:
    if policy is None:
        return "[dim]not queued[/dim]"
    return f"{get_short_form(policy)} ({policy.transitivity.value})"


@app.command()
def presets() -> None:
    """
    List every policy in the catalog.

    Example:
        crawl-policy presets
    """
    catalog = PolicyCatalog.from_settings(_load_settings())

    table = Table(title="Traversal Policies", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Fetch")
    table.add_column("Freshness")
    table.add_column("Processing")
    table.add_column("Transitivity")
    table.add_column("Short", style="bold", no_wrap=True)

    for name, policy in catalog:
        fields = policy.to_dict()
        table.add_row(
            name,
            fields["fetch"],
            str(fields["freshness"]),
            fields["processing"],
            fields["transitivity"],
            get_short_form(policy),
        )

    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(
        ...,
        help="Policy name",
    ),
) -> None:
    """
    Explain a policy: sources, traversal and propagation.

    Example:
        crawl-policy show reprocessAndDiscover
    """
    catalog = PolicyCatalog.from_settings(_load_settings())
    try:
        policy = catalog.require(name)
    except PolicyNotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        console.print(f"Known policies: {', '.join(catalog.names())}")
        raise typer.Exit(1)

    missing = missing_fetch(policy)
    lines = [f"  {key}: [dim]{value}[/dim]" for key, value in policy.to_dict().items()]
    lines += [
        "",
        f"  initial fetch: {initial_fetch(policy).value}",
        f"  missing fetch: {missing.value if missing else 'none'}",
        f"  traverse: {should_traverse(policy)}",
        f"  fetch existing: {should_fetch_existing(policy)}",
        "",
        f"  roots: {_format_policy(create_policy_for_root(policy))}",
        f"  children: {_format_policy(create_policy_for_child(policy))}",
    ]

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold]{name}[/bold] {get_short_form(policy)}",
        border_style="blue",
    ))


@app.command()
def config(
    show: bool = typer.Option(
        False,
        "--show",
        "-s",
        help="Show current configuration",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Create default configuration file",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """
    Configuration management.

    Examples:
        crawl-policy config --show
        crawl-policy config --init --output ./crawl_policy.yaml
    """
    if init:
        _init_config(output)
    elif show:
        _show_config()
    else:
        console.print(
            "Use --show to view config or --init to create default config")


def _show_config() -> None:
    settings = _load_settings()

    console.print(Panel(
        "[bold]Current Configuration[/bold]",
        border_style="blue",
    ))

    for section, values in settings.model_dump(mode="json").items():
        console.print(f"\n[bold cyan]{section}:[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key}: [dim]{value}[/dim]")


def _init_config(output: Optional[Path]) -> None:
    output_path = output or Path("crawl_policy.yaml")

    if output_path.exists():
        if not typer.confirm(f"File {output_path} exists. Overwrite?"):
            raise typer.Exit(0)

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            Settings().model_dump(mode="json"),
            f,
            default_flow_style=False,
            sort_keys=False,
        )

    console.print(f"[green]✓[/green] Configuration saved to: {output_path}")


if __name__ == "__main__":
    app()
