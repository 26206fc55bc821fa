"""Typer CLI entrypoint for dsnode."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, TextIO

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dsnode.behaviors import BehaviorRegistry, UnknownBehaviorError
from dsnode.config import (
    LoggingSettings,
    LogLevel,
    NodeConfig,
    NodeConfigError,
    load_node_config,
)
from dsnode.errors import NodeError
from dsnode.node import serve

app = typer.Typer(help="dsnode: stdio nodes for distributed-systems test harnesses")
_CONSOLE = Console()
# stdout carries protocol envelopes only; diagnostics go to stderr.
_ERR_CONSOLE = Console(stderr=True)
_LOGGING_CONFIGURED = False
_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NODE_FAILURE = 1
EXIT_USAGE = 2


def _configure_logging(settings: LoggingSettings) -> None:
    """Configure Rich-backed stderr logging once per process."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if not _LOGGING_CONFIGURED:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(message)s",
            handlers=[
                RichHandler(
                    console=_ERR_CONSOLE,
                    show_path=False,
                    rich_tracebacks=settings.rich_tracebacks,
                )
            ],
        )
        _LOGGING_CONFIGURED = True
    logging.getLogger("dsnode").setLevel(settings.level.value)


def _use_utf8(stream: TextIO) -> None:
    """Switch a process stream to strict UTF-8 when it supports reconfiguring."""
    maybe_reconfigure = getattr(stream, "reconfigure", None)
    if callable(maybe_reconfigure):
        maybe_reconfigure(encoding="utf-8", errors="strict")


def _resolve_config(
    *,
    config_file: Path | None,
    behavior: str | None,
    log_level: LogLevel | None,
) -> NodeConfig:
    """Load config from disk and apply CLI overrides.

    Args:
        config_file: Optional config file path.
        behavior: Optional behavior name override.
        log_level: Optional logging level override.

    Returns:
        Effective node config.

    Raises:
        NodeConfigError: If the config file is invalid.
    """
    config = load_node_config(config_file)
    updates: dict[str, object] = {}
    if behavior is not None:
        updates["behavior"] = behavior
    if log_level is not None:
        updates["logging"] = config.logging.model_copy(update={"level": log_level})
    return config.model_copy(update=updates)


def _serve_stdio(config: NodeConfig, registry: BehaviorRegistry | None = None) -> int:
    """Run the configured behavior over process stdio.

    Args:
        config: Effective node config.
        registry: Optional behavior registry override.

    Returns:
        Process exit code.
    """
    _configure_logging(config.logging)
    behaviors = registry or BehaviorRegistry()
    try:
        behavior = behaviors.create(config.behavior)
    except UnknownBehaviorError as exc:
        _ERR_CONSOLE.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return EXIT_USAGE

    _LOGGER.debug("Starting %s node", behavior.name)
    # Wire records are UTF-8 regardless of the locale.
    _use_utf8(sys.stdin)
    _use_utf8(sys.stdout)
    try:
        state = serve(behavior, reader=sys.stdin, writer=sys.stdout)
    except NodeError as exc:
        _LOGGER.debug("Node failure data: %r", exc.data)
        _ERR_CONSOLE.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return EXIT_NODE_FAILURE
    _LOGGER.debug(
        "Node %s stopped at message id %d", state.node_id, state.next_message_id
    )
    return EXIT_OK


@app.command("run")
def run_command(
    behavior: Annotated[
        str | None,
        typer.Option(help="Registered behavior name (default from config: echo)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            file_okay=True,
            dir_okay=False,
            help="Path to node config YAML/JSON file.",
        ),
    ] = None,
    log_level: Annotated[
        LogLevel | None,
        typer.Option(case_sensitive=False, help="Logging level for stderr output."),
    ] = None,
) -> None:
    """Serve one node over stdin/stdout until input closes.

    Args:
        behavior: Optional behavior name override.
        config_file: Optional node config file path.
        log_level: Optional logging level override.

    Raises:
        Exit: Raised with node status code for harness integration.
    """
    try:
        config = _resolve_config(
            config_file=config_file, behavior=behavior, log_level=log_level
        )
    except NodeConfigError as exc:
        _ERR_CONSOLE.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=EXIT_USAGE) from exc
    raise typer.Exit(code=_serve_stdio(config))


@app.command("behaviors")
def behaviors_command() -> None:
    """List registered node behaviors."""
    registry = BehaviorRegistry()
    table = Table(title="Behaviors", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Payload types", style="green")
    for name in registry.names():
        behavior = registry.create(name)
        table.add_row(name, ", ".join(sorted(behavior.payloads)))
    _CONSOLE.print(table)


def echo_main() -> None:
    """Console entry point running the echo behavior with default config."""
    raise SystemExit(_serve_stdio(NodeConfig(behavior="echo")))
