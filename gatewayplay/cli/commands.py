"""CLI commands for gatewayplay.

Top-level commands: serve (gateway server), invoke (one gateway invocation), status.
"""

import asyncio

import typer
from loguru import logger
from rich.console import Console

from gatewayplay import __logo__, __version__
from gatewayplay.cli.command_groups.status_command import status_command
from gatewayplay.cli.shared.logging_utils import ensure_rotating_log_file
from gatewayplay.cli.shared.network_utils import find_port_conflict
from gatewayplay.config.access import get_config as get_cached_config
from gatewayplay.config.schema import Config
from gatewayplay.invoker import ClickEvent, ConsoleSink, GatewayInvoker, ResultStyle

app = typer.Typer(
    name="gatewayplay",
    help=f"{__logo__} gatewayplay - same-origin gateway and invoker",
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} gatewayplay v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", callback=_version_callback, is_eager=True),
):
    """gatewayplay - same-origin gateway and invoker."""


# ============================================================================
# Gateway / Server
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind host (default: gateway.host)"),
    port: int = typer.Option(None, "--port", "-p", help="Gateway port (default: gateway.port)"),
    upstream_host: str = typer.Option(None, "--upstream-host", help="Host POST /gateway delegates to"),
    upstream_port: int = typer.Option(None, "--upstream-port", help="Port POST /gateway delegates to"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Start the gateway server (POST /gateway, GET /ready, /assets)."""
    config = get_cached_config()
    overrides = {
        key: value
        for key, value in {
            "host": host,
            "port": port,
            "upstream_host": upstream_host,
            "upstream_port": upstream_port,
        }.items()
        if value is not None
    }
    gateway_cfg = config.gateway.model_copy(update=overrides)
    config = config.model_copy(update={"gateway": gateway_cfg})

    busy = find_port_conflict(gateway_cfg.host, gateway_cfg.port)
    if busy:
        console.print(
            f"[red]{busy} is already in use.[/red] "
            "Close the process using it, or use [cyan]--port[/cyan] to pick another."
        )
        raise typer.Exit(1)

    log_path = ensure_rotating_log_file("gateway", level="DEBUG" if verbose else "INFO")
    console.print(f"{__logo__} Starting gatewayplay gateway on {gateway_cfg.host}:{gateway_cfg.port}...")
    console.print(f"[dim]Logs: {log_path}[/dim]")
    console.print(f"[green]✓[/green] Upstream: {gateway_cfg.upstream_base_url}")

    from gatewayplay.gateway import create_gateway_app

    api_app = create_gateway_app(config)

    import uvicorn
    uvicorn_config = uvicorn.Config(
        api_app,
        host=gateway_cfg.host,
        port=gateway_cfg.port,
        log_level="debug" if verbose else "info",
    )
    api_server = uvicorn.Server(uvicorn_config)
    console.print(
        f"[green]✓[/green] API: http://{gateway_cfg.host}:{gateway_cfg.port}/ "
        "(POST /gateway, GET /ready, /assets/index.html)"
    )

    try:
        asyncio.run(api_server.serve())
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutting down...[/yellow]")
    except OSError as e:
        busy = find_port_conflict(gateway_cfg.host, gateway_cfg.port)
        if busy:
            console.print(f"[red]{busy} is already in use.[/red]")
            raise typer.Exit(1) from e
        raise


# ============================================================================
# Invoker
# ============================================================================


def _build_invoker(
    config: Config,
    *,
    host: str | None,
    scheme: str | None,
    insecure: bool,
    show_html: bool,
) -> GatewayInvoker:
    invoker_cfg = config.invoker.model_copy(
        update={k: v for k, v in {"scheme": scheme, "verify_tls": False if insecure else None}.items() if v is not None}
    )
    config = config.model_copy(update={"invoker": invoker_cfg})
    return GatewayInvoker.from_config(config, ConsoleSink(console, show_html=show_html), host=host)


@app.command()
def invoke(
    host: str = typer.Option(None, "--host", "-H", help="Gateway host[:port] (default: invoker.host)"),
    scheme: str = typer.Option(None, "--scheme", help="http or https (default: invoker.scheme)"),
    html: bool = typer.Option(False, "--html", help="Print the rendered HTML fragment instead of text"),
    insecure: bool = typer.Option(False, "--insecure", "-k", help="Skip TLS certificate verification"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show gatewayplay runtime logs"),
):
    """Click the invoke button once: POST {"path":"/","method":"GET"} to /gateway and show the result."""
    if logs:
        logger.enable("gatewayplay")
        ensure_rotating_log_file("invoke", level="DEBUG")
    else:
        logger.disable("gatewayplay")

    config = get_cached_config()
    invoker = _build_invoker(config, host=host, scheme=scheme, insecure=insecure, show_html=html)

    async def run():
        return await invoker.on_click(ClickEvent())

    result = asyncio.run(run())
    if result.style == ResultStyle.DANGER:
        raise typer.Exit(1)


# ============================================================================
# Status Commands
# ============================================================================


@app.command()
def status():
    """Show gatewayplay status."""
    status_command(console)


if __name__ == "__main__":
    app()
