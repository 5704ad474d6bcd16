"""Status command: where the config lives and what it resolves to."""

from __future__ import annotations

from rich.console import Console

from gatewayplay import __logo__


def status_command(console: Console) -> None:
    """Show gatewayplay status."""
    from gatewayplay.config.access import get_config
    from gatewayplay.config.loader import get_config_path

    config_path = get_config_path()
    config = get_config()

    console.print(f"{__logo__} gatewayplay Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[dim]defaults[/dim]'}")

    gw = config.gateway
    console.print(f"Gateway: {gw.host}:{gw.port} -> upstream {gw.upstream_base_url}")
    assets = config.assets_path
    console.print(f"Assets: {assets} {'[green]✓[/green]' if assets.exists() else '[red]✗[/red]'}")

    inv = config.invoker
    console.print(f"Invoker: {inv.scheme}://{inv.host}{inv.gateway_path}")
    console.print(f"Escape HTML: {'yes' if inv.escape_html else '[yellow]no[/yellow]'}")
