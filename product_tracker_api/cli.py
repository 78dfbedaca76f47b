"""
CLI entry point for Product Tracker API.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import structlog
import typer
import uvicorn

from . import __version__
from .config import get_settings
from .errors import GatewayError
from .evm import ProductTrackerClient
from .gateway import ContractGateway

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)

app = typer.Typer(
    name="product-tracker",
    help="ProductTracker contract gateway",
    add_completion=False,
)


def _with_gateway(operation: Callable[[ContractGateway], Awaitable[Any]]) -> Any:
    """Run one gateway operation against a fresh client."""

    async def _run() -> Any:
        settings = get_settings()
        client = ProductTrackerClient(settings)
        try:
            return await operation(ContractGateway(client, settings))
        finally:
            await client.close()

    try:
        return asyncio.run(_run())
    except GatewayError as e:
        typer.echo(f"Error: {e.message} ({e.kind.value}: {e.detail})", err=True)
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: HOST setting)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: PORT setting)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    Run the HTTP API server.
    """
    settings = get_settings()
    uvicorn.run(
        "product_tracker_api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload or settings.debug,
    )


@app.command()
def products(
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only products owned by this address"),
) -> None:
    """
    List products stored in the contract.
    """
    result = _with_gateway(lambda gateway: gateway.list_products(owner))

    if not result:
        typer.echo("No products found.")
        return

    for product in result:
        typer.echo(f"  #{product.id}  {product.name}  (owner {product.owner})")
    typer.echo(f"\n{len(result)} products")


@app.command()
def show(
    product_id: int = typer.Argument(..., help="Product ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """
    Show a product and its update history.
    """
    result = _with_gateway(lambda gateway: gateway.get_product_history(product_id))

    if as_json:
        typer.echo(json.dumps(result.model_dump(), indent=2))
        return

    typer.echo(f"Product #{result.id}: {result.name}")
    typer.echo(f"Owner: {result.owner}")
    typer.echo("")

    if not result.history:
        typer.echo("No updates yet.")
        return

    for entry in result.history:
        typer.echo(f"  {entry.timestamp}  {entry.status}  @ {entry.location}")
        typer.echo(f"    sensors: {entry.sensorData}")


@app.command()
def version() -> None:
    """Show the package version."""
    typer.echo(f"product-tracker-api v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
