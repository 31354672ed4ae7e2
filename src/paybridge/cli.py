"""Typer CLI for Paybridge."""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

app = typer.Typer(name="paybridge", help="Paybridge: Razorpay webhook relay and subscription API")
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host (default from settings)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default from settings)"),
):
    """Start the Paybridge API server."""
    import uvicorn
    from paybridge.app import create_app
    from paybridge.common.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold green]Starting Paybridge on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def sign(
    path: Optional[Path] = typer.Argument(None, help="File with the raw body (stdin if omitted)"),
    secret: Optional[str] = typer.Option(None, help="Signing secret (default: webhook secret)"),
):
    """Print the X-Razorpay-Signature for a raw webhook body."""
    from paybridge.common.config import get_settings
    from paybridge.common.signatures import compute_signature

    key = secret or get_settings().webhook_secret
    if not key:
        console.print("[bold red]Error:[/bold red] no secret (set RAZORPAY_WEBHOOK_SECRET or --secret)")
        raise typer.Exit(1)

    body = path.read_bytes() if path else sys.stdin.buffer.read()
    console.print(compute_signature(key, body), highlight=False)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Paybridge server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
