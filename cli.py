# cli.py
import asyncio
import logging

import typer
import uvicorn
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from preference_center.api.identifier import encode_customer_id
from preference_center.core.logging import configure_logging
from preference_center.core.settings import get_settings
from preference_center.customerio.client import CustomerIOClient, CustomerIOError

logger = logging.getLogger(__name__)

app = typer.Typer(help="Email preference center CLI.")
console = Console()
settings = get_settings()


def preferences_link(customer_id: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/preferences/{encode_customer_id(customer_id)}"


@app.command(name="link")
def link_command(
    customer_id: Annotated[str, typer.Argument(help="Customer.io customer id.")],
    base_url: Annotated[str, typer.Option(help="Public base URL of the preference center.")] = None,
):
    """
    Prints the preferences page link for a customer.
    """
    typer.echo(preferences_link(customer_id, base_url or settings.PUBLIC_BASE_URL))


async def _fetch(customer_id: str):
    async with CustomerIOClient.from_settings(settings) as client:
        return await client.fetch_preferences(customer_id)


@app.command(name="show")
def show_command(
    customer_id: Annotated[str, typer.Argument(help="Customer.io customer id.")],
):
    """
    Fetches a customer's subscription preferences from Customer.io and prints them.
    """
    configure_logging(settings.LOG_LEVEL.value)
    try:
        view = asyncio.run(_fetch(customer_id))
    except CustomerIOError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    customer = view.customer
    console.print(f"[bold]{view.preferences.header.title}[/bold]")
    console.print(f"Customer: {customer.id} <{customer.email or 'no email'}>")
    console.print(f"Globally unsubscribed: {'yes' if customer.globally_unsubscribed else 'no'}")

    table = Table("ID", "Topic", "Subscribed", "Description")
    for topic in view.preferences.topics:
        table.add_row(str(topic.id), topic.name, "yes" if topic.subscribed else "no", topic.description or "")
    console.print(table)


@app.command(name="serve")
def serve_command(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = None,
    port: Annotated[int, typer.Option(help="Port to listen on.")] = None,
    reload: Annotated[bool, typer.Option(help="Reload on code changes.")] = False,
):
    """
    Runs the preference center web server.
    """
    configure_logging(settings.LOG_LEVEL.value)
    uvicorn.run(
        "preference_center.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.value.lower(),
    )


if __name__ == "__main__":
    app()
