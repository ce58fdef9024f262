import json
import typer
from .config import ProbeSettings
from .domain.models import FailureKind
from .exceptions import ConfigurationError
from .log import setup_logger
from .prober import probe
from .connectors.mongo import MongoConnector

app = typer.Typer(help="MongoDB connectivity probe", add_completion=False)

def format_stats(stats: dict) -> str:
    # dbStats may carry BSON values (Timestamp, ObjectId) on replica sets
    return json.dumps(stats, indent=2, default=str)

@app.command()
def check_conn():
    """
    Connect to DATABASE_URL, print the database stats and release the connection.
    Exits with status 1 when the connection or the stats request fails.
    """
    try:
        settings = ProbeSettings.load()
    except ConfigurationError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logger(settings.logging_level)
    report = probe(settings, connector_factory=MongoConnector)

    if report.connected:
        typer.echo("Connected successfully to MongoDB")
    if report.stats is not None:
        typer.echo("Database Stats:")
        typer.echo(format_stats(report.stats))

    if report.failure == FailureKind.CONNECTION:
        typer.echo(f"Failed to connect to MongoDB: {report.error_message}", err=True)
    elif report.failure == FailureKind.QUERY:
        typer.echo(f"Failed to fetch stats for database '{report.database}': {report.error_message}", err=True)

    if not report.ok:
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
