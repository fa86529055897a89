"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .run import check, run

# HA_*, GH_* and NTFY_* may also come from a .env file
load_dotenv()

app = typer.Typer(
    name="cluster-bulb",
    help="Kubernetes cluster health indicator",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="run", context_settings={"help_option_names": ["-h", "--help"]})(
    run
)
app.command(name="check", context_settings={"help_option_names": ["-h", "--help"]})(
    check
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from cluster_bulb import __version__

    console.print(f"Cluster Bulb v{__version__}")


if __name__ == "__main__":
    app()
