"""customvalues CLI - Main entry point."""

from typing import Annotated

import typer

import customvalues
from customvalues.cli.context import CLIContext, get_database_url
from customvalues.cli.output import OutputFormatter

# Create main Typer app
app = typer.Typer(
    name="customvalues",
    help="customvalues CLI - blob column vs inverted table storage for custom values",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            envvar="CUSTOMVALUES_URL",
            help="Database URL (PostgreSQL or SQLite)",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    ctx.obj = CLIContext(
        database_url=get_database_url(database),
        echo=echo,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"customvalues v{customvalues.__version__}")


@app.command()
def demo(ctx: typer.Context) -> None:
    """Save one entity per strategy, then read both back and print them.

    The read goes through a second connection, so what is printed is what
    was persisted.

    Examples:

        customvalues demo
        customvalues --database sqlite:///demo.db demo
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        writer = cli_ctx.get_db()

        blob = writer.blobs.create({"Name": "Khalid", "Status": "Awesome"})
        inverted = (
            writer.inverted.create()
            .add_value("Name", "Khalid")
            .add_value("Status", "Awesome... Again!")
        )
        writer.blobs.save(blob)
        writer.inverted.save(inverted)

        with cli_ctx.open_reader() as reader:
            blob = reader.blobs.load_latest()
            inverted = reader.inverted.load_latest_with_values()

        if cli_ctx.json_output:
            formatter.print_json(
                {
                    "blob": blob.to_dict(),
                    "inverted": inverted.to_dict(),
                }
            )
        else:
            typer.echo("Results from JSON are...")
            for key, value in blob.values.items():
                typer.echo(f"  - {key}: {value}")

            typer.echo("\nResults from Entity are...")
            for row in inverted.values:
                typer.echo(f"  - {row.name}: {row.value}")

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


# Register command groups
from customvalues.cli.commands import admin, blob, inverted  # noqa: E402

app.add_typer(admin.app, name="admin")
app.add_typer(blob.app, name="blob")
app.add_typer(inverted.app, name="inverted")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
