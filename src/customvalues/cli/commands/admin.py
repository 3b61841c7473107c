"""Admin and utility commands."""

import typer

import customvalues
from customvalues.cli.context import CLIContext
from customvalues.cli.output import OutputFormatter

# Create admin subcommand group
app = typer.Typer(help="Database administration and utilities")


@app.command()
def init(
    ctx: typer.Context,
) -> None:
    """Create or upgrade the customvalues tables.

    Examples:

        customvalues admin init
        customvalues --database postgresql://localhost/mydb admin init
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        formatter.print_success(
            "Database initialized",
            {
                "database": cli_ctx.database_url,
                "version": customvalues.__version__,
                "applied": db.applied_migrations or "none (already up to date)",
            },
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command()
def info(
    ctx: typer.Context,
) -> None:
    """Show database, schema version and row counts per strategy.

    Examples:

        customvalues admin info
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        summary = db.describe()

        if cli_ctx.json_output:
            formatter.print_json(summary.model_dump(mode="json"))
        else:
            typer.echo(f"\ncustomvalues v{customvalues.__version__}")
            typer.echo(f"Database: {summary.url}")
            typer.echo(f"Dialect: {summary.dialect}")
            typer.echo(f"Schema version: {summary.schema_version}")
            for stats in summary.strategies:
                line = f"{stats.strategy}: {stats.entities:,} entities"
                if stats.value_rows is not None:
                    line += f", {stats.value_rows:,} value rows"
                typer.echo(line)

    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
