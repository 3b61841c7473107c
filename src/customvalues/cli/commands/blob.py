"""Commands for the blob-value strategy."""

from typing import Annotated

import typer

from customvalues.cli.context import CLIContext
from customvalues.cli.output import OutputFormatter
from customvalues.cli.parsing import parse_assignments

app = typer.Typer(help="Custom values stored as one serialized column")


@app.command("create")
def blob_create(
    ctx: typer.Context,
    values: Annotated[list[str], typer.Argument(help="Values as KEY=VALUE")],
) -> None:
    """Save a new blob entity.

    Later assignments of the same key win (keys are case-sensitive).

    Examples:

        customvalues blob create Name=Khalid Status=Awesome
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        entity = db.blobs.create(dict(parse_assignments(values)))
        db.blobs.save(entity)
        formatter.print_success("Saved blob entity", {"id": entity.id, "values": len(entity.values)})
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("latest")
def blob_latest(ctx: typer.Context) -> None:
    """Show the most recently created blob entity.

    Examples:

        customvalues blob latest
        customvalues --json blob latest
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        formatter.print_blob_entity(db.blobs.load_latest())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("list")
def blob_list(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of entities"),
    ] = 20,
) -> None:
    """List blob entities, newest first.

    Examples:

        customvalues blob list --limit 5
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        rows = [entity.to_dict() for entity in db.blobs.list_recent(limit=limit)]
        formatter.print_table("Blob entities", rows, ["id", "created_at", "values"])
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("delete")
def blob_delete(
    ctx: typer.Context,
    entity_id: Annotated[int, typer.Argument(help="Blob entity ID")],
) -> None:
    """Delete a blob entity.

    Examples:

        customvalues blob delete 3
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        db.blobs.delete(entity_id)
        formatter.print_success("Deleted blob entity", {"id": entity_id})
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
