"""Commands for the inverted-table strategy."""

from typing import Annotated

import typer

from customvalues.cli.context import CLIContext
from customvalues.cli.output import OutputFormatter
from customvalues.cli.parsing import parse_assignments

app = typer.Typer(help="Custom values stored as one row per value")


@app.command("create")
def inverted_create(
    ctx: typer.Context,
    values: Annotated[
        list[str] | None,
        typer.Argument(help="Values as KEY=VALUE"),
    ] = None,
) -> None:
    """Save a new inverted entity.

    Names are matched case-insensitively, so "Name=a name=b" stores one row
    named "Name" with value "b".

    Examples:

        customvalues inverted create Name=Khalid "Status=Awesome... Again!"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        entity = db.inverted.create()
        for name, value in parse_assignments(values or []):
            entity.add_value(name, value)
        db.inverted.save(entity)
        formatter.print_success(
            "Saved inverted entity", {"id": entity.id, "values": len(entity.values)}
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("latest")
def inverted_latest(
    ctx: typer.Context,
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Only load rows with this exact name"),
    ] = None,
    shallow: Annotated[
        bool,
        typer.Option("--shallow", help="Skip loading value rows (values shows empty)"),
    ] = False,
) -> None:
    """Show the most recently created inverted entity.

    Examples:

        customvalues inverted latest
        customvalues inverted latest --name Status
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        if shallow:
            entity = db.inverted.load_latest()
        else:
            entity = db.inverted.load_latest_with_values(name)
        formatter.print_inverted_entity(entity)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("set")
def inverted_set(
    ctx: typer.Context,
    entity_id: Annotated[int, typer.Argument(help="Inverted entity ID")],
    name: Annotated[str, typer.Argument(help="Value name (case-insensitive)")],
    value: Annotated[str, typer.Argument(help="New value")],
    checked: Annotated[
        bool,
        typer.Option("--checked", help="Look the name up in storage instead of in memory"),
    ] = False,
) -> None:
    """Insert or update one value on a saved inverted entity.

    Examples:

        customvalues inverted set 1 status "Still awesome"
        customvalues inverted set 1 Status "Still awesome" --checked
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        if checked:
            row = db.inverted.upsert_value(entity_id, name, value)
            details = row.to_dict()
        else:
            entity = db.inverted.get(entity_id)
            db.inverted.save(db.inverted.add_value(entity, name, value))
            details = {"id": entity.id, "values": len(entity.values)}
        formatter.print_success("Value saved", details)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("list")
def inverted_list(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of entities"),
    ] = 20,
) -> None:
    """List inverted entities with their values, newest first.

    Examples:

        customvalues inverted list
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        rows = [entity.to_dict() for entity in db.inverted.list_recent(limit=limit)]
        if not cli_ctx.json_output:
            # one "name=value" pair per row, duplicates included
            for row in rows:
                row["values"] = ", ".join(f"{v['name']}={v['value']}" for v in row["values"])
        formatter.print_table("Inverted entities", rows, ["id", "created_at", "values"])
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("delete")
def inverted_delete(
    ctx: typer.Context,
    entity_id: Annotated[int, typer.Argument(help="Inverted entity ID")],
) -> None:
    """Delete an inverted entity and all of its value rows.

    Examples:

        customvalues inverted delete 1
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        db = cli_ctx.get_db()
        db.inverted.delete(entity_id)
        formatter.print_success("Deleted inverted entity", {"id": entity_id})
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
