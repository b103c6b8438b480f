"""CLI command listing the validation rule library."""

import inspect
import json

from rich.console import Console
from rich.table import Table
import rich_click as click

from ..core import validator

console = Console()


def _rule_signature(name: str) -> str:
    """Render the extra arguments a rule accepts, e.g. ``(version=None)``."""
    parameters = list(inspect.signature(validator.get(name)).parameters.values())[1:]
    return "(" + ", ".join(str(p) for p in parameters) + ")"


@click.command("rules")
@click.option(
    "--format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="📋 **Output format** for the rule list",
    show_default=True,
)
def rules_command(format: str) -> None:
    """📚 **List the named validation rules**

    Any of these identifiers can be used as a property's ``validate`` rule,
    with extra arguments passed through ``args``.
    """
    if format == "json":
        click.echo(
            json.dumps(
                [
                    {"name": name, "arguments": _rule_signature(name)}
                    for name in validator.names
                ],
                indent=2,
            )
        )
        return

    table = Table(title="Validation rules")
    table.add_column("Rule", style="bold cyan")
    table.add_column("Arguments", style="yellow")
    table.add_column("Description", style="dim")

    for name in validator.names:
        doc = inspect.getdoc(validator.get(name)) or ""
        table.add_row(name, _rule_signature(name), doc.splitlines()[0] if doc else "")

    console.print(table)
