"""CLI validation command implementation.

This module implements the `entval validate` command, validating entity
data files against a YAML schema with several output formats and detailed
error reporting.
"""

from dataclasses import replace
import json
from pathlib import Path
import sys
import traceback
from typing import Any

from rich.console import Console
from rich.table import Table
import rich_click as click

from ..core import (
    DataLoadError,
    FileSchemaLoader,
    SchemaLoadError,
    SchemaValidationError,
    ValidationOperationLogger,
    bind_context,
    clear_context,
    get_logger,
    load_data_file,
)
from ..validation import EntityValidator, ValidationResult

# Create console for rich formatting - auto-detects if we're in interactive environment
console = Console()
logger = get_logger(__name__)


def _should_use_rich_formatting(force_colors: bool = False) -> bool:
    """Determine if we should use rich formatting based on environment."""
    return force_colors or console.is_terminal


def _output_table_format(
    results: list[ValidationResult],
    file_path: str,
    entity_kind: str | None,
    verbose: bool,
    elapsed_ms: float,
    force_colors: bool = False,
) -> None:
    """Output validation results in table format."""
    invalid = [(i, r) for i, r in enumerate(results, 1) if r.error is not None]

    if not invalid:
        if _should_use_rich_formatting(force_colors):
            console.print("✅ [bold green]Validation successful[/bold green]")
            console.print()

            info_table = Table(show_header=False, box=None, padding=(0, 1))
            info_table.add_row("[bold]File:[/bold]", f"[cyan]{file_path}[/cyan]")
            info_table.add_row(
                "[bold]Kind:[/bold]", f"[magenta]{entity_kind or 'Unknown'}[/magenta]"
            )
            info_table.add_row("[bold]Entities:[/bold]", f"[yellow]{len(results)}[/yellow]")
            if verbose:
                info_table.add_row(
                    "[bold]Validated in:[/bold]", f"[dim]{elapsed_ms:.1f}ms[/dim]"
                )
            console.print(info_table)
        else:
            # Plain text for non-interactive (CI)
            click.echo("✅ Validation successful")
            click.echo()
            click.echo(f"File: {file_path}")
            click.echo(f"Kind: {entity_kind or 'Unknown'}")
            click.echo(f"Entities: {len(results)}")
            if verbose:
                click.echo(f"Validated in: {elapsed_ms:.1f}ms")
        return

    error_count = sum(r.error.error_count for _, r in invalid if r.error)

    if _should_use_rich_formatting(force_colors):
        console.print("❌ [bold red]Validation failed[/bold red]")
        console.print()

        table = Table(title=f"{file_path} ({error_count} errors)")
        table.add_column("Entity", style="yellow", justify="right")
        table.add_column("Property", style="bold blue")
        table.add_column("Code", style="red")
        table.add_column("Message", style="dim")
        if verbose:
            table.add_column("Help", style="italic green")

        for index, result in invalid:
            for violation in result.error.errors if result.error else ():
                row = [str(index), violation.property, str(violation.code), violation.message]
                if verbose:
                    row.append(violation.help or "")
                table.add_row(*row)

        console.print(table)
    else:
        # Plain text for non-interactive (CI)
        click.echo("❌ Validation failed")
        click.echo()
        click.echo(f"File: {file_path}")
        click.echo(f"Errors found: {error_count}")
        click.echo()

        for index, result in invalid:
            for violation in result.error.errors if result.error else ():
                click.echo(
                    f"❌ {violation.code} in entity #{index} '{violation.property}': {violation.message}"
                )
                if verbose and violation.help:
                    click.echo(f"   💡 Help: {violation.help}")


def _output_compact_format(
    results: list[ValidationResult], file_path: str, entity_kind: str | None
) -> None:
    """Output validation results in compact format."""
    invalid = [(i, r) for i, r in enumerate(results, 1) if r.error is not None]

    if not invalid:
        click.echo(
            f"✅ VALID file={file_path} kind={entity_kind or 'unknown'} entities={len(results)}"
        )
        return

    error_count = sum(r.error.error_count for _, r in invalid if r.error)
    click.echo(
        f"❌ INVALID file={file_path} kind={entity_kind or 'unknown'} errors={error_count}"
    )
    for index, result in invalid:
        for violation in result.error.errors if result.error else ():
            click.echo(f"  ❌ #{index}.{violation.property}: {violation.code}")


def _output_json_format(
    results: list[ValidationResult],
    file_path: str,
    entity_kind: str | None,
    verbose: bool,
    elapsed_ms: float,
) -> None:
    """Output validation results in JSON format."""
    is_valid = all(r.error is None for r in results)
    output: dict[str, Any] = {
        "status": "valid" if is_valid else "invalid",
        "file": file_path,
        "kind": entity_kind,
        "entity_count": len(results),
        "error_count": sum(r.error.error_count for r in results if r.error),
        "entities": [
            {
                "index": index,
                "valid": result.error is None,
                "errors": result.error.to_dict()["errors"] if result.error else [],
            }
            for index, result in enumerate(results, 1)
        ],
    }
    if verbose:
        output["validated_in_ms"] = round(elapsed_ms, 2)

    click.echo(json.dumps(output, indent=2))


def _fail(format: str, error_type: str, message: str, exit_code: int) -> None:
    if format == "json":
        click.echo(
            json.dumps(
                {"status": "error", "error_type": error_type, "message": message},
                indent=2,
            )
        )
    else:
        click.echo(f"❌ {message}")
    sys.exit(exit_code)


def _validate_implementation(
    data_file: str,
    schema_file: str,
    kind: str | None,
    allow_unknown: bool,
    format: str,
    verbose: bool,
    force_colors: bool,
) -> None:
    """Implementation of the validate command."""
    data_path = Path(data_file)
    schema_path = Path(schema_file)

    if not data_path.exists():
        _fail(format, "file_not_found", f"File not found: {data_path}", 2)
    if not schema_path.exists():
        _fail(format, "schema_not_found", f"Schema not found: {schema_path}", 2)

    try:
        loader = FileSchemaLoader(str(schema_path.parent))
        schema = loader.load_schema_file(schema_path)
        if allow_unknown:
            # The flag wins over the schema document
            schema = replace(schema, explicit_only=False)
        entities = load_data_file(data_path)
    except (SchemaLoadError, SchemaValidationError) as e:
        _fail(format, "invalid_schema", f"Invalid schema: {e}", 2)
        return
    except DataLoadError as e:
        _fail(format, "invalid_data", str(e), 2)
        return

    entity_kind = kind or schema.kind
    validator = EntityValidator(schema, entity_kind)
    bind_context(entity_kind=entity_kind, data_file=str(data_path))

    try:
        with ValidationOperationLogger(logger, "validate_file") as operation:
            results = [validator.validate(entity) for entity in entities]
            elapsed_ms = operation.elapsed_ms

        if format == "table":
            _output_table_format(
                results, str(data_path), entity_kind, verbose, elapsed_ms, force_colors
            )
        elif format == "compact":
            _output_compact_format(results, str(data_path), entity_kind)
        elif format == "json":
            _output_json_format(results, str(data_path), entity_kind, verbose, elapsed_ms)

        # Exit with appropriate code
        sys.exit(0 if all(r.error is None for r in results) else 1)

    except Exception as e:
        # Handle unexpected errors
        if format == "json":
            _fail(format, "internal_error", f"Internal error: {e}", 4)
        click.echo(f"❌ Internal error: {e}")
        if verbose:
            click.echo("\nFull traceback:")
            click.echo(traceback.format_exc())
        sys.exit(4)
    finally:
        clear_context()


@click.command("validate")
@click.argument("data_file", type=click.Path(exists=False))
@click.option(
    "--schema",
    "-s",
    "schema_file",
    type=click.Path(exists=False),
    required=True,
    help="📐 **Schema YAML file** to validate against",
    metavar="FILE",
)
@click.option(
    "--kind",
    type=str,
    help="🏷️ **Entity kind** used in messages (defaults to the schema kind)",
)
@click.option(
    "--allow-unknown",
    is_flag=True,
    help="🔓 **Accept undeclared properties** (overrides explicit_only)",
)
@click.option(
    "--format",
    type=click.Choice(["table", "compact", "json"]),
    default="table",
    help="📋 **Output format** for validation results",
    show_default=True,
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="🔍 **Show detailed information** - help texts and timing",
)
@click.option(
    "--force-colors",
    is_flag=True,
    help="🎨 **Force colored output** - useful for testing rich formatting",
    hidden=True,  # Hide from main help but available for testing
)
def validate_command(
    data_file: str,
    schema_file: str,
    kind: str | None,
    allow_unknown: bool,
    format: str,
    verbose: bool,
    force_colors: bool,
) -> None:
    """🔍 **Validate entity data against a schema**

    Validates every entity of a YAML or JSON data file and reports all
    violations at once.

    **Examples:**

    ```bash
    entval validate users.yaml --schema schemas/user.yaml
    entval validate users.json -s user.yaml --format json
    entval validate users.yaml -s user.yaml --allow-unknown
    ```

    **Exit Codes:**
    - `0`: Validation successful ✅
    - `1`: Validation failed ❌
    - `2`: File not found, invalid schema or unreadable data 📁⚠️
    - `4`: Internal error 💥
    """
    _validate_implementation(
        data_file, schema_file, kind, allow_unknown, format, verbose, force_colors
    )
