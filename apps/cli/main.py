"""CLI application for pkgshape."""

import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pkgshape.jsonschema import dump_json_schema
from pkgshape.manifest import resolve_manifest_path
from pkgshape.models import ShapeViolation, ValidationOptions
from pkgshape.schema import FIELD_DOCS, FIELDS, REQUIRED_FIELDS
from pkgshape.validate import validate_text

console = Console()

# Exit code for a readable document that does not conform
EXIT_VIOLATIONS = 2


def format_text_output(violations: list[ShapeViolation], display_path: str) -> str:
    """Format violations one per line."""
    if not violations:
        return f"{display_path}: OK"
    lines = [f"{display_path}: {len(violations)} problem(s)"]
    lines.extend(f"  {violation.message}" for violation in violations)
    return "\n".join(lines)


def format_json_output(violations: list[ShapeViolation], display_path: str) -> str:
    """Format JSON output."""
    return json.dumps(
        {
            "file": display_path,
            "valid": not violations,
            "violations": [violation.to_dict() for violation in violations],
        },
        indent=2,
    )


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


app = typer.Typer(
    name="pkgshape",
    help="pkgshape - Check package.json manifests against the manifest shape",
    add_completion=False,
)


@app.command()
def check(
    file_path: str = typer.Argument(help="Path to package.json or its directory (use '-' for stdin)"),
    reject_unknown: bool = typer.Option(False, "--reject-unknown", help="Report fields the manifest shape does not define"),
    strict_version: bool = typer.Option(False, "--strict-version", help="Require a semantic version in 'version'"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Check a package.json manifest and list every shape violation."""
    configure_logging(verbose)

    try:
        if file_path == "-":
            content = sys.stdin.read()
            display_path = "<stdin>"
        else:
            path_obj = resolve_manifest_path(file_path)
            if not path_obj.exists():
                console.print(f"Error: File {path_obj} not found", style="red", soft_wrap=True, markup=False)
                raise typer.Exit(1)
            content = path_obj.read_text(encoding="utf-8")
            display_path = str(path_obj)

        options = ValidationOptions(reject_unknown=reject_unknown, strict_version=strict_version)
        violations = validate_text(content, options)

        if format_type == "json":
            typer.echo(format_json_output(violations, display_path))
        else:
            style = "red" if violations else "green"
            console.print(
                format_text_output(violations, display_path),
                style=style,
                highlight=False,
                soft_wrap=True,
                markup=False,
            )

        if violations:
            raise typer.Exit(EXIT_VIOLATIONS)

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red", soft_wrap=True, markup=False)
        raise typer.Exit(1)


@app.command()
def schema(
    output: str | None = typer.Option(None, "--out", "-o", help="Output file (default: stdout)"),
) -> None:
    """Print the manifest shape as a JSON Schema document."""
    text = dump_json_schema()
    if output and output != "-":
        Path(output).write_text(text + "\n", encoding="utf-8")
        console.print(f"Wrote JSON Schema to {output}")
    else:
        typer.echo(text)


@app.command()
def fields() -> None:
    """List the recognized top-level manifest fields."""
    table = Table(title="package.json fields")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Shape")
    table.add_column("Required")
    table.add_column("Description", style="dim")

    for key, shape in FIELDS.items():
        table.add_row(
            key,
            shape.describe(),
            "yes" if key in REQUIRED_FIELDS else "",
            FIELD_DOCS.get(key, ""),
        )
    console.print(table)


if __name__ == "__main__":
    app()
