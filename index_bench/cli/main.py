r"""
Command-line interface for index-bench.

    index-bench run -s duckdb --db-dir ./data -n 1000000 -i 5 --index
    index-bench stores
"""

from functools import partial
from pathlib import Path
from typing import Annotated

import typer

__all__ = ["app", "main"]

app = typer.Typer(
    name="index-bench",
    help="Unique-index insert and lookup benchmark for embedded graph stores.",
    no_args_is_help=True,
)


@app.command()
def run(
    preset: Annotated[
        str | None, typer.Option("-p", "--preset", help="Workload preset: smoke, small, reference")
    ] = None,
    vertices: Annotated[int | None, typer.Option("-n", "--vertices", help="Vertices inserted per trial")] = None,
    iterations: Annotated[int | None, typer.Option("-i", "--iterations", help="Number of trials")] = None,
    index: Annotated[
        bool | None, typer.Option("--index/--no-index", help="Build the unique index before inserting")
    ] = None,
    vertex_class: Annotated[str | None, typer.Option("--vertex-class", help="Vertex type name")] = None,
    property_name: Annotated[str | None, typer.Option("--property", help="Indexed property name")] = None,
    lookup_index: Annotated[
        int | None, typer.Option("--lookup-index", help="Insert index of the looked-up key (default: vertices/2)")
    ] = None,
    case_insensitive: Annotated[
        bool, typer.Option("--case-insensitive", help="Compare indexed values ignoring case")
    ] = False,
    store: Annotated[str, typer.Option("-s", "--store", help="Store: memory, duckdb")] = "duckdb",
    db_dir: Annotated[
        Path | None, typer.Option("--db-dir", help="Database directory for file-backed stores")
    ] = None,
    output: Annotated[Path, typer.Option("-o", "--output", help="Output directory")] = Path("./results"),
    format_: Annotated[
        str, typer.Option("-f", "--format", help="Export format: json, csv, all, none")
    ] = "none",
) -> None:
    """Run the index benchmark."""
    from index_bench.config import build_workload
    from index_bench.errors import StoreError
    from index_bench.reporting import CsvExporter, JsonExporter, session_id
    from index_bench.runner import BenchmarkRunner
    from index_bench.stores import StoreRegistry

    if StoreRegistry.get(store) is None:
        typer.echo(f"Error: Unknown store '{store}'. Available: {', '.join(StoreRegistry.list())}", err=True)
        raise typer.Exit(1)

    try:
        workload = build_workload(
            preset,
            vertex_count=vertices,
            iterations=iterations,
            create_index=index,
            vertex_class=vertex_class,
            property_name=property_name,
            lookup_index=lookup_index,
            case_insensitive=case_insensitive or None,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    kwargs = {"directory": db_dir} if store == "duckdb" and db_dir else {}
    factory = partial(StoreRegistry.create, store, **kwargs)

    try:
        result = BenchmarkRunner(workload, factory, echo=typer.echo).run()
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    formats_to_export = [f.strip() for f in format_.split(",")]
    if "all" in formats_to_export:
        formats_to_export = ["json", "csv"]

    exporters = {"json": JsonExporter, "csv": CsvExporter}
    for fmt in formats_to_export:
        if fmt == "none":
            continue
        exporter_cls = exporters.get(fmt)
        if exporter_cls is None:
            typer.echo(f"Unknown format: {fmt}", err=True)
            continue
        output.mkdir(parents=True, exist_ok=True)
        exporter = exporter_cls()
        path = output / f"{session_id(result)}{exporter.suffix}"
        exporter.export(result, path)
        typer.echo(f"Exported {fmt.upper()}: {path}")


@app.command()
def stores() -> None:
    """List available stores."""
    from index_bench.stores import StoreRegistry

    typer.echo("Available stores:")
    for store_name in StoreRegistry.list():
        typer.echo(f"  - {store_name}")


def main() -> None:
    """Main entry point."""
    app()
