"""conspec CLI — check data files against registered specs."""

import json
import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from conspec import __version__

console = Console()


def _setup(ctx: click.Context, modules: tuple) -> None:
    """Load settings and spec modules before a command runs."""
    from conspec.config import apply_settings, load_settings
    from conspec.errors import DocumentError

    try:
        settings = load_settings(ctx.obj.get("config"))
        logging.getLogger("conspec").setLevel(
            logging.DEBUG if ctx.obj.get("verbose") else settings.log_level
        )
        settings.modules = settings.modules + [m for m in modules if m not in settings.modules]
        apply_settings(settings)
    except DocumentError as e:
        console.print(f"[red]Error:[/] {e}")
        ctx.exit(2)


def _load(ctx: click.Context, data_file: str):
    from conspec.errors import DocumentError
    from conspec.utils.loader import load_document

    try:
        return load_document(data_file)
    except DocumentError as e:
        console.print(f"  [red]Failed to parse:[/] {e}")
        ctx.exit(2)


module_option = click.option(
    "--module", "-m", "modules", multiple=True, help="Module that registers specs (repeatable)"
)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", default=None, help="Settings file (default: ./conspec.yaml)")
@click.option("--verbose", "-v", is_flag=True, help="Log registry activity")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool):
    """conspec — runtime data specs and conformance.

    Load the modules that define your specs, then check, conform or
    describe data against them by name.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("spec_name")
@click.argument("data_file")
@module_option
@click.pass_context
def check(ctx: click.Context, spec_name: str, data_file: str, modules: tuple):
    """Check DATA_FILE (YAML or JSON) against the spec registered as SPEC_NAME."""
    from conspec.errors import ConspecError
    from conspec.spec.engine import explain

    _setup(ctx, modules)
    data = _load(ctx, data_file)

    console.print(f"\n[bold blue]conspec[/] — Checking {data_file} against {spec_name}\n")

    try:
        problems = explain(spec_name, data)
    except ConspecError as e:
        console.print(f"[red]Error:[/] {e}")
        ctx.exit(2)

    if not problems:
        console.print("[green]Valid![/]")
        return

    table = Table(title=f"Problems ({len(problems)} found)")
    table.add_column("Path", style="cyan")
    table.add_column("In", style="dim")
    table.add_column("Failed")
    table.add_column("Value", style="red")
    table.add_column("Via", style="dim")

    for problem in problems:
        table.add_row(
            " ".join(str(p) for p in problem.path) or "-",
            " ".join(str(p) for p in problem.in_) or "-",
            problem.reason or problem.predicate,
            repr(problem.value)[:60],
            " > ".join(problem.via) or "-",
        )

    console.print(table)
    ctx.exit(1)


# ── Conform ──────────────────────────────────────────────────────────


@main.command(name="conform")
@click.argument("spec_name")
@click.argument("data_file")
@module_option
@click.pass_context
def conform_cmd(ctx: click.Context, spec_name: str, data_file: str, modules: tuple):
    """Print the conformed form of DATA_FILE as JSON."""
    from conspec.errors import ConspecError
    from conspec.spec.engine import conform, explain_str
    from conspec.spec.model import INVALID
    from conspec.utils.loader import to_plain

    _setup(ctx, modules)
    data = _load(ctx, data_file)

    try:
        conformed = conform(spec_name, data)
        if conformed is INVALID:
            console.print("[red]Invalid:[/]")
            console.print(explain_str(spec_name, data), markup=False)
            ctx.exit(1)
    except ConspecError as e:
        console.print(f"[red]Error:[/] {e}")
        ctx.exit(2)

    click.echo(json.dumps(to_plain(conformed), indent=2, default=repr))


# ── Registry ─────────────────────────────────────────────────────────


@main.command(name="list")
@module_option
@click.option("--namespace", "-n", default=None, help="Only list specs in this namespace")
@click.pass_context
def list_specs(ctx: click.Context, modules: tuple, namespace: str | None):
    """List registered specs."""
    from conspec.registry.registry import default_registry

    _setup(ctx, modules)
    entries = default_registry().entries(namespace)

    if not entries:
        console.print("[yellow]No specs registered.[/]")
        return

    table = Table(title=f"Specs ({len(entries)} registered)")
    table.add_column("Name", style="cyan")
    table.add_column("Fn", justify="center")
    table.add_column("Description")

    for entry in entries:
        if entry.instrumented:
            fn_mark = "[green]I[/]"
        elif entry.speced_fn:
            fn_mark = "Y"
        else:
            fn_mark = ""
        table.add_row(entry.name, fn_mark, entry.description[:70])

    console.print(table)


@main.command(name="describe")
@click.argument("spec_name")
@module_option
@click.pass_context
def describe_spec(ctx: click.Context, spec_name: str, modules: tuple):
    """Print the form of the spec registered as SPEC_NAME."""
    from conspec.errors import ConspecError
    from conspec.spec.engine import describe

    _setup(ctx, modules)
    try:
        click.echo(describe(spec_name))
    except ConspecError as e:
        console.print(f"[red]Error:[/] {e}")
        ctx.exit(2)


if __name__ == "__main__":
    main()
