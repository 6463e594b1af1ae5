# src/atomforge/cli/app.py
"""Command-line interface for Atomforge.

A thin Typer wrapper around the commands layer. Each command:
1. Parses args (via Typer)
2. Calls a commands module function
3. Renders the result with Rich, exiting 1 on failure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from atomforge import __version__
from atomforge.commands import atoms, builds, config_cmd, externals, games
from atomforge.commands.base import CommandResult
from atomforge.config import load_env_file
from atomforge.models import Port, RegistryEntry, format_signature

app = typer.Typer(
    name="atomforge",
    help="Atomforge - build browser games from small, dependency-ordered code atoms.",
    no_args_is_help=True,
)
game_app = typer.Typer(help="Create and inspect games", no_args_is_help=True)
atoms_app = typer.Typer(help="Read, write and search atoms", no_args_is_help=True)
externals_app = typer.Typer(help="Manage external libraries", no_args_is_help=True)
app.add_typer(game_app, name="game")
app.add_typer(atoms_app, name="atoms")
app.add_typer(externals_app, name="externals")

console = Console()
err_console = Console(stderr=True)


@dataclass
class CLIState:
    """Options shared by every command."""

    data_dir: str | None = None
    config_path: str | None = None
    plain: bool = False


state = CLIState()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"atomforge {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    if not verbose:
        # LiteLLM and httpx are chatty at INFO
        for name in ("LiteLLM", "httpx"):
            logging.getLogger(name).setLevel(logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from config)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Atomforge - atom-based game builder."""
    load_env_file()
    configure_logging(verbose)
    state.data_dir = data_dir
    state.config_path = config_file
    state.plain = plain


def _paths() -> dict[str, str | None]:
    return {"data_dir": state.data_dir, "config_path": state.config_path}


def _fail(result: CommandResult) -> None:
    """Print the error of a failed result and exit 1."""
    if result.success:
        return
    kind = f" ({result.error_kind})" if result.error_kind else ""
    if state.plain:
        console.print(f"Error{kind}: {result.error}", markup=False)
    else:
        console.print(f"[red]Error{kind}:[/red] {result.error}", highlight=False)
    raise typer.Exit(1)


def _ok(message: str) -> None:
    if state.plain:
        console.print(message, markup=False)
    else:
        console.print(f"[green]{message}[/green]")


def _parse_port(spec: str) -> Port:
    """Parse `name:type`, with `name?:type` marking an optional port."""
    name, sep, port_type = spec.partition(":")
    name, port_type = name.strip(), port_type.strip()
    if not sep or not name or not port_type:
        raise typer.BadParameter(f"Expected name:type, got {spec!r}")
    optional = name.endswith("?")
    return Port(name=name.rstrip("?"), type=port_type, optional=optional)


# Games


@game_app.command(name="create")
def game_create(
    name: str = typer.Argument(..., help="Game name (lowercase, digits, - and _)"),
    description: str = typer.Option(None, "--description", help="Game description"),
) -> None:
    """Create a game."""
    result = games.create(name, description, **_paths())
    _fail(result)
    assert result.game is not None
    _ok(f"Created game {result.game.name} ({result.game.id})")


@game_app.command(name="list")
def game_list() -> None:
    """List all games."""
    result = games.list_games(**_paths())
    _fail(result)

    if not result.games:
        console.print("No games yet." if state.plain else "[dim]No games yet.[/dim]")
        raise typer.Exit(0)

    if state.plain:
        for game in result.games:
            console.print(f"{game.name}\t{game.active_build_id or '-'}", markup=False)
        return

    table = Table(title=f"Games ({len(result.games)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Active build", style="dim")
    for game in result.games:
        table.add_row(game.name, game.description or "", game.active_build_id or "-")
    console.print(table)


@game_app.command(name="show")
def game_show(name: str = typer.Argument(..., help="Game name")) -> None:
    """Show a game."""
    result = games.show(name, **_paths())
    _fail(result)
    game = result.game
    assert game is not None

    rows = [
        ("Name", game.name),
        ("ID", game.id),
        ("Description", game.description or ""),
        ("Atoms", str(result.atom_count)),
        ("Active build", game.active_build_id or "-"),
        ("Externals", ", ".join(result.installed) or "-"),
    ]
    if state.plain:
        for key, value in rows:
            console.print(f"{key}: {value}", markup=False)
        return

    table = Table(title=f"Game {game.name}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)


# Atoms


@atoms_app.command(name="structure")
def atoms_structure(
    game: str = typer.Argument(..., help="Game name"),
    type_filter: str = typer.Option(None, "--type", "-t", help="Only core, feature or util"),
) -> None:
    """Show every atom's signature and dependencies."""
    result = atoms.structure(game, type_filter, **_paths())
    _fail(result)

    if not result.atoms:
        console.print("No atoms." if state.plain else "[dim]No atoms.[/dim]")
        raise typer.Exit(0)

    if state.plain:
        for atom in result.atoms:
            deps = ", ".join(atom.depends_on) or "-"
            console.print(
                f"[{atom.type}] {atom.name}{format_signature(atom.inputs, atom.outputs)}"
                f" <- {deps}",
                markup=False,
            )
        return

    table = Table(title=f"{game} ({len(result.atoms)} atoms)")
    table.add_column("Type", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Signature")
    table.add_column("Depends on", style="dim")
    for atom in result.atoms:
        table.add_row(
            atom.type,
            atom.name,
            format_signature(atom.inputs, atom.outputs),
            ", ".join(atom.depends_on),
        )
    console.print(table)


@atoms_app.command(name="read")
def atoms_read(
    game: str = typer.Argument(..., help="Game name"),
    names: list[str] = typer.Argument(..., help="Atom names"),
) -> None:
    """Print the full code of atoms."""
    result = atoms.read(game, names, **_paths())
    _fail(result)

    for atom in result.atoms:
        header = f"[{atom.type}] {atom.name}{atom.signature}  v{atom.version}"
        if state.plain:
            console.print(f"// {header}", markup=False)
            if atom.description:
                console.print(f"// {atom.description}", markup=False)
            console.print(atom.code, markup=False)
        else:
            console.print(f"[bold cyan]{header}[/bold cyan]", highlight=False)
            if atom.description:
                console.print(f"[dim]{atom.description}[/dim]")
            console.print(Syntax(atom.code, "javascript"))
        console.print()

    if result.missing:
        message = f"Not found: {', '.join(result.missing)}"
        console.print(message, markup=False, style=None if state.plain else "yellow")


@atoms_app.command(name="put")
def atoms_put(
    game: str = typer.Argument(..., help="Game name"),
    name: str = typer.Argument(..., help="snake_case atom name"),
    atom_type: str = typer.Option(..., "--type", "-t", help="core, feature or util"),
    code_file: Path = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="Read the code from this file",
    ),
    code: str = typer.Option(None, "--code", help="Code given inline"),
    inputs: list[str] = typer.Option(None, "--input", "-i", help="Input port name:type"),
    outputs: list[str] = typer.Option(None, "--output", "-o", help="Output port name:type"),
    dependencies: list[str] = typer.Option(None, "--dep", help="Atom this one depends on"),
    description: str = typer.Option(None, "--description", help="What the atom does"),
) -> None:
    """Create or update an atom."""
    if (code is None) == (code_file is None):
        raise typer.BadParameter("Give exactly one of --code or --file")
    body = code if code is not None else code_file.read_text(encoding="utf-8")

    result = atoms.put(
        game,
        name,
        body,
        atom_type,
        inputs=[_parse_port(p).model_dump() for p in inputs or []],
        outputs=[_parse_port(p).model_dump() for p in outputs or []],
        dependencies=dependencies or [],
        description=description,
        **_paths(),
    )
    _fail(result)
    assert result.atom is not None
    _ok(f"Saved {result.atom.name}{result.atom.signature} (v{result.atom.version})")


@atoms_app.command(name="delete")
def atoms_delete(
    game: str = typer.Argument(..., help="Game name"),
    name: str = typer.Argument(..., help="Atom name"),
) -> None:
    """Delete an atom nothing depends on."""
    result = atoms.delete(game, name, **_paths())
    _fail(result)
    _ok(f"Deleted {name}")


@atoms_app.command(name="search")
def atoms_search(
    game: str = typer.Argument(..., help="Game name"),
    query: str = typer.Argument(..., help="What you are looking for"),
    limit: int = typer.Option(None, "--limit", "-k", help="Number of results"),
) -> None:
    """Find atoms by meaning."""
    result = atoms.search(game, query, limit, **_paths())
    _fail(result)

    if not result.results:
        console.print("No matches." if state.plain else "[dim]No matches.[/dim]")
        raise typer.Exit(0)

    if state.plain:
        for match in result.results:
            console.print(f"{match.similarity:.3f}\t{match.name}{match.signature}", markup=False)
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Signature")
    table.add_column("Description", style="dim")
    for match in result.results:
        table.add_row(
            f"{match.similarity:.3f}", match.name, match.signature, match.description or ""
        )
    console.print(table)


# Builds


@app.command(name="build")
def build_cmd(game: str = typer.Argument(..., help="Game name")) -> None:
    """Build a game's bundle and make it active."""
    result = builds.build(game, **_paths())
    if result.remaining and not state.plain:
        console.print(f"[yellow]Cycle through: {', '.join(result.remaining)}[/yellow]")
    _fail(result)
    outcome = result.build
    assert outcome is not None

    if outcome.atom_count == 0:
        _ok(f"Build {outcome.build_id}: no atoms, nothing published")
        return
    _ok(f"Build {outcome.build_id}: {outcome.atom_count} atoms")
    console.print(f"Order: {' -> '.join(outcome.order)}", markup=False)
    console.print(f"Bundle: {outcome.bundle_url}", markup=False)


@app.command(name="builds")
def builds_cmd(
    game: str = typer.Argument(..., help="Game name"),
    limit: int = typer.Option(None, "--limit", "-n", help="Number of builds to show"),
) -> None:
    """Show a game's build history."""
    result = builds.history(game, limit, **_paths())
    _fail(result)

    if not result.builds:
        console.print("No builds yet." if state.plain else "[dim]No builds yet.[/dim]")
        raise typer.Exit(0)

    if state.plain:
        for b in result.builds:
            active = "*" if b.id == result.active_build_id else " "
            count = "-" if b.atom_count is None else str(b.atom_count)
            console.print(
                f"{active} {b.id}\t{b.status.value}\t{count}\t{b.created_at.isoformat()}",
                markup=False,
            )
        return

    table = Table(title=f"Builds of {game}")
    table.add_column("", width=1)
    table.add_column("ID", style="cyan")
    table.add_column("Status")
    table.add_column("Atoms", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Error", style="red")
    colors = {"success": "green", "error": "red", "building": "yellow"}
    for b in result.builds:
        table.add_row(
            "*" if b.id == result.active_build_id else "",
            b.id,
            f"[{colors[b.status.value]}]{b.status.value}[/{colors[b.status.value]}]",
            "-" if b.atom_count is None else str(b.atom_count),
            b.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            b.error_message or "",
        )
    console.print(table)


@app.command(name="rollback")
def rollback_cmd(
    game: str = typer.Argument(..., help="Game name"),
    build_id: str = typer.Argument(..., help="Build to restore"),
) -> None:
    """Restore a game's atoms from an earlier build."""
    result = builds.rollback(game, build_id, **_paths())
    _fail(result)
    outcome = result.rollback
    assert outcome is not None
    _ok(f"Restored {outcome.restored_atom_count} atoms from build {build_id}")
    console.print(f"Previous state saved as build {outcome.checkpoint_build_id}", markup=False)


# Externals


@externals_app.command(name="registry")
def externals_registry() -> None:
    """List libraries available to install."""
    result = externals.registry(**_paths())
    _fail(result)

    if not result.entries:
        console.print("Registry is empty." if state.plain else "[dim]Registry is empty.[/dim]")
        raise typer.Exit(0)

    if state.plain:
        for entry in result.entries:
            console.print(f"{entry.name}\t{entry.version}\t{entry.cdn_url}", markup=False)
        return

    table = Table(title="External registry")
    table.add_column("Name", style="cyan")
    table.add_column("Package")
    table.add_column("Version")
    table.add_column("Global")
    table.add_column("Load", style="dim")
    for entry in result.entries:
        table.add_row(
            entry.name, entry.package_name, entry.version, entry.global_name, entry.load_type
        )
    console.print(table)


@externals_app.command(name="register")
def externals_register(
    name: str = typer.Argument(..., help="Registry name"),
    cdn_url: str = typer.Option(..., "--cdn-url", help="URL the library is loaded from"),
    global_name: str = typer.Option(..., "--global", help="Global binding it defines"),
    version: str = typer.Option(..., "--version", help="Library version"),
    package_name: str = typer.Option(None, "--package", help="Package name (default: name)"),
    display_name: str = typer.Option(None, "--display-name", help="Human readable name"),
    description: str = typer.Option(None, "--description", help="Description"),
    load_type: str = typer.Option("script", "--load-type", help="script or module"),
    module_imports: list[str] = typer.Option(
        None, "--import", help="Module import mapping specifier=url"
    ),
    api_surface: str = typer.Option(None, "--api-surface", help="Usage notes for atom authors"),
    api_surface_file: Path = typer.Option(
        None,
        "--api-surface-file",
        exists=True,
        dir_okay=False,
        help="Read the usage notes from this file",
    ),
) -> None:
    """Add or replace a registry entry."""
    imports: dict[str, str] = {}
    for spec in module_imports or []:
        key, sep, url = spec.partition("=")
        if not sep or not key or not url:
            raise typer.BadParameter(f"Expected specifier=url, got {spec!r}")
        imports[key] = url
    if api_surface is not None and api_surface_file is not None:
        raise typer.BadParameter("Give at most one of --api-surface or --api-surface-file")
    if api_surface_file is not None:
        api_surface = api_surface_file.read_text(encoding="utf-8")

    entry = RegistryEntry(
        name=name,
        display_name=display_name or name,
        package_name=package_name or name,
        version=version,
        cdn_url=cdn_url,
        global_name=global_name,
        description=description,
        load_type=load_type,
        module_imports=imports or None,
        api_surface=api_surface,
    )
    result = externals.register(entry, **_paths())
    _fail(result)
    _ok(f"Registered {name} {version}")


@externals_app.command(name="list")
def externals_list(game: str = typer.Argument(..., help="Game name")) -> None:
    """List libraries installed in a game."""
    result = externals.installed(game, **_paths())
    _fail(result)

    if not result.externals:
        message = "No externals installed."
        console.print(message if state.plain else f"[dim]{message}[/dim]")
        raise typer.Exit(0)

    for ext in result.externals:
        line = f"{ext.name} {ext.version} ({ext.global_name}) {ext.cdn_url}"
        console.print(line, markup=False)


@externals_app.command(name="read")
def externals_read(
    game: str = typer.Argument(..., help="Game name"),
    names: list[str] = typer.Argument(..., help="Installed library names"),
) -> None:
    """Print installed libraries with their API surface."""
    result = externals.read(game, names, **_paths())
    _fail(result)

    for ext in result.externals:
        header = f"{ext.name} {ext.version} ({ext.global_name})"
        surface = ext.api_surface or "No API surface recorded."
        if state.plain:
            console.print(f"# {header}", markup=False)
            console.print(ext.cdn_url, markup=False)
            console.print(surface, markup=False)
        else:
            console.print(f"[bold cyan]{header}[/bold cyan]", highlight=False)
            console.print(f"[dim]{ext.cdn_url}[/dim]", highlight=False)
            console.print(surface, markup=False)
        console.print()

    if result.missing:
        message = f"Not installed: {', '.join(result.missing)}"
        console.print(message, markup=False, style=None if state.plain else "yellow")


@externals_app.command(name="install")
def externals_install(
    game: str = typer.Argument(..., help="Game name"),
    name: str = typer.Argument(..., help="Registry name"),
) -> None:
    """Install a library into a game."""
    result = externals.install(game, name, **_paths())
    _fail(result)
    _ok(f"Installed {name} into {game}")


@externals_app.command(name="uninstall")
def externals_uninstall(
    game: str = typer.Argument(..., help="Game name"),
    name: str = typer.Argument(..., help="Registry name"),
) -> None:
    """Remove a library from a game."""
    result = externals.uninstall(game, name, **_paths())
    _fail(result)
    _ok(f"Uninstalled {name} from {game}")


# Config


@app.command(name="config")
def config_cmd_handler() -> None:
    """Show current configuration settings."""
    result = config_cmd.config(**_paths())
    _fail(result)

    for warning in result.warnings:
        console.print(f"Warning: {warning}", markup=False, style=None if state.plain else "yellow")

    rows = [
        ("provider", result.provider),
        ("embedding_model", result.embedding_model),
        ("data_dir", result.data_dir),
        ("public_base_url", result.public_base_url or "(file URLs)"),
    ]

    if state.plain:
        for key, value in rows:
            console.print(f"{key}: {value}", markup=False)
        for setting in result.settings:
            console.print(f"{setting.name}: {setting.value} [{setting.source}]", markup=False)
        return

    table = Table(title="Atomforge Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")
    for key, value in rows:
        table.add_row(key, value, "")
    table.add_row("", "", "")
    for setting in result.settings:
        table.add_row(setting.name, setting.value, setting.source)
    console.print(table)

    if result.config_path:
        console.print(f"\n[dim]Config file: {result.config_path}[/dim]")
    else:
        console.print("\n[dim]No config file found. Using env vars / defaults.[/dim]")
    console.print("\n[dim]Precedence: env var > yaml settings > default[/dim]")
