"""Shadows command group - inspect and feed the shadow store.

Provides commands to:
- List and show buried atoms
- Walk a shadow's family tree
- Bury a deleted atom
- Find ancestors for a new atom and attach its ancestry
"""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from atomlineage.foundation.errors import InvalidAtomError, LineageConsistencyError
from atomlineage.lineage import (
    Atom,
    FlowType,
    Shadow,
    ShadowRegistry,
    ShadowStatus,
    compute_dna,
)

console = Console()


def _registry(ctx: click.Context) -> ShadowRegistry:
    return ShadowRegistry(ctx.obj["data_path"], ctx.obj["config"])


def _load_atom(path: Path) -> Atom:
    """Read an atom from the extractor's JSON."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a JSON object")
    return Atom.from_dict(data)


def _status_style(status: ShadowStatus) -> str:
    return {
        ShadowStatus.DELETED: "red",
        ShadowStatus.REPLACED: "green",
        ShadowStatus.MERGED: "cyan",
        ShadowStatus.SPLIT: "magenta",
    }[status]


@click.group()
def shadows() -> None:
    """Tombstones of deleted atoms and their lineage.

    \b
    Examples:
        atomlineage shadows list --status deleted
        atomlineage shadows show shadow_3f2a...
        atomlineage shadows lineage shadow_3f2a...
        atomlineage shadows bury atom.json --reason refactor
        atomlineage shadows enrich new_atom.json
    """
    pass


@shadows.command("list")
@click.option("--status", type=click.Choice([s.value for s in ShadowStatus]), default=None,
              help="Only shadows with this status")
@click.option("--flow-type", type=click.Choice([f.value for f in FlowType]), default=None,
              help="Only shadows with this flow type")
@click.option("--pattern-hash", default=None, help="Only shadows with this pattern hash")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_list(
    ctx: click.Context,
    status: str | None,
    flow_type: str | None,
    pattern_hash: str | None,
    json_output: bool,
) -> None:
    """List shadows, newest death first."""
    registry = _registry(ctx)
    entries = asyncio.run(
        registry.list_shadows(status=status, flow_type=flow_type, pattern_hash=pattern_hash)
    )

    if json_output:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        console.print("[yellow]No shadows found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Shadow", style="dim")
    table.add_column("Original")
    table.add_column("Status")
    table.add_column("Flow type")
    table.add_column("Gen", justify="right")
    table.add_column("Died", style="dim")

    for entry in entries:
        table.add_row(
            entry.shadow_id,
            entry.original_id,
            f"[{_status_style(entry.status)}]{entry.status.value}[/]",
            entry.flow_type or "-",
            str(entry.generation),
            entry.died_at[:16].replace("T", " "),
        )

    console.print(table)
    console.print(f"[dim]{len(entries)} shadow(s)[/dim]")


@shadows.command("show")
@click.argument("shadow_id")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_show(ctx: click.Context, shadow_id: str, json_output: bool) -> None:
    """Show a single shadow."""
    registry = _registry(ctx)
    shadow = asyncio.run(registry.get_shadow(shadow_id))

    if shadow is None:
        console.print(f"[yellow]No shadow found with id {shadow_id}[/yellow]")
        return

    if json_output:
        print(json.dumps(shadow.to_dict(), indent=2))
        return

    _display_shadow(shadow)


def _display_shadow(shadow: Shadow) -> None:
    """Display a shadow in rich format."""
    style = _status_style(shadow.status)
    console.print(Panel(
        f"{shadow.metadata.name} [{style}]({shadow.status.value})[/]",
        border_style="blue",
    ))

    console.print(f"  Shadow: {shadow.shadow_id}")
    console.print(f"  Original: {shadow.original_id}")
    if shadow.metadata.file_path:
        location = shadow.metadata.file_path
        if shadow.metadata.line_number is not None:
            location += f":{shadow.metadata.line_number}"
        console.print(f"  Location: {location}")
    console.print(f"  Lived: {shadow.lifespan_days} day(s), died {shadow.died_at:%Y-%m-%d %H:%M}")
    console.print(f"  Reason: {shadow.death.reason}")
    if shadow.replaced_by:
        console.print(f"  Replaced by: {shadow.replaced_by}")

    if shadow.dna:
        console.print("\n[bold]DNA:[/bold]")
        console.print(f"  Flow type: {shadow.dna.flow_type}")
        console.print(f"  Complexity: {shadow.dna.complexity_score}")
        console.print(f"  Sequence: {' → '.join(shadow.dna.operation_sequence) or '-'}")
        console.print(f"  Semantic: {shadow.dna.semantic_fingerprint}")

    console.print("\n[bold]Lineage:[/bold]")
    console.print(f"  Generation: {shadow.lineage.generation}")
    if shadow.lineage.parent_shadow_id:
        console.print(f"  Parent: {shadow.lineage.parent_shadow_id}")
    if shadow.lineage.evolution_type:
        console.print(f"  Evolution: {shadow.lineage.evolution_type}")
    for child in shadow.lineage.child_shadow_ids:
        console.print(f"  → {child}")

    inheritance = shadow.inheritance
    console.print(
        f"\n[bold]Inheritance:[/bold] {inheritance.connection_count} connection(s), "
        f"vibration {inheritance.vibration_score:.2f}"
    )
    for connection in inheritance.connections[:10]:
        console.print(f"  → {connection.target} [dim]({connection.type or '?'})[/dim]")
    if len(inheritance.connections) > 10:
        console.print(f"  [dim]... and {len(inheritance.connections) - 10} more[/dim]")


async def _family(registry: ShadowRegistry, shadow_id: str) -> tuple[list[Shadow], list[str]]:
    chain = await registry.get_lineage(shadow_id)
    children = await registry.get_children(shadow_id) if chain else []
    return chain, children


@shadows.command("lineage")
@click.argument("shadow_id")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_lineage(ctx: click.Context, shadow_id: str, json_output: bool) -> None:
    """Show a shadow's ancestor chain, root first."""
    registry = _registry(ctx)
    try:
        chain, children = asyncio.run(_family(registry, shadow_id))
    except LineageConsistencyError as e:
        raise click.ClickException(str(e)) from e

    if json_output:
        data = {
            "shadow_id": shadow_id,
            "lineage": [s.to_dict() for s in chain],
            "children": children,
        }
        print(json.dumps(data, indent=2))
        return

    if not chain:
        console.print(f"[yellow]No shadow found with id {shadow_id}[/yellow]")
        return

    root = chain[0]
    tree = Tree(_tree_label(root))
    node = tree
    for shadow in chain[1:]:
        node = node.add(_tree_label(shadow))
    for child in children:
        node.add(f"[dim]{child}[/dim]")

    console.print(tree)


def _tree_label(shadow: Shadow) -> str:
    style = _status_style(shadow.status)
    evolution = f" [dim]{shadow.lineage.evolution_type}[/dim]" if shadow.lineage.evolution_type else ""
    return (
        f"[bold]{shadow.metadata.name}[/bold] gen {shadow.lineage.generation} "
        f"[{style}]{shadow.status.value}[/]{evolution} [dim]{shadow.shadow_id}[/dim]"
    )


@shadows.command("bury")
@click.argument("atom_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--reason", default="unknown", help="Why the atom was deleted")
@click.option("--replacement", default=None, help="ID of the atom replacing it")
@click.option("--commit", "commits", multiple=True, help="Commit involved (repeatable)")
@click.option("--risk", type=float, default=0.0, help="Risk introduced by the deletion")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_bury(
    ctx: click.Context,
    atom_file: Path,
    reason: str,
    replacement: str | None,
    commits: tuple[str, ...],
    risk: float,
    json_output: bool,
) -> None:
    """Create a shadow from a deleted atom's JSON."""
    registry = _registry(ctx)
    atom = _load_atom(atom_file)
    try:
        shadow = asyncio.run(
            registry.create_shadow(
                atom, reason=reason, replacement_id=replacement, commits=commits, risk=risk
            )
        )
    except InvalidAtomError as e:
        raise click.ClickException(str(e)) from e

    if json_output:
        print(json.dumps(shadow.to_dict(), indent=2))
        return

    console.print(f"[green]✓[/green] Buried {atom.id} as {shadow.shadow_id}")


@shadows.command("match")
@click.argument("atom_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--min-similarity", type=float, default=None, help="Minimum similarity (0-1)")
@click.option("--limit", type=int, default=None, help="Maximum results")
@click.option("--include-replaced", is_flag=True, help="Also match replaced shadows")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_match(
    ctx: click.Context,
    atom_file: Path,
    min_similarity: float | None,
    limit: int | None,
    include_replaced: bool,
    json_output: bool,
) -> None:
    """Find shadows an atom may descend from (read-only)."""
    registry = _registry(ctx)
    atom = _load_atom(atom_file)
    if atom.dna is None:
        atom.dna = compute_dna(atom)

    matches = asyncio.run(
        registry.find_similar(
            atom,
            min_similarity=min_similarity,
            limit=limit,
            include_replaced=include_replaced,
        )
    )

    if json_output:
        data = [
            {
                "shadow_id": m.shadow.shadow_id,
                "original_id": m.shadow.original_id,
                "name": m.shadow.metadata.name,
                "similarity": m.similarity,
            }
            for m in matches
        ]
        print(json.dumps(data, indent=2))
        return

    if not matches:
        console.print(f"[yellow]No ancestor candidates for {atom.id}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Similarity", justify="right")
    table.add_column("Shadow", style="dim")
    table.add_column("Name")
    table.add_column("Status")

    for m in matches:
        table.add_row(
            f"{m.similarity:.2f}",
            m.shadow.shadow_id,
            m.shadow.metadata.name,
            f"[{_status_style(m.shadow.status)}]{m.shadow.status.value}[/]",
        )

    console.print(table)


@shadows.command("enrich")
@click.argument("atom_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the enriched atom JSON here")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_enrich(
    ctx: click.Context,
    atom_file: Path,
    output: Path | None,
    json_output: bool,
) -> None:
    """Attach ancestry to a new atom, marking its ancestor replaced."""
    registry = _registry(ctx)
    atom = _load_atom(atom_file)
    ancestry = asyncio.run(registry.enrich_with_ancestry(atom))

    if output is not None:
        output.write_text(json.dumps(atom.to_dict(), indent=2), encoding="utf-8")

    if json_output:
        print(json.dumps(ancestry.to_dict(), indent=2))
        return

    if ancestry.is_genesis:
        console.print(f"[cyan]✦[/cyan] {atom.id} is a genesis atom (no ancestor found)")
        return

    console.print(
        f"[green]✓[/green] {atom.id} descends from {ancestry.replaced} "
        f"(generation {ancestry.generation}, similarity {ancestry.similarity:.2f}, "
        f"{ancestry.evolution_type})"
    )
    console.print(f"  Vibration: {ancestry.vibration_score:.2f}")
    console.print(f"  Strong connections: {len(ancestry.strong_connections)}")
    for warning in ancestry.warnings:
        console.print(f"  [yellow]⚠ {warning.type.value}:[/yellow] {warning.message}")


@shadows.command("stats")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def shadows_stats(ctx: click.Context, json_output: bool) -> None:
    """Summarize the shadow store."""
    registry = _registry(ctx)
    stats = asyncio.run(registry.stats())

    if json_output:
        print(json.dumps(stats, indent=2))
        return

    console.print(Panel(f"Shadows: {stats['total']}", border_style="blue"))
    console.print(f"  Deepest generation: {stats['max_generation']}")

    if stats["by_status"]:
        console.print("\n[bold]By status:[/bold]")
        for status, count in sorted(stats["by_status"].items()):
            console.print(f"  {status}: {count}")

    if stats["by_flow_type"]:
        console.print("\n[bold]By flow type:[/bold]")
        for flow_type, count in sorted(stats["by_flow_type"].items(), key=lambda kv: -kv[1]):
            console.print(f"  {flow_type}: {count}")
