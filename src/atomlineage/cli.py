"""Command-line entry point.

    atomlineage [--debug] [--data PATH] [--config FILE] shadows ...
"""

import sys
from pathlib import Path

import click
from rich.console import Console

from atomlineage import __version__
from atomlineage.foundation.config import load_config
from atomlineage.foundation.errors import LineageError
from atomlineage.foundation.logging import configure_logging
from atomlineage.interface.cli import lineage_cmd

console = Console(stderr=True)


def cli_entrypoint() -> None:
    """Run the CLI, rendering lineage errors without a traceback.

    Called from pyproject.toml [project.scripts].
    """
    try:
        main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        console.print("\n[dim]Aborted[/dim]")
        sys.exit(130)
    except LineageError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--data",
    "data_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Shadow store directory (default: ./.atomlineage)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file",
)
@click.version_option(version=__version__, prog_name="atomlineage")
@click.pass_context
def main(ctx: click.Context, debug: bool, data_path: Path | None, config_path: Path | None) -> None:
    """Lineage tracking for code atoms.

    Bury deleted functions as shadows, then recognize their successors by
    DNA fingerprint and carry their history forward.

    \b
    Examples:
        atomlineage shadows bury old_atom.json --reason refactor
        atomlineage shadows enrich new_atom.json
        atomlineage shadows list --status deleted
    """
    configure_logging(debug=debug)
    config = load_config(config_path)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["data_path"] = data_path or Path.cwd() / config.store.base_path


main.add_command(lineage_cmd.shadows)
