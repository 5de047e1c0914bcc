"""Command Line Interface for SimpleBackup."""

import sys
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from tqdm import tqdm

from . import __version__
from .backup import BackupDescriptor, BackupError, BackupExecutor, load_descriptor
from .config import BackupConfig, StoreConfig, WorkspaceConfig, default_config_path, load_config, save_config
from .store import StoreError, load_tree_store
from .util import format_size, get_logger, setup_logging

console = Console()


def setup_cli_logging(verbose: bool = False, log_file: Optional[Path] = None, level: str = "INFO"):
    """Setup logging for CLI. ``--verbose`` wins over the configured level."""
    setup_logging(level="DEBUG" if verbose else level, log_file=log_file)


@click.group()
@click.version_option(__version__, prog_name="simplebackup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """SimpleBackup - filesystem backups of content repository workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_cli_logging(verbose)


@cli.command("run")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              required=True, help="Configuration file path")
@click.option("--base-path", "-o", type=click.Path(path_type=Path), help="Override the backup directory")
@click.option("--tree", "-t", "tree_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Override the YAML tree file of the store")
@click.pass_context
def backup_run(ctx, config_path: Path, base_path: Optional[Path], tree_file: Optional[Path]):
    """Back up all configured workspaces."""
    try:
        config = load_config(config_path)
    except (ValidationError, FileNotFoundError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    setup_cli_logging(ctx.obj.get("verbose", False), config.log_file, config.log_level)

    base_path = base_path or config.base_path
    tree_file = tree_file or config.store.tree_file
    if tree_file is None:
        console.print("[red]No tree file configured. Set store.tree_file or pass --tree.[/red]")
        sys.exit(1)

    if not config.workspaces:
        console.print("[yellow]No workspaces configured, nothing to back up[/yellow]")
        return

    try:
        store = load_tree_store(tree_file)
    except StoreError as e:
        console.print(f"[red]Cannot open store: {escape(str(e))}[/red]")
        sys.exit(1)

    logger = get_logger(__name__)
    logger.debug(f"Backing up {len(config.workspaces)} workspaces into {base_path}")

    progress_bars: Dict[str, tqdm] = {}

    def on_progress(workspace: str, node_path: str, current: int, total: int) -> None:
        bar = progress_bars.get(workspace)
        if bar is None:
            bar = tqdm(total=total, desc=workspace, unit="node")
            progress_bars[workspace] = bar
        bar.set_postfix_str(node_path)
        bar.update(1)

    console.print(f"[bold cyan]Starting backup into {base_path}[/bold cyan]")
    executor = BackupExecutor(config.workspaces, base_path, store, progress_callback=on_progress)

    try:
        descriptor = executor.run()
    except BackupError as e:
        console.print(f"[red]Backup failed: {escape(str(e))}[/red]")
        sys.exit(1)
    finally:
        for bar in progress_bars.values():
            bar.close()

    _print_descriptor(descriptor, base_path)
    console.print("[bold green]Backup completed successfully![/bold green]")


@cli.command("show")
@click.argument("base_path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def backup_show(base_path: Path):
    """Show the manifest of a finished backup."""
    try:
        descriptor = load_descriptor(base_path)
    except ValidationError as e:
        console.print(f"[red]Invalid backup descriptor: {escape(str(e))}[/red]")
        sys.exit(1)

    if descriptor is None:
        console.print(f"[yellow]No completed backup found in {base_path}[/yellow]")
        sys.exit(1)

    _print_descriptor(descriptor, base_path)


@cli.command("init-config")
@click.argument("config_path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(config_path: Optional[Path], force: bool):
    """Write a default configuration file."""
    config_path = config_path or default_config_path()

    if config_path.exists() and not force:
        console.print(f"[red]{config_path} already exists, use --force to overwrite[/red]")
        sys.exit(1)

    config = BackupConfig(
        workspaces=[
            WorkspaceConfig(workspace="website", path="/", split=True, compress=True),
        ],
        store=StoreConfig(tree_file=Path("tree.yaml")),
    )
    save_config(config, config_path)
    console.print(f"Configuration written to {config_path}")


def _print_descriptor(descriptor: BackupDescriptor, base_path: Path):
    """Helper to display a backup descriptor."""
    table = Table(title=f"Backup {descriptor.created_at}")
    table.add_column("Workspace", style="cyan")
    table.add_column("Node Path", style="white")
    table.add_column("File", style="white")
    table.add_column("Size", style="white")

    for workspace, items in descriptor.workspaces.items():
        for item in items:
            file_path = base_path / item.file
            size = format_size(file_path.stat().st_size) if file_path.exists() else "missing"
            table.add_row(workspace, item.node_path, item.file, size)

    console.print(table)

    pending = [w for w in descriptor.workspaces if w not in descriptor.completed_workspaces]
    if pending:
        console.print(f"[yellow]Incomplete workspaces: {', '.join(pending)}[/yellow]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
