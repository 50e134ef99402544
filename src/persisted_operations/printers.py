"""
Human-readable output formatting for the CLI.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import typer
from rich.console import Console
from rich.table import Table

_console = Console()


def print_operation(document: str) -> None:
    """Print a resolved operation document exactly as stored."""
    typer.echo(document, nl=not document.endswith("\n"))


def print_known_hashes(directory: Path, hashes: List[str]) -> None:
    """
    Print the hashes found by a directory scan.
    
    Args:
        directory: Scanned directory
        hashes: Sorted hashes from the scan
    """
    if not hashes:
        _console.print(f"[dim]No persisted operations in {directory}[/]")
        return
    
    table = Table(title=f"Persisted operations in {directory}")
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("File", style="yellow", no_wrap=True)
    for hash in hashes:
        table.add_row(hash, f"{hash}.graphql")
    _console.print(table)
    _console.print(f"[bold]Total:[/] {len(hashes)}")


def print_check_results(directory: Path, checked: int, problems: List[Tuple[str, str]]) -> None:
    """
    Print the outcome of checking a persisted operations directory.
    
    Args:
        directory: Checked directory
        checked: Number of `.graphql` files examined
        problems: (filename, reason) pairs
    """
    if not problems:
        _console.print(f"[green]✓[/] {checked} operation file(s) in {directory} OK")
        return
    
    table = Table(title="Problems")
    table.add_column("File", style="red", no_wrap=True)
    table.add_column("Problem")
    for filename, reason in problems:
        table.add_row(filename, reason)
    _console.print(table)
