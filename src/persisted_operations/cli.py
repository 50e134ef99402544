"""
Persisted Operations CLI

Implements 3 CLI verbs:
- resolve: Resolve a request payload (or bare hash) to its operation document
- list: Scan a persisted operations directory and list the known hashes
- check: Validate the filenames and documents in a persisted operations directory
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from graphql import GraphQLError, parse

from .cli_context import CLIContext
from .hash_safety import OPERATION_SUFFIX, hash_from_filename
from .mappers import run_and_exit
from .printers import print_check_results, print_known_hashes, print_operation
from .resolver import PersistedOperations
from .stores.directory import DirectoryOperationStore

app = typer.Typer(name="persisted-operations", help="GraphQL persisted operations CLI")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_payload(payload: Optional[str], hash: Optional[str]) -> Any:
    """
    Build the request payload for the resolve command.
    
    Supports:
    - --hash H -> {"documentId": H}
    - '{"extensions": ...}' -> decoded JSON
    - '-' -> JSON read from stdin
    
    Raises:
        ValueError: If neither or both are given, or the JSON is invalid
    """
    if hash is not None and payload is not None:
        raise ValueError("Give either a payload or --hash, not both")
    if hash is not None:
        return {"documentId": hash}
    if payload is None:
        raise ValueError("Give a JSON payload (or '-' for stdin) or --hash")
    
    text = sys.stdin.read() if payload == "-" else payload
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON payload: {e}") from e


async def _resolve_with(context: CLIContext, payload: Any) -> str:
    try:
        operations: PersistedOperations = await context.ready()
        return operations.resolve_or_raise(payload)
    finally:
        await context.close()


def _require_directory(directory: Path) -> None:
    if not directory.is_dir():
        raise FileNotFoundError(f"Not a directory: {directory}")


@app.command()
def resolve(
    payload: Optional[str] = typer.Argument(None, help="JSON request payload, or '-' to read it from stdin"),
    hash: Optional[str] = typer.Option(None, "--hash", help="Resolve this hash (sent as a Relay documentId)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file with an 'options' section"),
    persisted_operations_directory: Optional[str] = typer.Option(
        None, "--persisted-operations-directory", envvar="PERSISTED_OPERATIONS_DIRECTORY",
        help="The path to the directory in which we'd find the persisted query files (each named <hash>.graphql)",
    ),
    allow_unpersisted_operations: bool = typer.Option(
        False, "--allow-unpersisted-operations",
        help="Allow a literal 'query' when the payload carries no hash",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Resolve a request payload to its persisted operation document."""
    
    def _resolve() -> None:
        _configure_logging(verbose)
        request_payload = _parse_payload(payload, hash)
        context = CLIContext.from_flags(
            config,
            persisted_operations_directory=persisted_operations_directory,
            # An absent flag defers to the config file
            allow_unpersisted_operations=True if allow_unpersisted_operations else None,
        )
        document = asyncio.run(_resolve_with(context, request_payload))
        print_operation(document)
    
    run_and_exit(_resolve)


@app.command("list")
def list_operations(
    directory: Path = typer.Argument(..., help="Persisted operations directory"),
) -> None:
    """Scan a directory and list the persisted operation hashes it holds."""
    
    def _list() -> None:
        _require_directory(directory)
        store = DirectoryOperationStore(directory)
        asyncio.run(store.refresh())
        print_known_hashes(directory, store.known_hashes())
    
    run_and_exit(_list)


@app.command()
def check(
    directory: Path = typer.Argument(..., help="Persisted operations directory"),
) -> None:
    """Check every operation file has a valid hash name and parses as GraphQL."""
    
    def _check() -> None:
        _require_directory(directory)
        checked = 0
        problems: list[tuple[str, str]] = []
        
        for path in sorted(directory.iterdir()):
            if not path.name.endswith(OPERATION_SUFFIX):
                continue
            checked += 1
            if not path.is_file():
                problems.append((path.name, "not a regular file"))
                continue
            if hash_from_filename(path.name) is None:
                problems.append((path.name, "filename is not a valid hash (allowed: a-z A-Z 0-9 _ -)"))
                continue
            try:
                parse(path.read_text(encoding="utf-8"))
            except GraphQLError as e:
                problems.append((path.name, e.message))
            except (OSError, UnicodeDecodeError) as e:
                problems.append((path.name, str(e)))
        
        print_check_results(directory, checked, problems)
        if problems:
            raise ValueError(f"{len(problems)} invalid operation file(s) in {directory}")
    
    run_and_exit(_check)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
