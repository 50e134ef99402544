"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and a CLI command wrapper
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

EXIT_CODES = {
    "UnknownHash": 1,
    "InvalidHash": 2,
    "ValueError": 2,
    "ValidationError": 2,
    "NoHashFound": 3,
    "NotConfigured": 4,
    "ConfigurationConflict": 5,
}

FALLBACK_EXIT_CODE = 6


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.
    
    Returns:
    - 1: Hash not registered (UnknownHash)
    - 2: Invalid input (InvalidHash, ValueError, pydantic ValidationError)
    - 3: Payload carries no hash (NoHashFound)
    - 4: No lookup strategy configured (NotConfigured)
    - 5: Conflicting lookup strategies (ConfigurationConflict)
    - 6: Anything else
    
    Args:
        exc: Exception to map
    """
    return EXIT_CODES.get(type(exc).__name__, FALLBACK_EXIT_CODE)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.
    
    Executes the given function and maps any exception to an exit code via
    typer.Exit, printing the error message to stderr.
    
    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
