"""
Command line interface for codeintel.

- cli_group.py: the click group and its analyze, generate, validate,
  optimize, practices and engines commands

codeintel/src/codeintel/cli/__init__.py
"""

import logging
import sys

from ..exceptions import CodeIntelError
from .cli_group import CodeIntelContext, cli, error_console

__all__ = ["cli", "main", "CodeIntelContext"]


def main() -> None:
    """
    Main entry point for the codeintel CLI application.

    Exit codes: 0 success, 1 validation failed, 2 invalid input.
    """
    try:
        cli(obj=CodeIntelContext(), prog_name="codeintel")
    except SystemExit as e:
        sys.exit(e.code)
    except CodeIntelError as e:
        error_console.print(f"Error: {e}", markup=False, highlight=False)
        sys.exit(2)
    except (RuntimeError, ValueError, OSError) as e:
        error_console.print(f"An unexpected error occurred: {e}", style="bold red", markup=False)

        logger = logging.getLogger(__name__)
        # Check if logger was configured before logging error
        if logger.hasHandlers():
            logger.error("Unhandled exception in CLI execution.", exc_info=True)
        else:
            # Fallback if error happened before logging setup
            import traceback

            traceback.print_exc()
        sys.exit(1)
