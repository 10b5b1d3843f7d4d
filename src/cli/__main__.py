# =============================================================================
# src/cli/__main__.py: Package Entry Point
# =============================================================================
#
# Enables `python -m src.cli <command>`; delegates to manage.py.
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

from src.cli.manage import main

main()
