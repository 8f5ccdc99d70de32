"""sessionizer: jump between project directories with an inline fuzzy picker.

``main`` runs the command line; the picker itself lives in
``sessionizer.picker`` and project discovery in ``sessionizer.projects``.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(argv: list[str] | None = None) -> None:
    """Run the CLI; the import is deferred so ``import sessionizer`` stays cheap."""
    from .cli import main as cli_main

    cli_main(argv)


__all__ = ["__version__", "main"]
