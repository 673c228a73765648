"""trydir: pick, create, or clone dated experiment directories.

The command prints one shell line for the ``try`` wrapper function to eval;
see ``trydir.cli`` for the entrypoint and ``trydir.selector`` for the UI.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(argv: list[str] | None = None, environ=None) -> None:
    """Run the CLI; the import is deferred so ``__version__`` stays cheap."""
    from .cli import main as _main

    _main(argv, environ)


__all__ = ["main", "__version__"]
