"""Entry point for ``python -m perfci.cli_entry`` and the console script."""

from .cli import main

__all__ = ["main"]

if __name__ == "__main__":
    main()
