"""Module entrypoint for ``python -m lazyjson``."""

from .cli import main


if __name__ == "__main__":
    main()
