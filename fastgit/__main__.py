"""Module entrypoint for ``python -m fastgit``."""

from .cli import main


if __name__ == "__main__":
    main()
