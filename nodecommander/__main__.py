"""Module entrypoint for ``python -m nodecommander``.

All argument parsing and runtime setup happen in ``nodecommander.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
