"""Module entrypoint for ``python -m foldtree``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and view setup happen in ``foldtree.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
