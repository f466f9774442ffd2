"""Module entrypoint for ``python -m tfe``.

All argument parsing and runtime setup happen in ``tfe.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
